"""
Distributed lock.

Serializes work on one key (a participant) across workers via the
redis-py lock, falling back to an in-process asyncio lock when no Redis
client is available. Unrelated keys never block each other.
"""

import asyncio
import weakref
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger
from redis.asyncio import Redis
from redis.exceptions import LockError

from app.utils.exceptions import LockTimeoutError


# In-process locks, dropped once no holder or waiter references them
_local_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


def _get_local_lock(key: str) -> asyncio.Lock:
    lock = _local_locks.get(key)
    if lock is None:
        lock = asyncio.Lock()
        _local_locks[key] = lock
    return lock


class DistributedLock:
    """
    Keyed lock with Redis or in-process backend.

    Example:
        lock = DistributedLock(redis_client=redis_client)
        async with lock.lock("pairing:U1", timeout=30):
            ...
    """

    def __init__(
        self,
        redis_client: Redis | None = None,
        prefix: str = "lock:",
        poll_interval: float = 0.05,
    ) -> None:
        """
        Initialize lock.

        Args:
            redis_client: Async Redis client (None = in-process locking)
            prefix: Redis key prefix
            poll_interval: Delay between acquisition attempts in seconds
        """
        self.redis_client = redis_client
        self.prefix = prefix
        self.poll_interval = poll_interval

    @asynccontextmanager
    async def lock(
        self,
        key: str,
        timeout: int = 30,
        blocking_timeout: float = 5.0,
    ) -> AsyncIterator[None]:
        """
        Hold the lock for ``key`` while the block runs.

        Args:
            key: Lock key
            timeout: Redis key expiry in seconds (guards against dead holders)
            blocking_timeout: Max seconds to wait for acquisition

        Raises:
            LockTimeoutError: If the lock could not be acquired in time
        """
        if self.redis_client is None:
            local_lock = _get_local_lock(key)
            try:
                await asyncio.wait_for(local_lock.acquire(), timeout=blocking_timeout)
            except TimeoutError:
                raise LockTimeoutError(f"Lock {key!r} is busy", key=key) from None
            try:
                yield
            finally:
                local_lock.release()
            return

        name = f"{self.prefix}{key}"
        redis_lock = self.redis_client.lock(
            name,
            timeout=timeout,
            sleep=self.poll_interval,
            blocking_timeout=blocking_timeout,
        )
        try:
            acquired = await redis_lock.acquire()
        except LockError as e:
            raise LockTimeoutError(f"Lock {key!r} is busy", key=key) from e
        if not acquired:
            raise LockTimeoutError(f"Lock {key!r} is busy", key=key)

        logger.debug(f"Lock acquired: {name}")
        try:
            yield
        finally:
            try:
                await redis_lock.release()
            except LockError as e:
                # Key expired before release; another holder may own it now
                logger.warning(f"Failed to release lock {name}: {e}")
