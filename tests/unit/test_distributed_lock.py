"""Tests for the keyed distributed lock."""

import asyncio

import pytest
from redis.exceptions import LockError, LockNotOwnedError

from app.utils.distributed_lock import DistributedLock
from app.utils.exceptions import LockTimeoutError


class TestLocalLock:
    """Tests for the in-process backend."""

    @pytest.mark.asyncio
    async def test_same_key_is_exclusive(self) -> None:
        lock = DistributedLock()
        order: list[str] = []

        async def worker(name: str) -> None:
            async with lock.lock("pairing:U1"):
                order.append(f"{name}-in")
                await asyncio.sleep(0.01)
                order.append(f"{name}-out")

        await asyncio.gather(worker("a"), worker("b"))

        assert order in (
            ["a-in", "a-out", "b-in", "b-out"],
            ["b-in", "b-out", "a-in", "a-out"],
        )

    @pytest.mark.asyncio
    async def test_busy_key_times_out(self) -> None:
        lock = DistributedLock()

        async with lock.lock("pairing:U2"):
            with pytest.raises(LockTimeoutError):
                async with lock.lock("pairing:U2", blocking_timeout=0.01):
                    pass

    @pytest.mark.asyncio
    async def test_unrelated_keys_do_not_block(self) -> None:
        lock = DistributedLock()

        async with lock.lock("pairing:U3"):
            async with lock.lock("pairing:U4", blocking_timeout=0.01):
                pass


class TestRedisLock:
    """Tests for the Redis backend with a mocked client."""

    @pytest.mark.asyncio
    async def test_acquire_and_release(self, mock_redis_client) -> None:
        lock = DistributedLock(redis_client=mock_redis_client, poll_interval=0.01)

        async with lock.lock("pairing:U1", timeout=30, blocking_timeout=2.0):
            pass

        mock_redis_client.lock.assert_called_once_with(
            "lock:pairing:U1", timeout=30, sleep=0.01, blocking_timeout=2.0
        )
        redis_lock = mock_redis_client.lock.return_value
        redis_lock.acquire.assert_awaited_once()
        redis_lock.release.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_busy_key_times_out(self, mock_redis_client) -> None:
        redis_lock = mock_redis_client.lock.return_value
        redis_lock.acquire.return_value = False
        lock = DistributedLock(redis_client=mock_redis_client)

        with pytest.raises(LockTimeoutError):
            async with lock.lock("pairing:U1", blocking_timeout=0.01):
                pass

        redis_lock.release.assert_not_called()

    @pytest.mark.asyncio
    async def test_lock_error_on_acquire(self, mock_redis_client) -> None:
        redis_lock = mock_redis_client.lock.return_value
        redis_lock.acquire.side_effect = LockError("Unable to acquire lock")
        lock = DistributedLock(redis_client=mock_redis_client)

        with pytest.raises(LockTimeoutError):
            async with lock.lock("pairing:U1"):
                pass

    @pytest.mark.asyncio
    async def test_expired_lock_release_is_logged(self, mock_redis_client) -> None:
        redis_lock = mock_redis_client.lock.return_value
        redis_lock.release.side_effect = LockNotOwnedError("expired")
        lock = DistributedLock(redis_client=mock_redis_client)
        ran = False

        async with lock.lock("pairing:U1"):
            ran = True

        assert ran
        redis_lock.release.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_body_error_releases_lock(self, mock_redis_client) -> None:
        lock = DistributedLock(redis_client=mock_redis_client)

        with pytest.raises(RuntimeError):
            async with lock.lock("pairing:U1"):
                raise RuntimeError("boom")

        mock_redis_client.lock.return_value.release.assert_awaited_once()
