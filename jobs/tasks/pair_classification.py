"""
Pair classification task.

Evaluates every session window closed since each participant's checkpoint.
Scheduled shortly after each window boundary; running it more often is
harmless because classification is idempotent.
"""

from datetime import datetime

import dramatiq
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.services.pair_classifier_service import PairClassifierService
from app.utils.datetime_utils import utc_now
from app.utils.distributed_lock import DistributedLock
from app.utils.exceptions import LockTimeoutError, NetworkCoreError
from app.utils.redis_utils import get_redis_client
from jobs.async_runner import run_async
from jobs.utils.database import create_task_engine, create_task_session_maker


async def classify_participant(
    session_maker: async_sessionmaker[AsyncSession],
    participant_id: str,
    now: datetime,
    lock: DistributedLock | None = None,
) -> int:
    """
    Classify due windows of one participant.

    Args:
        session_maker: Session factory bound to the current event loop
        participant_id: Owner of the legs
        now: Evaluation moment
        lock: Per-participant lock

    Returns:
        Number of pairs matched
    """
    async with session_maker() as session:
        service = PairClassifierService(session, lock=lock)
        results = await service.classify_due_windows(participant_id, now)
    return sum(r.pairs_matched for r in results)


async def classify_all(
    session_maker: async_sessionmaker[AsyncSession],
    now: datetime,
    lock: DistributedLock | None = None,
) -> dict[str, int]:
    """
    Classify due windows of every participant with pending events.

    A participant that fails is logged and skipped; the others still run.

    Returns:
        Dict mapping participant id to pairs matched
    """
    async with session_maker() as session:
        participants = await PairClassifierService(session, lock=lock).participants_with_pending()

    matched: dict[str, int] = {}
    for participant_id in participants:
        try:
            matched[participant_id] = await classify_participant(
                session_maker, participant_id, now, lock=lock
            )
        except LockTimeoutError:
            logger.info(f"Participant {participant_id} busy, skipping this run")
        except NetworkCoreError as e:
            logger.warning(f"Classification of {participant_id} rejected: {e}")
    return matched


async def _run_with_task_resources(participant_id: str | None) -> dict[str, int]:
    engine = create_task_engine()
    session_maker = create_task_session_maker(engine)

    redis_client = None
    try:
        redis_client = await get_redis_client()
        await redis_client.ping()
    except Exception as e:
        logger.warning(f"Redis unavailable, falling back to in-process lock: {e}")
        redis_client = None

    lock = DistributedLock(redis_client=redis_client)
    now = utc_now()
    try:
        if participant_id is None:
            return await classify_all(session_maker, now, lock=lock)
        return {
            participant_id: await classify_participant(
                session_maker, participant_id, now, lock=lock
            )
        }
    finally:
        if redis_client:
            await redis_client.aclose()
        await engine.dispose()


@dramatiq.actor(max_retries=3, time_limit=600_000)  # 10 min timeout
def classify_due_windows_task(participant_id: str | None = None) -> None:
    """
    Classify due session windows.

    Args:
        participant_id: Single participant to classify (None = everyone
            with pending events)
    """
    logger.info("Starting pair classification...")

    matched = run_async(_run_with_task_resources(participant_id))

    logger.info(
        f"Pair classification complete: {len(matched)} participants, "
        f"{sum(matched.values())} pairs matched"
    )
