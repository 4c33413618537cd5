#!/usr/bin/env python3
"""Initialize database tables and, optionally, the tree root."""

import argparse
import asyncio
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger


async def init_database(root_participant: str | None = None) -> None:
    """
    Create all database tables.

    Args:
        root_participant: Participant to seed as tree root (optional)
    """
    if not os.environ.get("DATABASE_URL"):
        logger.error("DATABASE_URL not set")
        sys.exit(1)

    from app.config.database import async_engine, async_session_maker
    from app.models import Base
    from app.services.placement_tree_service import PlacementTreeService
    from app.utils.exceptions import ConflictError

    logger.info("Connecting to database...")
    async with async_engine.begin() as conn:
        logger.info("Creating tables (checkfirst=True)...")
        await conn.run_sync(
            Base.metadata.create_all,
            checkfirst=True
        )

    if root_participant:
        async with async_session_maker() as session:
            try:
                await PlacementTreeService(session).create_root(root_participant)
                logger.info(f"Tree root {root_participant} created")
            except ConflictError as e:
                logger.warning(f"Tree root not created: {e}")

    await async_engine.dispose()
    logger.success("Database initialized successfully!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Create network tables"
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Participant id to seed as the tree root"
    )
    args = parser.parse_args()

    from app.initialization import setup_logging

    setup_logging()
    asyncio.run(init_database(args.root))
