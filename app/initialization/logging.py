"""
Initialization - Logging Module.

Configures loguru logger for workers and scripts.
Sets up log rotation and retention policies.
"""

import sys

from loguru import logger

from app.config.settings import settings


def setup_logging(log_file: str | None = None, level: str | None = None) -> None:
    """
    Configure logger with stderr output and file rotation.

    Args:
        log_file: Log file path (defaults to settings.log_file)
        level: Minimum level (defaults to settings.log_level)
    """
    level = level or settings.log_level
    logger.remove()
    logger.add(sys.stderr, level=level)
    logger.add(
        log_file or settings.log_file,
        rotation="1 day",
        retention="7 days",
        level=level,
        encoding="utf-8",
    )

    logger.info(f"Logging configured (environment={settings.environment}, level={level})")
