"""
Logging configuration.

Installs loguru sinks for console output and a rotating log file.
"""

import sys
from pathlib import Path

from loguru import logger

from investclub.config.settings import Settings, settings as default_settings


def setup_logging(settings: Settings | None = None) -> None:
    """
    Configure loguru sinks.

    Args:
        settings: Settings to read level and file path from
    """
    settings = settings or default_settings

    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
            "<level>{message}</level>"
        ),
    )

    log_path = Path(settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        str(log_path),
        rotation="1 day",
        retention="7 days",
        level=settings.log_level,
        encoding="utf-8",
    )
    logger.info(
        f"Logging configured: level={settings.log_level}, file={log_path}"
    )
