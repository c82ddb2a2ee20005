"""Loguru configuration shared by the API server and the CLI."""

import sys
from pathlib import Path

from loguru import logger

from opsboard.core.config import Settings, get_settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(settings: Settings | None = None, console: bool = True) -> None:
    """Configure loguru based on settings.

    Args:
        settings: Optional settings override. Uses default if not provided.
        console: Whether to also log to stderr.
    """
    settings = settings or get_settings()
    logger.remove()  # Remove default handler

    logs_dir = Path(settings.log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    logger.add(
        str(logs_dir / "opsboard_{time:YYYY-MM-DD}.log"),
        rotation="1 day",
        retention="7 days",
        level=settings.log_level,
        format=LOG_FORMAT,
    )

    if console:
        logger.add(
            sys.stderr,
            level="DEBUG" if settings.debug else settings.log_level,
            format=LOG_FORMAT,
            colorize=True,
        )
