"""Loguru setup."""

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with a single stderr sink."""
    logger.remove()
    logger.configure(
        handlers=[
            {
                "sink": sys.stderr,
                "level": level.upper(),
                "format": LOG_FORMAT,
                "colorize": True,
            },
        ]
    )
