"""Loguru configuration."""

import sys

from loguru import logger

from .config import settings


def setup_logging(level: str | None = None):
    """Configure loguru for structured logging.

    Sets up logging with the configured log level from settings.
    Logs are written to stderr so they never mix with rendered output on stdout.

    Args:
        level: Optional override for settings.LOG_LEVEL
    """
    # Remove default handler
    logger.remove()

    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level> | {extra}",
        level=(level or settings.LOG_LEVEL).upper(),
        serialize=False,
        colorize=True,
        backtrace=True,
        diagnose=settings.ENVIRONMENT == "development",
    )

    logger.debug("Logging configured", level=level or settings.LOG_LEVEL)
