"""Logging configuration for the API

Console output always; rotating files under LOG_DIR when it is configured.
"""
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from storyboard.core.config import settings


def setup_logging(log_level: Optional[str] = None, log_dir: Optional[str] = None):
    """Configure loguru sinks.

    Args:
        log_level: Optional override for settings.LOG_LEVEL
        log_dir: Optional override for settings.LOG_DIR
    """
    level = (log_level or settings.LOG_LEVEL).upper()
    directory = log_dir or settings.LOG_DIR

    logger.remove()
    logger.configure(extra={"name": "storyboard"})

    logger.add(
        sys.stdout,
        format=settings.LOG_FORMAT,
        level=level,
        colorize=True,
    )

    if directory:
        path = Path(directory)
        path.mkdir(parents=True, exist_ok=True)

        logger.add(
            path / "api.log",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function} - {message}",
            level="INFO",
            rotation="1 day",
            retention="30 days",
            compression="zip",
            enqueue=True,
        )

        # errors get their own file with full tracebacks
        logger.add(
            path / "error.log",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} - {message}",
            level="ERROR",
            rotation="1 day",
            retention="30 days",
            compression="zip",
            enqueue=True,
            backtrace=True,
            diagnose=False,
        )

    logger.info(f"Logging initialized | level={level} | dir={directory or '-'}")


def get_logger(name: str):
    """Return a logger bound to a module name."""
    return logger.bind(name=name)
