"""Logging configuration."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str | Path] = None,
    rotation: str = "10 MB",
    retention: str = "1 week",
) -> None:
    """Replace loguru's default handler by a console handler (and optionally a file handler) at `level`.

    Args:
        level: Minimum log level.
        log_file: Optional path to a log file.
        rotation: When the log file is rotated.
        retention: How long rotated log files are kept.
    """
    logger.remove()

    logger.add(
        sys.stderr,
        level=level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            level=level.upper(),
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}",
            rotation=rotation,
            retention=retention,
        )

    logger.debug(f"Logging configured at level: {level}")
