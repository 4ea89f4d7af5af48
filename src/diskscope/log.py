"""Logging setup for diskscope."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from diskscope.config import CONFIG_DIR

LOG_DIR = CONFIG_DIR / "logs"


def setup_logging(level: str = "WARNING", verbose: bool = False, log_dir: Optional[Path] = None) -> None:
    """Configure loguru: coloured console output plus a rotating log file."""
    console_level = "DEBUG" if verbose else level.upper()
    log_dir = log_dir or LOG_DIR

    logger.remove()

    fmt_console = "<level>{level: <8}</level> | <cyan>{name}:{function}:{line}</cyan> - <level>{message}</level>"
    logger.add(sys.stderr, level=console_level, format=fmt_console, colorize=True)

    fmt_file = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {thread.name} | {name}:{function}:{line} - {message}"
    log_file = log_dir / "diskscope_{time:YYYY-MM-DD}.log"
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_file),
            level="DEBUG",
            format=fmt_file,
            rotation="1 day",
            retention="7 days",
            encoding="utf-8",
        )
        logger.debug(f"Logging initialized. Level: {console_level}. Log file: {log_file}")
    except OSError as e:
        logger.warning(f"File logging disabled, cannot write to {log_dir}: {e}")
