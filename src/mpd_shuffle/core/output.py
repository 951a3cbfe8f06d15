"""
Logging setup using Loguru.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"


def setup_loguru(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console_output: bool = True,
    max_file_size_mb: int = 10,
    backup_count: int = 5,
) -> None:
    """
    Configure loguru sinks.

    Args:
        level: Minimum level (TRACE, DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path of a rotating log file
        console_output: Whether to log to stderr
        max_file_size_mb: Rotate the log file at this size
        backup_count: Number of rotated files to keep
    """
    # Remove default handler
    logger.remove()

    if console_output:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            rotation=f"{max_file_size_mb} MB",
            retention=backup_count,
            level=level,
            format=FILE_FORMAT,
            enqueue=False,  # Synchronous writes
        )

    logger.debug(f"Loguru initialized (level={level}, file={log_file})")
