"""Logger configuration for the language server."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """Configure loguru for stderr and optional file output.

    stdout carries the LSP stream, so console output always goes to stderr.
    The file sink rotates and compresses old logs.
    """

    # Remove default loguru handler
    logger.remove()

    logger.add(
        sink=sys.stderr,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        level=level,
        colorize=False,
    )

    if log_file:
        logger.add(
            sink=str(log_file),
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level=level,
            rotation="10 MB",
            retention="7 days",
            compression="gz",
            enqueue=True,  # Thread-safe logging
        )

        logger.info(f"File logging enabled: {log_file}")

    logger.debug(f"Log level: {level}")
