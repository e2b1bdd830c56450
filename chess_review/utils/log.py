"""
Logging setup for command-line tools and long-running reviews.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False):
    """Configure console logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_file_logger(log_file: Optional[Path] = None, debug: bool = True) -> logging.Logger:
    """
    Send the package's log output to a file.

    Engine traffic is logged at DEBUG ('>>>' outbound, '<<<' inbound), so a
    debug file log records the whole protocol exchange.

    Args:
        log_file: Destination (default: ~/.chess_review/review.log)
        debug: If True, log at DEBUG level; otherwise INFO level

    Returns:
        Configured package logger
    """
    if log_file is None:
        log_dir = Path.home() / ".chess_review"
        log_dir.mkdir(exist_ok=True)
        log_file = log_dir / "review.log"

    logger = logging.getLogger("chess_review")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    logger.handlers.clear()

    handler = logging.FileHandler(log_file, mode="w")
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
