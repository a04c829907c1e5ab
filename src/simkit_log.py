"""
GolfSim Toolkit Logging

Operator status lines, mirrored to the toolkit log file.
"""

import logging
import os
from typing import Optional


LOGGER_NAME = "simkit"
LOG_FILENAME = "simkit.log"

MARKER_LEVELS = {
    "*": logging.INFO,
    "+": logging.INFO,
    "!": logging.WARNING,
    "X": logging.ERROR,
}

logger = logging.getLogger(LOGGER_NAME)


def status(marker: str, message: str) -> None:
    """Print an operator status line and record it in the log."""
    print(f"[{marker}] {message}")
    logger.log(MARKER_LEVELS.get(marker, logging.INFO), message)


def configure_logging(log_dir: str) -> Optional[str]:
    """Attach a file handler under log_dir and return the log file path.

    Returns None when the folder cannot be written; output then stays on
    the console only.
    """

    path = os.path.join(log_dir, LOG_FILENAME)

    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == os.path.abspath(path):
            return path

    try:
        os.makedirs(log_dir, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
    except OSError as exc:
        status("!", f"Logging to console only, cannot write {log_dir}: {exc}")
        return None

    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

    return path
