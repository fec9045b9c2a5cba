"""Logging configuration for gpmdp-remote."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Outgoing frames are logged at DEBUG; INFO keeps only the connection and auth milestones
LOGGER_NAME = "gpmdp_remote"


def setup_logging(log_path: Path, level: str = "INFO") -> None:
    """Configure the package logger with a rotating file handler at the given level.

    Repeat calls only adjust the level; the file handler is attached once per process.
    """
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(level)
    if root.handlers:
        return

    handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    handler.setFormatter(logging.Formatter(fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)
