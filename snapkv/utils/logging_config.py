"""Logging setup for command line entry points."""
import logging
from typing import Optional

from .config import Config


def setup_logging(level: Optional[str] = None):
    """Attach a single stream handler to the root logger unless one exists."""
    root = logging.getLogger()
    root.setLevel((level or Config.LOG_LEVEL).upper())
    logging.captureWarnings(True)

    if root.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=Config.LOG_FORMAT, datefmt=Config.LOG_DATE_FORMAT))
    root.addHandler(handler)
