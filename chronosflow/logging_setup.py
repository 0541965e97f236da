"""Logging configuration for ChronosFlow."""

import logging
import os
import sys


class _ThirdPartyNoiseFilter(logging.Filter):
    """Keep chronosflow logs; only warnings and errors from other libraries."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("chronosflow"):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: str = None) -> None:
    """Configure the root logger once, early at startup.

    Args:
        level: Level name; defaults to the LOG_LEVEL environment variable (INFO)
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    # Remove any pre-existing handlers to avoid duplicates.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    handler.addFilter(_ThirdPartyNoiseFilter())
    root.addHandler(handler)
