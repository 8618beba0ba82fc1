"""Logging setup for the benchshare package logger."""
from __future__ import annotations
import logging

_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    package_logger = logging.getLogger("benchshare")
    package_logger.setLevel(level.upper())

    has_non_null_handler = any(
        not isinstance(handler, logging.NullHandler)
        for handler in package_logger.handlers
    )
    if has_non_null_handler:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    package_logger.addHandler(handler)
    package_logger.propagate = False
