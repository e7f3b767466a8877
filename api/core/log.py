"""
Process-wide logging setup.
"""

from __future__ import annotations

import logging

from . import config

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging() -> None:
    root = logging.getLogger()
    level = logging.getLevelName(config.log_level())
    if not isinstance(level, int):
        level = logging.INFO

    # Keep a single handler when the app module is imported more than once.
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)
