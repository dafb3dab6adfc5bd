"""
Process-wide logging setup.
"""

from __future__ import annotations

import logging

from . import config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging() -> None:
    """
    Configure the root logger once. Safe to call again (e.g. per test app startup).
    """
    root = logging.getLogger()
    level = logging.getLevelName(config.log_level())
    if not isinstance(level, int):
        level = logging.INFO

    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    root.setLevel(level)
