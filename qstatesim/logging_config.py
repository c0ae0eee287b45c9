# qstatesim/logging_config.py
from __future__ import annotations

import logging

from qstatesim.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | int | None = None) -> logging.Logger:
    """
    Configure root logging once and return the package logger.

    `level` overrides settings.LOG_LEVEL for this process.
    """
    chosen = level if level is not None else get_settings().LOG_LEVEL
    if isinstance(chosen, str):
        chosen = chosen.upper()

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=chosen, format=LOG_FORMAT)

    logger = logging.getLogger("qstatesim")
    logger.setLevel(chosen)
    return logger
