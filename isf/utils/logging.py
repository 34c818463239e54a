"""
Logging helpers for hosts embedding the ISF parser.

Modules only emit records through ``logging.getLogger(__name__)``; nothing is
printed unless the host configures logging, either globally or through
:func:`configure_logging`.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "isf"
DEFAULT_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"


def configure_logging(
    level: int = logging.INFO,
    format: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Give the ``isf`` logger its own stream handler, exactly once.

    Records handled here do not propagate to the root logger, so an
    application-wide configuration does not print them twice.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    if logger.handlers:
        # Respect any user provided configuration.
        return logger

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(format or DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
