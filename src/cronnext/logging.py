"""Logging setup for cronnext.

Library modules log through ``logging.getLogger(__name__)`` and never install
handlers. Applications (and the ``cronnext`` CLI) call
:func:`configure_logging` to route the ``cronnext`` logger to a stream.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOGGER_NAME = "cronnext"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    level: str | int = "WARNING",
    fmt: str = DEFAULT_FORMAT,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach a single stream handler to the ``cronnext`` logger.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Level name or number.
        fmt: ``logging.Formatter`` format string.
        stream: Destination (default: ``sys.stderr``).

    Returns:
        The configured ``cronnext`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, "_cronnext_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    handler._cronnext_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.propagate = False
    return logger
