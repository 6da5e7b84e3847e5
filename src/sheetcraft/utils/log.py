"""Logging setup for sheetcraft.

Modules log through ``logging.getLogger(__name__)``; nothing is printed until an
application calls ``configure_logging``.
"""

import logging
import sys
from typing import Optional, Union


PACKAGE_LOGGER = "sheetcraft"

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: Union[int, str] = logging.WARNING, stream: Optional[object] = None) -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Calling it again only updates the level.

    Args:
        level: Logging level (name or number)
        stream: Output stream, stderr by default

    Returns:
        The ``sheetcraft`` logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    if not any(getattr(h, "_sheetcraft", False) for h in logger.handlers):
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT))
        handler._sheetcraft = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
