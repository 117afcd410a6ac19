"""Logging setup for command line entry points.

Library modules only create module level loggers; handlers are installed here
and only when a front end asks for them.
"""

from __future__ import annotations

import logging
import sys

from .errors import InvalidInputError

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a stderr handler to the ``gittufviz`` logger.

    Calling it twice replaces the previous handler instead of duplicating
    output. Stdout is left alone because the MCP stdio transport owns it.
    """

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise InvalidInputError(f"Unknown log level: {level}")
        level = resolved

    logger = logging.getLogger("gittufviz")
    for handler in list(logger.handlers):
        if getattr(handler, "_gittufviz", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._gittufviz = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
