"""Logging utilities for the Fn client.

Everything logs under the ``fnclient`` namespace. The console handler is
attached to that package logger only, so an application embedding the client
keeps its own root configuration.
"""

from __future__ import annotations

import logging
import os
from typing import IO, Optional, Union

PACKAGE_LOGGER = "fnclient"
LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s [%(threadName)s] | %(message)s"
LOG_LEVEL_ENV = "FN_LOG_LEVEL"
HANDLER_NAME = "fnclient-console"


def resolve_level(level: Union[int, str, None]) -> int:
    """Map a level name (``"debug"``) or number to a ``logging`` level.

    ``None`` falls back to ``$FN_LOG_LEVEL`` and then ``INFO``; unknown names
    also resolve to ``INFO``.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    level: Union[int, str, None] = None, stream: Optional[IO[str]] = None
) -> logging.Handler:
    """(Re)install the console handler on the package logger.

    Requests complete on worker threads while their results are applied on the
    event-loop thread, so the thread name is part of every record. A second
    call replaces the handler from the first; other handlers are kept.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        if existing.get_name() == HANDLER_NAME:
            logger.removeHandler(existing)

    handler = logging.StreamHandler(stream)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    logger.addHandler(handler)
    logger.setLevel(resolve_level(level))
    return handler


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``fnclient`` namespace."""
    qualified = name or PACKAGE_LOGGER
    if qualified != PACKAGE_LOGGER and not qualified.startswith(PACKAGE_LOGGER + "."):
        qualified = f"{PACKAGE_LOGGER}.{qualified}"
    if not logging.getLogger(PACKAGE_LOGGER).handlers:
        configure_logging()
    return logging.getLogger(qualified)
