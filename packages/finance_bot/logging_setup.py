"""Console logging for the bot and the CLI.

Library modules ask for ``get_logger("finance_bot.<module>")`` and never add
handlers themselves. Entry points call :func:`configure_logging` once at
startup; it routes both our own records and python-telegram-bot's through a
single stderr handler.

Levels:

- ``finance_bot`` logs at the requested level (argument, else
  ``FINANCE_BOT_LOG_LEVEL``, else ``INFO``).
- ``telegram`` (``telegram.ext`` and friends) only shows warnings unless we
  run at ``DEBUG``; at ``INFO`` it reports every network retry.
- ``httpx`` is held at ``WARNING`` whatever the level, because its request
  lines contain the bot token in the URL.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

LOG_LEVEL_ENV = "FINANCE_BOT_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_PKG_LOGGER_NAME = "finance_bot"
_TELEGRAM_LOGGER_NAME = "telegram"
_HTTPX_LOGGER_NAME = "httpx"


class _ConsoleHandler(logging.StreamHandler):
    """Marker type so a second ``configure_logging`` call replaces, not stacks."""


def resolve_level(level: int | str | None = None) -> int:
    """Turn ``level`` (or ``FINANCE_BOT_LOG_LEVEL`` when it is ``None``) into a number.

    Accepts ints, digit strings and level names in any case. Anything
    unrecognised means ``INFO``.
    """

    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, "")
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def _install(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    for existing in list(logger.handlers):
        if isinstance(existing, (_ConsoleHandler, logging.NullHandler)):
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def configure_logging(level: int | str | None = None, *, stream: IO[str] = sys.stderr) -> int:
    """Send ``finance_bot`` and ``telegram`` records to ``stream``.

    Parameters
    ----------
    level:
        Level for our own loggers; see :func:`resolve_level`.
    stream:
        Destination of the shared handler.

    Returns the resolved level. Calling again swaps the handler for a new one.
    """

    resolved = resolve_level(level)
    handler = _ConsoleHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    _install(logging.getLogger(_PKG_LOGGER_NAME), handler, resolved)
    telegram_level = resolved if resolved <= logging.DEBUG else max(resolved, logging.WARNING)
    _install(logging.getLogger(_TELEGRAM_LOGGER_NAME), handler, telegram_level)
    logging.getLogger(_HTTPX_LOGGER_NAME).setLevel(logging.WARNING)
    return resolved


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``.

    Until :func:`configure_logging` runs, the package logger carries a
    ``NullHandler`` so importing the package never prints anything.
    """

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["LOG_FORMAT", "LOG_LEVEL_ENV", "configure_logging", "get_logger", "resolve_level"]
