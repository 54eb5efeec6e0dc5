"""Logger capability consumed by the client.

The client never reaches for a global logger; it is handed something that
satisfies :class:`Logger`. :class:`LoggingAdapter` is the default and routes
every level to a stdlib :mod:`logging` logger.
"""

from __future__ import annotations

import logging
from pprint import pformat
from typing import Any, Protocol

DEPRECATED = 35
SECURITY = 55

# Rule framing the sections of multi-line log reports.
BANNER = "----------------------"

logging.addLevelName(DEPRECATED, "DEPRECATED")
logging.addLevelName(SECURITY, "SECURITY")


class Logger(Protocol):
    """Seven-level logging capability.

    Each method accepts a plain string or any structured value; structured
    values are rendered to a readable, nested representation.
    """

    def debug(self, message: Any) -> None: ...

    def info(self, message: Any) -> None: ...

    def warn(self, message: Any) -> None: ...

    def deprecated(self, message: Any) -> None: ...

    def error(self, message: Any) -> None: ...

    def fatal(self, message: Any) -> None: ...

    def security(self, message: Any) -> None: ...


def render_message(message: Any) -> str:
    """Render a log message, pretty-printing anything that is not a string."""
    if isinstance(message, str):
        return message
    if isinstance(message, (bytes, bytearray)):
        return bytes(message).decode("utf-8", errors="replace")
    return pformat(message, width=100, sort_dicts=False)


class LoggingAdapter:
    """Logger backed by a stdlib ``logging.Logger``.

    Level filtering and persistence are whatever the wrapped logger's
    handlers are configured to do.
    """

    def __init__(self, logger: logging.Logger | str | None = None) -> None:
        if logger is None or isinstance(logger, str):
            logger = logging.getLogger(logger or "courier")
        self._logger = logger

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _log(self, level: int, message: Any) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, "%s", render_message(message))

    def debug(self, message: Any) -> None:
        self._log(logging.DEBUG, message)

    def info(self, message: Any) -> None:
        self._log(logging.INFO, message)

    def warn(self, message: Any) -> None:
        self._log(logging.WARNING, message)

    def deprecated(self, message: Any) -> None:
        self._log(DEPRECATED, message)

    def error(self, message: Any) -> None:
        self._log(logging.ERROR, message)

    def fatal(self, message: Any) -> None:
        self._log(logging.CRITICAL, message)

    def security(self, message: Any) -> None:
        self._log(SECURITY, message)
