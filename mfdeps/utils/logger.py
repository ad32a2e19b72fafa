"""
Logging utilities for mfdeps.

Every module logs through ``get_logger(<short name>)``, which places it
under the ``mfdeps`` logger. Nothing is emitted until the CLI calls
:func:`setup_logging` with the ``-v`` count:

======  =========  ==========================================
``-v``  level      format
======  =========  ==========================================
0       WARNING    ``WARNING: message``
1       INFO       ``INFO: message``
2+      DEBUG      timestamp, logger name, level and message
======  =========  ==========================================

Records go to stderr so they never mix with command output on stdout.
"""

from __future__ import annotations

import os
import sys
import logging
import threading
from typing import IO, Optional

from mfdeps.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

ROOT_LOGGER_NAME = "mfdeps"

_lock = threading.Lock()

# Silent until setup_logging installs a real handler
logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def verbosity_to_level(verbosity: int) -> int:
    """Map a ``-v`` count to a logging level."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def stream_supports_color(stream: IO[str]) -> bool:
    """Return True if ANSI colors should be written to ``stream``.

    ``NO_COLOR`` and ``CI`` turn colors off; otherwise the stream must be a
    terminal.
    """
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return stream.isatty()
    except (AttributeError, OSError, ValueError):
        return False


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name with ANSI escapes.

    Args:
        fmt: Log record format.
        datefmt: Timestamp format.
        use_color: Emit colors; decided once by the caller for its stream.
    """

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str,
        *,
        datefmt: Optional[str] = None,
        use_color: bool = False,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color

    def formatMessage(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno) if self.use_color else None
        if color is None:
            return super().formatMessage(record)

        plain = record.levelname
        record.levelname = f"{color}{plain}{self.RESET}"
        try:
            return super().formatMessage(record)
        finally:
            record.levelname = plain


def setup_logging(verbosity: int = 0, *, stream: Optional[IO[str]] = None) -> int:
    """Install the single mfdeps log handler.

    Calling it again replaces the previous handler.

    Args:
        verbosity: Number of ``-v`` flags given on the command line.
        stream: Output stream; defaults to ``sys.stderr``.

    Returns:
        The logging level now in effect.
    """
    level = verbosity_to_level(verbosity)
    target = stream or sys.stderr
    fmt = LOG_VERBOSE_FORMAT if level <= logging.DEBUG else LOG_DEFAULT_FORMAT

    handler = logging.StreamHandler(target)
    handler.setFormatter(
        ColoredFormatter(
            fmt,
            datefmt=LOG_DATE_FORMAT,
            use_color=stream_supports_color(target),
        )
    )

    with _lock:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.handlers[:] = [handler]
        root_logger.setLevel(level)
        root_logger.propagate = False

    return level


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger within the mfdeps namespace.

    Args:
        name: Short name (``"reconciler"``) or full dotted name
            (``"mfdeps.core.reconciler"``). Empty means the root logger.
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def disable_logging() -> None:
    """Drop the mfdeps handler so nothing is emitted."""
    with _lock:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.handlers[:] = [logging.NullHandler()]
        root_logger.setLevel(logging.NOTSET)
