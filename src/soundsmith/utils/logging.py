"""Console logging formatter for Soundsmith."""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Any

PACKAGE_PREFIX = "soundsmith."


class ColoredFormatter(logging.Formatter):
    """Formatter that colours the level name and shortens package logger names.

    ``soundsmith.application.services.playback_session`` is shown as
    ``application.services.playback_session``; third-party loggers keep their
    full name. Colours are disabled when ``NO_COLOR`` is set or the stream is
    not a TTY.
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",     # cyan
        logging.INFO: "\033[32m",      # green
        logging.WARNING: "\033[33m",   # yellow
        logging.ERROR: "\033[31m",     # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: Any = "%",
        *,
        stream: IO[str] | None = None,
        use_color: bool | None = None,
    ) -> None:
        super().__init__(fmt, datefmt, style)
        self._stream = stream
        self._force_color = use_color

    def _use_color(self) -> bool:
        if self._force_color is not None:
            return self._force_color
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = self._stream or sys.stdout
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        record = logging.makeLogRecord(record.__dict__)
        if record.name.startswith(PACKAGE_PREFIX):
            record.name = record.name[len(PACKAGE_PREFIX) :]
        if self._use_color():
            color = self.COLORS.get(record.levelno, "")
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)
