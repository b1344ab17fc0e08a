"""Compact coloured console logging: ``LEVEL target > message``."""

from __future__ import annotations

import logging
import os
import sys
from enum import Enum

_TRACE_LEVEL = 5
logging.addLevelName(_TRACE_LEVEL, "TRACE")

_RESET = "\x1b[0m"
_BOLD = "\x1b[1m"


class LoggerLevel(Enum):
    """Verbosity of the console logger; ``NONE`` disables it."""

    ERROR = logging.ERROR
    WARNING = logging.WARNING
    INFO = logging.INFO
    DEBUG = logging.DEBUG
    TRACE = _TRACE_LEVEL
    NONE = None


def split_target(target: str) -> str:
    """Return the top-level package of a dotted logger name."""
    module, _, _ = target.partition(".")
    return module


def _level_style(levelno: int) -> tuple[str, str]:
    if levelno >= logging.ERROR:
        return "ERROR", "31"
    if levelno >= logging.WARNING:
        return "WARN ", "33"
    if levelno >= logging.INFO:
        return "INFO ", "32"
    if levelno >= logging.DEBUG:
        return "DEBUG", "34"
    return "TRACE", "35"


def colored_level(levelno: int) -> str:
    """Return the five-character level label wrapped in its colour."""
    label, code = _level_style(levelno)
    return f"\x1b[{code}m{label}{_RESET}"


def _should_colorize() -> bool:
    force = os.environ.get("CLICOLOR_FORCE")
    if force is not None and force != "0":
        return True
    if "NO_COLOR" in os.environ:
        return False
    if os.environ.get("CLICOLOR") == "0":
        return False
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


class PrettyFormatter(logging.Formatter):
    """Formats records as ``LEVEL target > message`` with aligned targets."""

    def __init__(self, use_color: bool | None = None) -> None:
        super().__init__()
        self.use_color = use_color
        self._max_width = 0

    def format(self, record: logging.LogRecord) -> str:
        target = split_target(record.name)
        self._max_width = max(self._max_width, len(target))
        width = self._max_width

        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        color = _should_colorize() if self.use_color is None else self.use_color
        if color:
            level = colored_level(record.levelno)
            name = f"{_BOLD}{target:<{width}}{_RESET}"
        else:
            level = _level_style(record.levelno)[0]
            name = f"{target:<{width}}"
        return f"{level} {name} > {message}"


class _StdoutHandler(logging.Handler):
    """Handler that always writes to the current ``sys.stdout``."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            stream = sys.stdout
            stream.write(self.format(record) + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)


def _installed(root: logging.Logger) -> bool:
    return any(isinstance(h.formatter, PrettyFormatter) for h in root.handlers)


class Logger:
    """Installs the pretty console logger on the root logger."""

    @staticmethod
    def init() -> None:
        """Install at INFO level; raise RuntimeError if already installed."""
        if not Logger.try_init():
            raise RuntimeError("Failed to set logger")

    @staticmethod
    def try_init() -> bool:
        """Install at INFO level; return False if already installed."""
        return Logger.try_init_with_level(LoggerLevel.INFO)

    @staticmethod
    def init_with_level(level: LoggerLevel) -> None:
        """Install at ``level``; raise RuntimeError if already installed."""
        if not Logger.try_init_with_level(level):
            raise RuntimeError("Failed to set logger with level")

    @staticmethod
    def try_init_with_level(level: LoggerLevel) -> bool:
        """Install at ``level``; ``NONE`` installs nothing and succeeds."""
        levelno = LoggerLevel(level).value
        if levelno is None:
            return True

        root = logging.getLogger()
        if _installed(root):
            return False

        handler = _StdoutHandler()
        handler.setFormatter(PrettyFormatter())
        handler.setLevel(levelno)
        root.addHandler(handler)
        root.setLevel(levelno)
        return True