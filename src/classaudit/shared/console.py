"""
Console output for classaudit.

Wraps the stdlib logger with optional colorama coloring and a second,
finer-grained "debug detail" dial used by the extraction pipeline.
"""

import enum
import logging
from typing import Any

from colorama import Fore, Style, init

classLogger = logging.getLogger("classaudit")


class DebugLevel(enum.IntEnum):
    BASIC = 1
    DETAILED = 2
    VERBOSE = 3

    @classmethod
    def parse(cls, value: "str | int | DebugLevel") -> "DebugLevel":
        if isinstance(value, DebugLevel):
            return value
        if isinstance(value, int):
            return cls(value)
        try:
            return cls[value.upper()]
        except KeyError:
            raise ValueError(
                f"Unknown debug level: {value!r} "
                f"(expected one of {', '.join(m.name.lower() for m in cls)})"
            )


class ConsoleManager:
    """Manages console output, respecting quiet/verbose/color flags."""

    def __init__(
        self,
        level: int = logging.INFO,
        no_color: bool = False,
        debug_level: "str | int | DebugLevel" = DebugLevel.BASIC,
    ):
        self.level = level
        self.no_color = no_color
        self.debug_level = DebugLevel.parse(debug_level)
        if not no_color:
            init(autoreset=True)

    def _log(self, msg: str, log_level: int, color: str = ""):
        if log_level < self.level:
            return

        if not self.no_color and color:
            msg = f"{color}{msg}{Style.RESET_ALL}"

        classLogger.log(log_level, msg)

    @property
    def enabled(self) -> bool:
        return self.level <= logging.DEBUG

    def debug(self, msg: str):
        self._log(msg, logging.DEBUG, Style.DIM)

    def info(self, msg: str):
        self._log(msg, logging.INFO)

    def warning(self, msg: str):
        self._log(msg, logging.WARNING, Fore.YELLOW)

    def error(self, msg: str):
        self._log(msg, logging.ERROR, Fore.RED)

    def critical(self, msg: str):
        self._log(msg, logging.CRITICAL, Fore.RED + Style.BRIGHT)

    def trace(self, msg: str, detail: DebugLevel = DebugLevel.BASIC):
        """Debug message gated by the detail dial as well as the log level."""
        if detail > self.debug_level:
            return
        self.debug(msg)

    def decision(self, decision: str, reason: str, detail: DebugLevel = DebugLevel.BASIC):
        self.trace(f"Decision: {decision} - {reason}", detail)

    def anomaly(self, description: str):
        self._log(f"Anomaly: {description}", logging.DEBUG, Fore.YELLOW)

    def summary(self, operation: str, items: list[Any]):
        self.trace(f"{operation} ({len(items)} items)")
        for i, item in enumerate(items):
            self.trace(f"  [{i}] {safe_repr(item)}", DebugLevel.VERBOSE)


class NullConsole(ConsoleManager):
    """Swallows everything. Default collaborator for library use."""

    def __init__(self):
        super().__init__(level=logging.CRITICAL + 1, no_color=True)

    def _log(self, msg: str, log_level: int, color: str = ""):
        return


def debug_console(level: "str | int | DebugLevel" = DebugLevel.BASIC) -> ConsoleManager:
    """Console for ad-hoc debugging from library code (no CLI bootstrapping)."""
    logging.basicConfig(format="[DEBUG %(name)s] %(message)s")
    classLogger.setLevel(logging.DEBUG)
    return ConsoleManager(level=logging.DEBUG, no_color=True, debug_level=level)


def safe_repr(value: Any, limit: int = 80) -> str:
    try:
        text = repr(value)
    except Exception as e:
        return f"[repr failed: {type(e).__name__}]"
    return text if len(text) <= limit else f"{text[:limit]}..."
