"""
User notification sinks.

Business logic returns structured results; a notifier turns them into
user-facing feedback. Kinds are "success", "error" and "info".
"""

from __future__ import annotations

import logging
from typing import List, Literal, Optional, Protocol, Tuple, runtime_checkable

from rich.console import Console

from schooney.utils.logging import get_logger

NotificationKind = Literal["success", "error", "info"]

_LEVELS = {"success": logging.INFO, "info": logging.INFO, "error": logging.WARNING}
_STYLES = {"success": "green", "info": "cyan", "error": "bold red"}


@runtime_checkable
class Notifier(Protocol):
    def notify(self, kind: NotificationKind, message: str) -> None:
        ...


class LoggingNotifier:
    """Writes notifications to the application log."""

    def __init__(self, logger_name: str = "schooney.notifications") -> None:
        self._log = get_logger(logger_name)

    def notify(self, kind: NotificationKind, message: str) -> None:
        self._log.log(_LEVELS[kind], message, extra={"kind": kind})


class ConsoleNotifier:
    """Prints notifications with rich styling."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def notify(self, kind: NotificationKind, message: str) -> None:
        self.console.print(f"[{_STYLES[kind]}]{message}[/{_STYLES[kind]}]")


class RecordingNotifier:
    """Collects notifications in memory."""

    def __init__(self) -> None:
        self.messages: List[Tuple[NotificationKind, str]] = []

    def notify(self, kind: NotificationKind, message: str) -> None:
        self.messages.append((kind, message))

    @property
    def last(self) -> Optional[Tuple[NotificationKind, str]]:
        return self.messages[-1] if self.messages else None


__all__ = [
    "ConsoleNotifier",
    "LoggingNotifier",
    "NotificationKind",
    "Notifier",
    "RecordingNotifier",
]
