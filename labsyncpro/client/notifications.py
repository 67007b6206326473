from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Literal, Optional

log = logging.getLogger(__name__)

Level = Literal["success", "error", "warning", "info"]

_LOG_LEVELS = {
    "success": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass
class Notification:
    level: Level
    title: str
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Notifier:
    """Keeps a history of user-facing notifications and forwards them to a sink."""

    def __init__(self, sink: Optional[Callable[[Notification], None]] = None):
        self.history: List[Notification] = []
        self._sink = sink

    def notify(self, level: Level, title: str, message: str) -> Notification:
        note = Notification(level=level, title=title, message=message)
        self.history.append(note)
        log.log(_LOG_LEVELS[level], "%s: %s", title, message)
        if self._sink is not None:
            self._sink(note)
        return note

    def success(self, title: str, message: str) -> Notification:
        return self.notify("success", title, message)

    def error(self, title: str, message: str) -> Notification:
        return self.notify("error", title, message)

    def warning(self, title: str, message: str) -> Notification:
        return self.notify("warning", title, message)

    def info(self, title: str, message: str) -> Notification:
        return self.notify("info", title, message)

    @property
    def last(self) -> Optional[Notification]:
        return self.history[-1] if self.history else None
