# backend/farmdesk/services/notification_service.py

"""
Notification collaborator (toasts).

The core only ever calls notify(message, level) and never reads a return
value. Levels: success | error | info.
"""

from datetime import datetime
from enum import Enum
from threading import Lock
from typing import Any, Dict, List, Optional

from farmdesk.core.logger import get_logger

logger = get_logger("notify")


class NotifyLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class Notifier:
    def notify(self, message: str, level: NotifyLevel = NotifyLevel.INFO) -> None:
        raise NotImplementedError


class LoggingNotifier(Notifier):
    """Default sink when no UI is attached: the message goes to the log."""

    def notify(self, message: str, level: NotifyLevel = NotifyLevel.INFO) -> None:
        level = NotifyLevel(level)
        log = logger.error if level == NotifyLevel.ERROR else logger.info
        log(message, extra={"notify_level": level.value})


class RecordingNotifier(Notifier):
    """Keeps every notification so it can be listed or inspected."""

    def __init__(self, limit: Optional[int] = 200):
        self._lock = Lock()
        self._history: List[Dict[str, Any]] = []
        self._limit = limit

    def notify(self, message: str, level: NotifyLevel = NotifyLevel.INFO) -> None:
        entry = {
            "message": message,
            "level": NotifyLevel(level).value,
            "created_at": datetime.utcnow().isoformat(),
        }
        with self._lock:
            self._history.append(entry)
            if self._limit and len(self._history) > self._limit:
                self._history = self._history[-self._limit:]

    def history(self, level: Optional[str] = None) -> List[Dict[str, Any]]:
        with self._lock:
            items = list(self._history)
        if level:
            items = [i for i in items if i["level"] == level]
        return items

    def messages(self) -> List[str]:
        return [i["message"] for i in self.history()]

    def clear(self) -> None:
        with self._lock:
            self._history = []
