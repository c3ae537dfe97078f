"""
Transient user-facing notifications.
"""
import logging
from collections import deque
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Deque, List
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"

class Notification(BaseModel):
    """A short message shown to the user once."""
    level: NotificationLevel
    message: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

Listener = Callable[[Notification], None]

class Notifier:
    """Keeps recent notifications and forwards them to listeners."""

    def __init__(self, history: int = 20):
        self._pending: Deque[Notification] = deque(maxlen=history)
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def success(self, message: str) -> Notification:
        return self._emit(NotificationLevel.SUCCESS, message)

    def error(self, message: str) -> Notification:
        return self._emit(NotificationLevel.ERROR, message)

    def _emit(self, level: NotificationLevel, message: str) -> Notification:
        notification = Notification(level=level, message=message)
        if level is NotificationLevel.ERROR:
            logger.warning(message)
        else:
            logger.info(message)
        self._pending.append(notification)
        for listener in list(self._listeners):
            listener(notification)
        return notification

    @property
    def pending(self) -> List[Notification]:
        return list(self._pending)

    def drain(self) -> List[Notification]:
        """Return pending notifications and forget them."""
        items = list(self._pending)
        self._pending.clear()
        return items
