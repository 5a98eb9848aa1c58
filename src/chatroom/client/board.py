"""Local view of the message set, as the client currently displays it."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Callable, Iterable

from chatroom.api.v1.schemas.message import AuthoredMessageResponse
from chatroom.application.ports.clock import Clock, SystemClock

logger = logging.getLogger(__name__)

NO_MESSAGES = "No messages found"


class BoardMode(StrEnum):
    ALL = "all"
    SEARCH = "search"


class NotificationLevel(StrEnum):
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


_LOG_LEVELS = {
    NotificationLevel.SUCCESS: logging.INFO,
    NotificationLevel.WARNING: logging.WARNING,
    NotificationLevel.DANGER: logging.ERROR,
}


@dataclass(frozen=True, slots=True)
class Notification:
    text: str
    level: NotificationLevel
    created_at: datetime


class MessageBoard:
    """Holds the displayed messages and transient notifications.

    Every update replaces the whole set; nothing is patched in place, so any
    per-message state a UI keeps is dropped on refresh.
    """

    def __init__(
        self,
        *,
        on_change: Callable[[MessageBoard], None] | None = None,
        notification_ttl: float = 3.0,
        clock: Clock | None = None,
    ) -> None:
        self.current_user_id: int | None = None
        self._messages: list[AuthoredMessageResponse] = []
        self._mode = BoardMode.ALL
        self._notifications: deque[Notification] = deque(maxlen=20)
        self._notification_ttl = timedelta(seconds=notification_ttl)
        self._on_change = on_change
        self._clock = clock or SystemClock()

    @property
    def messages(self) -> list[AuthoredMessageResponse]:
        return list(self._messages)

    @property
    def mode(self) -> BoardMode:
        return self._mode

    def replace(
        self,
        messages: Iterable[AuthoredMessageResponse],
        mode: BoardMode = BoardMode.ALL,
    ) -> None:
        self._messages = list(messages)
        self._mode = mode
        self._changed()

    def is_own(self, message: AuthoredMessageResponse) -> bool:
        return self.current_user_id is not None and message.user_id == self.current_user_id

    def notify(self, text: str, level: NotificationLevel = NotificationLevel.SUCCESS) -> None:
        logger.log(_LOG_LEVELS[level], "%s", text)
        self._notifications.append(Notification(text, level, self._clock.now()))
        self._changed()

    def notifications(self) -> list[Notification]:
        """Notifications younger than the display ttl."""
        cutoff = self._clock.now() - self._notification_ttl
        return [n for n in self._notifications if n.created_at >= cutoff]

    def render(self) -> list[str]:
        lines = [f"! [{n.level}] {n.text}" for n in self.notifications()]
        if not self._messages:
            lines.append(NO_MESSAGES)
            return lines
        for m in self._messages:
            marker = "*" if self.is_own(m) else " "
            stamp = m.created_at.astimezone().strftime("%Y-%m-%d %H:%M")
            lines.append(f"{marker} #{m.id} {m.full_name} ({stamp}): {m.text}")
        return lines

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self)
