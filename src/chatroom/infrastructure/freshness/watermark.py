"""Process-wide "last write" watermark for the message set."""
from __future__ import annotations

import threading
from datetime import datetime

from chatroom.application.ports.clock import Clock, SystemClock
from chatroom.domain.value_objects.timestamps import ensure_utc


class InMemoryWatermark:
    """Single-process watermark.

    Writers serialize on a lock so the value never moves backwards, even if
    the wall clock does. Readers never take the lock: replacing the attribute
    is atomic, so a reader sees either the old or the new timestamp.
    """

    def __init__(self, clock: Clock | None = None, initial: datetime | None = None) -> None:
        self._clock = clock or SystemClock()
        self._value = ensure_utc(initial) if initial else self._clock.now()
        self._write_lock = threading.Lock()

    @property
    def value(self) -> datetime:
        return self._value

    def advance(self) -> None:
        now = self._clock.now()
        with self._write_lock:
            if now > self._value:
                self._value = now

    def has_changed_since(self, cursor: datetime) -> bool:
        return self._value > ensure_utc(cursor)
