from __future__ import annotations

from datetime import datetime
from typing import Protocol


class FreshnessWatermark(Protocol):
    """Time of the last change to the message set."""

    @property
    def value(self) -> datetime: ...

    def advance(self) -> None: ...

    def has_changed_since(self, cursor: datetime) -> bool: ...
