from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Message:
    id: int
    user_id: int
    text: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class AuthoredMessage:
    """A message joined with its author's display name."""

    id: int
    user_id: int
    text: str
    full_name: str
    created_at: datetime
    updated_at: datetime
