from __future__ import annotations

from datetime import datetime
from typing import Protocol

from chatroom.domain.entities.message import AuthoredMessage, Message


class MessageReader(Protocol):
    async def list_with_authors(self) -> list[AuthoredMessage]:
        """All messages in insertion order, joined with author names."""
        ...

    async def search_with_authors(self, text: str) -> list[AuthoredMessage]:
        """Messages whose text contains ``text``, case-insensitively."""
        ...


class MessageWriter(Protocol):
    async def create(self, user_id: int, text: str, ts: datetime) -> Message: ...

    async def update_text(
        self, message_id: int, user_id: int, text: str, ts: datetime,
    ) -> Message | None:
        """Update an owned message. Return None if no such message belongs to user_id."""
        ...

    async def delete(self, message_id: int, user_id: int) -> bool: ...
