from __future__ import annotations

from typing import Protocol

from chatroom.application.dto.registration import RegistrationDraft


class RegistrationDraftStore(Protocol):
    ttl_seconds: int

    async def save(self, draft: RegistrationDraft) -> str:
        """Store a draft and return its id. The draft expires after ttl_seconds."""
        ...

    async def get(self, draft_id: str) -> RegistrationDraft | None: ...

    async def discard(self, draft_id: str) -> None: ...
