from __future__ import annotations

from typing import Protocol

from chatroom.application.dto.principal import Principal


class InvalidSessionError(Exception):
    """The session token is missing, expired or forged."""


class SessionCodec(Protocol):
    def issue(self, principal: Principal) -> str: ...

    async def verify(self, token: str) -> Principal:
        """Decode a session token or raise InvalidSessionError."""
        ...
