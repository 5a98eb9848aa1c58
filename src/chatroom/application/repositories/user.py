from __future__ import annotations

from typing import Protocol

from chatroom.domain.entities.user import User


class UserReader(Protocol):
    async def get_by_id(self, user_id: int) -> User | None: ...

    async def get_by_email(self, email: str) -> User | None: ...


class UserWriter(Protocol):
    async def create(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
    ) -> User | None:
        """Insert a user. Return None if the email is already taken."""
        ...
