from __future__ import annotations

from typing import Protocol

from chatroom.application.repositories.message import MessageReader, MessageWriter
from chatroom.application.repositories.user import UserReader, UserWriter


class UnitOfWork(Protocol):
    users: UserReader
    users_w: UserWriter
    messages: MessageReader
    messages_w: MessageWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...
