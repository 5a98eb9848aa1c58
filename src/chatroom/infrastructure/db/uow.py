from __future__ import annotations

from types import TracebackType
from typing import Self

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chatroom.infrastructure.db.repositories.message import (
    MessageReaderRepo,
    MessageWriterRepo,
)
from chatroom.infrastructure.db.repositories.user import UserReaderRepo, UserWriterRepo


class SqlAlchemyUoW:
    """Unit of work over one AsyncSession, opened for the ``async with`` block.

    Work that was not committed when the block exits is discarded with the
    session.
    """

    users: UserReaderRepo
    users_w: UserWriterRepo
    messages: MessageReaderRepo
    messages_w: MessageWriterRepo

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("unit of work used outside 'async with'")
        return self._session

    async def flush(self) -> None:
        await self.session.flush()

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    async def __aenter__(self) -> Self:
        session = self._session_factory()
        self._session = session
        self.users = UserReaderRepo(session)
        self.users_w = UserWriterRepo(session)
        self.messages = MessageReaderRepo(session)
        self.messages_w = MessageWriterRepo(session)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        session, self._session = self.session, None
        try:
            if exc_type is not None:
                await session.rollback()
        finally:
            await session.close()
