from __future__ import annotations

from datetime import datetime

from sqlalchemy import Select, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from chatroom.domain.entities.message import AuthoredMessage, Message
from chatroom.infrastructure.db.mappers import message as mapper
from chatroom.infrastructure.db.models.message import MessageModel
from chatroom.infrastructure.db.models.user import UserModel


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _authored_select() -> Select:
    return (
        select(MessageModel, UserModel.first_name, UserModel.last_name)
        .join(UserModel, MessageModel.user_id == UserModel.id)
        .order_by(MessageModel.id.asc())
    )


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_with_authors(self) -> list[AuthoredMessage]:
        result = await self._session.execute(_authored_select())
        return [mapper.model_to_authored(m, first, last) for m, first, last in result.all()]

    async def search_with_authors(self, text: str) -> list[AuthoredMessage]:
        stmt = _authored_select().where(
            MessageModel.text.ilike(f"%{_escape_like(text)}%", escape="\\")
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_authored(m, first, last) for m, first, last in result.all()]


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, user_id: int, text: str, ts: datetime) -> Message:
        model = MessageModel(user_id=user_id, text=text, created_at=ts, updated_at=ts)
        self._session.add(model)
        await self._session.flush()
        return mapper.model_to_entity(model)

    async def update_text(
        self, message_id: int, user_id: int, text: str, ts: datetime,
    ) -> Message | None:
        stmt = (
            update(MessageModel)
            .where(MessageModel.id == message_id, MessageModel.user_id == user_id)
            .values(text=text, updated_at=ts)
            .returning(MessageModel)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def delete(self, message_id: int, user_id: int) -> bool:
        stmt = delete(MessageModel).where(
            MessageModel.id == message_id,
            MessageModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0
