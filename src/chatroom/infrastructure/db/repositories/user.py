from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from chatroom.domain.entities.user import User
from chatroom.infrastructure.db.mappers import user as mapper
from chatroom.infrastructure.db.models.user import UserModel


class UserReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: int) -> User | None:
        model = await self._session.get(UserModel, user_id)
        return mapper.model_to_entity(model) if model else None

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(UserModel).where(UserModel.email == email)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None


class UserWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
    ) -> User | None:
        model = UserModel(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=password_hash,
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError:
            # unique email lost a race with a concurrent registration
            await self._session.rollback()
            return None
        await self._session.refresh(model)
        return mapper.model_to_entity(model)
