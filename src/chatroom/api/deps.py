"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, HTTPException, Request, status

from chatroom.application.dto.principal import Principal
from chatroom.application.ports.auth import InvalidSessionError, SessionCodec
from chatroom.application.ports.clock import Clock, SystemClock
from chatroom.application.ports.drafts import RegistrationDraftStore
from chatroom.application.ports.passwords import PasswordHasher
from chatroom.application.ports.watermark import FreshnessWatermark
from chatroom.config import settings
from chatroom.infrastructure.auth.bcrypt_hasher import BcryptPasswordHasher
from chatroom.infrastructure.auth.hs256_sessions import HS256SessionCodec
from chatroom.infrastructure.db.session import AsyncSessionLocal
from chatroom.infrastructure.db.uow import SqlAlchemyUoW
from chatroom.infrastructure.drafts.redis_drafts import RedisDraftStore

SESSION_EXPIRED = "Session expired"


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with SqlAlchemyUoW(AsyncSessionLocal) as uow:
        yield uow


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]

_clock = SystemClock()


def get_clock() -> Clock:
    return _clock


ClockDep = Annotated[Clock, Depends(get_clock)]


def get_watermark(request: Request) -> FreshnessWatermark:
    return request.app.state.watermark


WatermarkDep = Annotated[FreshnessWatermark, Depends(get_watermark)]

_codec: SessionCodec | None = None


def get_session_codec() -> SessionCodec:
    global _codec  # noqa: PLW0603
    if _codec is None:
        _codec = HS256SessionCodec(
            settings.SESSION_SECRET,
            settings.SESSION_TTL_SECONDS,
            settings.SESSION_ALGORITHM,
        )
    return _codec


SessionCodecDep = Annotated[SessionCodec, Depends(get_session_codec)]


def get_password_hasher() -> PasswordHasher:
    return BcryptPasswordHasher(settings.BCRYPT_ROUNDS)


PasswordHasherDep = Annotated[PasswordHasher, Depends(get_password_hasher)]


def get_draft_store(request: Request) -> RegistrationDraftStore:
    return RedisDraftStore(
        request.app.state.redis,
        settings.REGISTRATION_DRAFT_TTL_SECONDS,
        settings.REGISTRATION_KEY_PREFIX,
    )


DraftStoreDep = Annotated[RegistrationDraftStore, Depends(get_draft_store)]


async def get_current_principal(request: Request, codec: SessionCodecDep) -> Principal:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=SESSION_EXPIRED)
    try:
        return await codec.verify(token)
    except InvalidSessionError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=SESSION_EXPIRED,
        ) from exc


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
