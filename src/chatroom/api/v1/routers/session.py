from __future__ import annotations

from fastapi import APIRouter, Response

from chatroom.api.deps import CurrentPrincipal, PasswordHasherDep, SessionCodecDep, UoWDep
from chatroom.api.v1.outcomes import unwrap
from chatroom.api.v1.schemas.common import DetailResponse
from chatroom.api.v1.schemas.session import LoginRequest, SessionResponse
from chatroom.application.dto.principal import Principal
from chatroom.application.ports.auth import SessionCodec
from chatroom.config import settings
from chatroom.services import auth_service

router = APIRouter(prefix="/api/v1/session", tags=["session"])


def _set_session_cookie(response: Response, codec: SessionCodec, principal: Principal) -> None:
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        codec.issue(principal),
        max_age=settings.SESSION_TTL_SECONDS,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


@router.post("", response_model=SessionResponse)
async def login(
    body: LoginRequest,
    response: Response,
    uow: UoWDep,
    hasher: PasswordHasherDep,
    codec: SessionCodecDep,
) -> SessionResponse:
    principal = unwrap(await auth_service.authenticate(body.email, body.password, uow, hasher))
    _set_session_cookie(response, codec, principal)
    return SessionResponse(user_id=principal.user_id, full_name=principal.full_name)


@router.get("", response_model=SessionResponse)
async def verify_session(
    principal: CurrentPrincipal,
    response: Response,
    codec: SessionCodecDep,
) -> SessionResponse:
    """Confirm the session and slide its expiry forward."""
    _set_session_cookie(response, codec, principal)
    return SessionResponse(user_id=principal.user_id, full_name=principal.full_name)


@router.delete("", response_model=DetailResponse)
async def logout(response: Response) -> DetailResponse:
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return DetailResponse(detail="Logged out successfully")
