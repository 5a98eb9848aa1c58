from __future__ import annotations

from fastapi import APIRouter, Request, Response

from chatroom.api.deps import DraftStoreDep, PasswordHasherDep, UoWDep
from chatroom.api.v1.outcomes import unwrap
from chatroom.api.v1.schemas.common import DetailResponse
from chatroom.api.v1.schemas.session import (
    CompleteRegistrationRequest,
    RegistrationDraftResponse,
    RegistrationRequest,
)
from chatroom.config import settings
from chatroom.services import registration_service

router = APIRouter(prefix="/api/v1/registration", tags=["registration"])

SUCCESSFUL_REGISTER = "Registration successful, you can now login"


@router.post("", response_model=RegistrationDraftResponse, status_code=201)
async def start_registration(
    body: RegistrationRequest,
    response: Response,
    uow: UoWDep,
    drafts: DraftStoreDep,
) -> RegistrationDraftResponse:
    draft_id, draft = unwrap(
        await registration_service.start_registration(
            body.email, body.first_name, body.last_name, uow, drafts,
        )
    )
    response.set_cookie(
        settings.REGISTRATION_COOKIE_NAME,
        draft_id,
        max_age=drafts.ttl_seconds,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return RegistrationDraftResponse(
        email=draft.email,
        first_name=draft.first_name,
        last_name=draft.last_name,
        expires_in=drafts.ttl_seconds,
    )


@router.get("", response_model=RegistrationDraftResponse)
async def get_registration(request: Request, drafts: DraftStoreDep) -> RegistrationDraftResponse:
    draft = await registration_service.get_draft(
        request.cookies.get(settings.REGISTRATION_COOKIE_NAME), drafts,
    )
    return RegistrationDraftResponse.model_validate(draft)


@router.post("/complete", response_model=DetailResponse, status_code=201)
async def complete_registration(
    body: CompleteRegistrationRequest,
    request: Request,
    response: Response,
    uow: UoWDep,
    drafts: DraftStoreDep,
    hasher: PasswordHasherDep,
) -> DetailResponse:
    unwrap(
        await registration_service.complete_registration(
            request.cookies.get(settings.REGISTRATION_COOKIE_NAME),
            body.password,
            body.confirm_password,
            uow,
            drafts,
            hasher,
        )
    )
    response.delete_cookie(settings.REGISTRATION_COOKIE_NAME)
    return DetailResponse(detail=SUCCESSFUL_REGISTER)
