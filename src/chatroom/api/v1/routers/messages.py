from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Header, Query

from chatroom.api.deps import ClockDep, CurrentPrincipal, UoWDep, WatermarkDep
from chatroom.api.v1.outcomes import unwrap
from chatroom.api.v1.schemas.common import DetailResponse
from chatroom.api.v1.schemas.message import (
    AuthoredMessageResponse,
    MessageResponse,
    MessageTextRequest,
    UpdateCheckResponse,
)
from chatroom.services import freshness_service, message_service

router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


@router.get("/check", response_model=UpdateCheckResponse)
async def check_messages(
    principal: CurrentPrincipal,
    watermark: WatermarkDep,
    clock: ClockDep,
    last_update: Annotated[str | None, Header(alias="Last-Update")] = None,
) -> UpdateCheckResponse:
    check = freshness_service.check_for_updates(last_update, watermark, clock)
    return UpdateCheckResponse.model_validate(check)


@router.get("", response_model=list[AuthoredMessageResponse])
async def list_messages(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> list[AuthoredMessageResponse]:
    messages = await message_service.list_messages(uow)
    return [AuthoredMessageResponse.model_validate(m) for m in messages]


@router.get("/search", response_model=list[AuthoredMessageResponse])
async def search_messages(
    principal: CurrentPrincipal,
    uow: UoWDep,
    text: str | None = Query(None),
) -> list[AuthoredMessageResponse]:
    messages = unwrap(await message_service.search_messages(text, uow))
    return [AuthoredMessageResponse.model_validate(m) for m in messages]


@router.post("", response_model=MessageResponse, status_code=201)
async def create_message(
    body: MessageTextRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
    watermark: WatermarkDep,
    clock: ClockDep,
) -> MessageResponse:
    msg = unwrap(
        await message_service.create_message(principal, body.text, uow, watermark, clock)
    )
    return MessageResponse.model_validate(msg)


@router.put("/{message_id}", response_model=MessageResponse)
async def update_message(
    message_id: int,
    body: MessageTextRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
    watermark: WatermarkDep,
    clock: ClockDep,
) -> MessageResponse:
    msg = unwrap(
        await message_service.update_message(
            message_id, principal, body.text, uow, watermark, clock,
        )
    )
    return MessageResponse.model_validate(msg)


@router.delete("/{message_id}", response_model=DetailResponse)
async def delete_message(
    message_id: int,
    principal: CurrentPrincipal,
    uow: UoWDep,
    watermark: WatermarkDep,
) -> DetailResponse:
    unwrap(await message_service.delete_message(message_id, principal, uow, watermark))
    return DetailResponse(detail="Message deleted successfully")
