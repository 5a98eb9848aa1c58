from __future__ import annotations

from datetime import datetime

from chatroom.api.v1.schemas.common import CamelModel


class MessageTextRequest(CamelModel):
    text: str


class MessageResponse(CamelModel):
    id: int
    user_id: int
    text: str
    created_at: datetime
    updated_at: datetime


class AuthoredMessageResponse(MessageResponse):
    full_name: str


class UpdateCheckResponse(CamelModel):
    has_updates: bool
    last_check: datetime
