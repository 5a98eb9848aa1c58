from __future__ import annotations

from chatroom.api.v1.schemas.common import CamelModel


class LoginRequest(CamelModel):
    email: str
    password: str


class SessionResponse(CamelModel):
    authenticated: bool = True
    user_id: int
    full_name: str


class RegistrationRequest(CamelModel):
    email: str
    first_name: str
    last_name: str


class RegistrationDraftResponse(CamelModel):
    email: str
    first_name: str
    last_name: str
    expires_in: int | None = None


class CompleteRegistrationRequest(CamelModel):
    password: str
    confirm_password: str
