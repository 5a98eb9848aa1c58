"""Thin async HTTP wrapper around the chatroom REST API."""
from __future__ import annotations

import logging
from datetime import datetime
from types import TracebackType
from typing import Any, Self, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from chatroom.api.v1.schemas.message import (
    AuthoredMessageResponse,
    MessageResponse,
    UpdateCheckResponse,
)
from chatroom.api.v1.schemas.session import RegistrationDraftResponse, SessionResponse
from chatroom.client.errors import AuthenticationError, ChatroomApiError, SessionExpiredError
from chatroom.domain.value_objects.timestamps import format_timestamp

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_MESSAGE_LIST = TypeAdapter(list[AuthoredMessageResponse])

NO_CURSOR = "0"


def _detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(data, dict):
        detail = data.get("detail") or data.get("error")
        if isinstance(detail, str):
            return detail
        if detail is not None:
            return str(detail)
    return response.reason_phrase


class ChatroomApi:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.debug("%s %s failed", method, url, exc_info=True)
            raise ChatroomApiError(f"{method} {url} failed: {exc}") from exc

        if response.status_code == 401:
            raise SessionExpiredError(_detail(response), 401)
        if response.is_error:
            raise ChatroomApiError(_detail(response), response.status_code)
        return response

    @staticmethod
    def _parse(model: type[ModelT], response: httpx.Response) -> ModelT:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ChatroomApiError(f"Unexpected response: {exc}", response.status_code) from exc

    @staticmethod
    def _parse_messages(response: httpx.Response) -> list[AuthoredMessageResponse]:
        try:
            return _MESSAGE_LIST.validate_python(response.json())
        except (ValueError, ValidationError) as exc:
            raise ChatroomApiError(f"Unexpected response: {exc}", response.status_code) from exc

    # -- session ---------------------------------------------------------

    async def login(self, email: str, password: str) -> SessionResponse:
        try:
            response = await self._request(
                "POST", "/api/v1/session", json={"email": email, "password": password},
            )
        except SessionExpiredError as exc:
            raise AuthenticationError(exc.detail, 401) from exc
        return self._parse(SessionResponse, response)

    async def logout(self) -> None:
        await self._request("DELETE", "/api/v1/session")

    async def verify_session(self) -> SessionResponse | None:
        """Return the current session, or None when it has expired."""
        try:
            response = await self._request("GET", "/api/v1/session")
        except SessionExpiredError:
            return None
        return self._parse(SessionResponse, response)

    # -- registration ----------------------------------------------------

    async def register(self, email: str, first_name: str, last_name: str) -> RegistrationDraftResponse:
        response = await self._request(
            "POST",
            "/api/v1/registration",
            json={"email": email, "firstName": first_name, "lastName": last_name},
        )
        return self._parse(RegistrationDraftResponse, response)

    async def complete_registration(self, password: str, confirm_password: str) -> None:
        await self._request(
            "POST",
            "/api/v1/registration/complete",
            json={"password": password, "confirmPassword": confirm_password},
        )

    # -- messages --------------------------------------------------------

    async def check_messages(self, cursor: datetime | None) -> UpdateCheckResponse:
        last_update = format_timestamp(cursor) if cursor else NO_CURSOR
        response = await self._request(
            "GET", "/api/v1/messages/check", headers={"Last-Update": last_update},
        )
        return self._parse(UpdateCheckResponse, response)

    async def fetch_messages(self) -> list[AuthoredMessageResponse]:
        response = await self._request("GET", "/api/v1/messages")
        return self._parse_messages(response)

    async def search_messages(self, text: str) -> list[AuthoredMessageResponse]:
        response = await self._request("GET", "/api/v1/messages/search", params={"text": text})
        return self._parse_messages(response)

    async def send_message(self, text: str) -> MessageResponse:
        response = await self._request("POST", "/api/v1/messages", json={"text": text})
        return self._parse(MessageResponse, response)

    async def edit_message(self, message_id: int, text: str) -> MessageResponse:
        response = await self._request(
            "PUT", f"/api/v1/messages/{message_id}", json={"text": text},
        )
        return self._parse(MessageResponse, response)

    async def delete_message(self, message_id: int) -> None:
        await self._request("DELETE", f"/api/v1/messages/{message_id}")
