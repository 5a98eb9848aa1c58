from __future__ import annotations


class ChatroomApiError(Exception):
    """A call to the chatroom service failed (transport or HTTP error)."""

    def __init__(self, detail: str = "", status_code: int | None = None) -> None:
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)


class AuthenticationError(ChatroomApiError):
    pass


class SessionExpiredError(AuthenticationError):
    """A session-guarded call was rejected; the caller must log in again."""
