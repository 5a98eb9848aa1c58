from __future__ import annotations

from typing import TypeVar

from fastapi import HTTPException, status

from chatroom.application.errors import ErrorKind, Outcome

T = TypeVar("T")

_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.AUTHENTICATION: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.EXPIRED: status.HTTP_410_GONE,
}


def unwrap(outcome: Outcome[T]) -> T:
    """Return the outcome's value or raise the HTTP error matching its kind."""
    if outcome.error is not None:
        raise HTTPException(
            status_code=_STATUS_BY_KIND[outcome.error.kind],
            detail=outcome.error.detail,
        )
    return outcome.value  # type: ignore[return-value]
