"""Explicit service outcomes.

Services report expected failures (bad credentials, invalid input, missing
rows) as values instead of raising, and callers branch on ``ErrorKind``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(StrEnum):
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    EXPIRED = "expired"


@dataclass(frozen=True, slots=True)
class ServiceError:
    kind: ErrorKind
    detail: str = ""


@dataclass(frozen=True, slots=True)
class Outcome(Generic[T]):
    value: T | None = None
    error: ServiceError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, detail: str = "") -> Outcome[T]:
        return cls(error=ServiceError(kind, detail))
