from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller identity carried by the session cookie."""

    user_id: int
    full_name: str
