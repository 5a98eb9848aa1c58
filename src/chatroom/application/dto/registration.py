from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RegistrationDraft:
    """First registration step, kept until the password step completes."""

    email: str = ""
    first_name: str = ""
    last_name: str = ""
