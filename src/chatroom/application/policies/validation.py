"""Input rules for messages and registration.

Each check returns the user-facing error text, or None when the input is
acceptable.
"""
from __future__ import annotations

import re

MESSAGE_MAX_LENGTH = 500
NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 32

EMAIL_RE = re.compile(r"^[a-zA-Z0-9._-]+@[a-zA-Z0-9.-]+$")
NAME_RE = re.compile(r"^[A-Za-z]+(?: [A-Za-z]+)*$")

ERROR_EMPTY_MESSAGE = "Message cannot be empty"
ERROR_MESSAGE_TOO_LONG = f"Message cannot exceed {MESSAGE_MAX_LENGTH} characters"
ERROR_EMPTY_SEARCH = "Search text is required"
INVALID_EMAIL = "Invalid email address"
INVALID_FIRST_NAME = "Invalid First Name"
INVALID_LAST_NAME = "Invalid Last Name"
ERROR_PASSWORDS_MISMATCH = "Passwords do not match please try again"


def check_message_text(text: str) -> str | None:
    if not text:
        return ERROR_EMPTY_MESSAGE
    if len(text) > MESSAGE_MAX_LENGTH:
        return ERROR_MESSAGE_TOO_LONG
    return None


def _valid_name(name: str) -> bool:
    return (
        NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH
        and NAME_RE.match(name) is not None
    )


def check_registration_identity(email: str, first_name: str, last_name: str) -> str | None:
    if not EMAIL_RE.match(email):
        return INVALID_EMAIL
    if not _valid_name(first_name):
        return INVALID_FIRST_NAME
    if not _valid_name(last_name):
        return INVALID_LAST_NAME
    return None


def check_password_pair(password: str, confirm_password: str) -> str | None:
    if not password or password != confirm_password:
        return ERROR_PASSWORDS_MISMATCH
    return None
