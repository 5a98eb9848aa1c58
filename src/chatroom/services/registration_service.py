"""Two-step registration.

Step one validates the identity fields and parks them in a short-lived
draft. Step two supplies the password and turns the draft into a user.
"""
from __future__ import annotations

import logging

from chatroom.application.dto.registration import RegistrationDraft
from chatroom.application.errors import ErrorKind, Outcome
from chatroom.application.policies.validation import (
    check_password_pair,
    check_registration_identity,
)
from chatroom.application.ports.drafts import RegistrationDraftStore
from chatroom.application.ports.passwords import PasswordHasher
from chatroom.application.uow import UnitOfWork
from chatroom.domain.entities.user import User

logger = logging.getLogger(__name__)

ERROR_EMAIL_EXISTS = "Email already exists"
ERROR_DRAFT_EXPIRED = "Registration expired, please start again"


async def start_registration(
    email: str,
    first_name: str,
    last_name: str,
    uow: UnitOfWork,
    drafts: RegistrationDraftStore,
) -> Outcome[tuple[str, RegistrationDraft]]:
    draft = RegistrationDraft(
        email=email.strip(),
        first_name=first_name.strip(),
        last_name=last_name.strip(),
    )
    if await uow.users.get_by_email(draft.email) is not None:
        return Outcome.failure(ErrorKind.CONFLICT, ERROR_EMAIL_EXISTS)

    problem = check_registration_identity(draft.email, draft.first_name, draft.last_name)
    if problem:
        return Outcome.failure(ErrorKind.VALIDATION, problem)

    draft_id = await drafts.save(draft)
    return Outcome.success((draft_id, draft))


async def get_draft(draft_id: str | None, drafts: RegistrationDraftStore) -> RegistrationDraft:
    """Return the pending draft for prefill, or an empty one."""
    if not draft_id:
        return RegistrationDraft()
    return await drafts.get(draft_id) or RegistrationDraft()


async def complete_registration(
    draft_id: str | None,
    password: str,
    confirm_password: str,
    uow: UnitOfWork,
    drafts: RegistrationDraftStore,
    hasher: PasswordHasher,
) -> Outcome[User]:
    draft = await drafts.get(draft_id) if draft_id else None
    if draft is None:
        return Outcome.failure(ErrorKind.EXPIRED, ERROR_DRAFT_EXPIRED)

    problem = check_password_pair(password, confirm_password)
    if problem:
        return Outcome.failure(ErrorKind.VALIDATION, problem)

    password_hash = await hasher.hash(password)
    user = await uow.users_w.create(
        draft.first_name, draft.last_name, draft.email, password_hash,
    )
    if user is None:
        await drafts.discard(draft_id)  # type: ignore[arg-type]
        return Outcome.failure(ErrorKind.CONFLICT, ERROR_EMAIL_EXISTS)

    await uow.commit()
    await drafts.discard(draft_id)  # type: ignore[arg-type]
    logger.info("Registered user %d <%s>", user.id, user.email)
    return Outcome.success(user)
