from __future__ import annotations

import logging

from chatroom.application.dto.principal import Principal
from chatroom.application.errors import ErrorKind, Outcome
from chatroom.application.ports.passwords import PasswordHasher
from chatroom.application.uow import UnitOfWork

logger = logging.getLogger(__name__)

ERROR_INVALID_USER = "Email or password invalid"


async def authenticate(
    email: str,
    password: str,
    uow: UnitOfWork,
    hasher: PasswordHasher,
) -> Outcome[Principal]:
    email = email.strip()
    password = password.strip()
    if not email or not password:
        return Outcome.failure(ErrorKind.AUTHENTICATION, ERROR_INVALID_USER)

    user = await uow.users.get_by_email(email)
    if user is None or not await hasher.verify(password, user.password_hash):
        logger.info("Failed login for %s", email)
        return Outcome.failure(ErrorKind.AUTHENTICATION, ERROR_INVALID_USER)

    return Outcome.success(Principal(user_id=user.id, full_name=user.full_name))
