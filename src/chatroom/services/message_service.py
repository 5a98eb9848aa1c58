from __future__ import annotations

import logging

from chatroom.application.dto.principal import Principal
from chatroom.application.errors import ErrorKind, Outcome
from chatroom.application.policies.validation import (
    ERROR_EMPTY_SEARCH,
    check_message_text,
)
from chatroom.application.ports.clock import Clock
from chatroom.application.ports.watermark import FreshnessWatermark
from chatroom.application.uow import UnitOfWork
from chatroom.domain.entities.message import AuthoredMessage, Message

logger = logging.getLogger(__name__)

MESSAGE_NOT_FOUND = "Message not found"


async def list_messages(uow: UnitOfWork) -> list[AuthoredMessage]:
    return await uow.messages.list_with_authors()


async def search_messages(text: str | None, uow: UnitOfWork) -> Outcome[list[AuthoredMessage]]:
    query = (text or "").strip()
    if not query:
        return Outcome.failure(ErrorKind.VALIDATION, ERROR_EMPTY_SEARCH)
    return Outcome.success(await uow.messages.search_with_authors(query))


async def create_message(
    principal: Principal,
    text: str,
    uow: UnitOfWork,
    watermark: FreshnessWatermark,
    clock: Clock,
) -> Outcome[Message]:
    text = text.strip()
    problem = check_message_text(text)
    if problem:
        return Outcome.failure(ErrorKind.VALIDATION, problem)

    if await uow.users.get_by_id(principal.user_id) is None:
        return Outcome.failure(ErrorKind.AUTHENTICATION, "Invalid user")

    msg = await uow.messages_w.create(principal.user_id, text, clock.now())
    await uow.commit()
    watermark.advance()
    logger.info("Message %d created by user %d", msg.id, principal.user_id)
    return Outcome.success(msg)


async def update_message(
    message_id: int,
    principal: Principal,
    text: str,
    uow: UnitOfWork,
    watermark: FreshnessWatermark,
    clock: Clock,
) -> Outcome[Message]:
    """Change the text of a message owned by the caller."""
    text = text.strip()
    problem = check_message_text(text)
    if problem:
        return Outcome.failure(ErrorKind.VALIDATION, problem)

    msg = await uow.messages_w.update_text(message_id, principal.user_id, text, clock.now())
    if msg is None:
        return Outcome.failure(ErrorKind.NOT_FOUND, MESSAGE_NOT_FOUND)

    await uow.commit()
    watermark.advance()
    logger.info("Message %d updated by user %d", message_id, principal.user_id)
    return Outcome.success(msg)


async def delete_message(
    message_id: int,
    principal: Principal,
    uow: UnitOfWork,
    watermark: FreshnessWatermark,
) -> Outcome[None]:
    deleted = await uow.messages_w.delete(message_id, principal.user_id)
    if not deleted:
        return Outcome.failure(ErrorKind.NOT_FOUND, MESSAGE_NOT_FOUND)

    await uow.commit()
    watermark.advance()
    logger.info("Message %d deleted by user %d", message_id, principal.user_id)
    return Outcome.success()
