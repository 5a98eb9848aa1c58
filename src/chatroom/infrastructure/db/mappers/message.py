from __future__ import annotations

from chatroom.domain.entities.message import AuthoredMessage, Message
from chatroom.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        user_id=model.user_id,
        text=model.text,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def model_to_authored(model: MessageModel, first_name: str, last_name: str) -> AuthoredMessage:
    return AuthoredMessage(
        id=model.id,
        user_id=model.user_id,
        text=model.text,
        full_name=f"{first_name} {last_name}",
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
