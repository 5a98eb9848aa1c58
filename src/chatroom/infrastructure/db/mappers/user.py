from __future__ import annotations

from chatroom.domain.entities.user import User
from chatroom.infrastructure.db.models.user import UserModel


def model_to_entity(model: UserModel) -> User:
    return User(
        id=model.id,
        first_name=model.first_name,
        last_name=model.last_name,
        email=model.email,
        password_hash=model.password_hash,
        created_at=model.created_at,
    )
