"""Import all models so Base.metadata knows every table."""
from chatroom.infrastructure.db.models.message import MessageModel
from chatroom.infrastructure.db.models.user import UserModel

__all__ = [
    "MessageModel",
    "UserModel",
]
