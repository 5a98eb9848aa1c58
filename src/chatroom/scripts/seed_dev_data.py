"""Seed development data: creates demo users and a few messages.

Users are created with the password ``password123``. Running the script twice
keeps existing users and only appends messages.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from chatroom.config import settings
from chatroom.domain.entities.user import User
from chatroom.infrastructure.auth.bcrypt_hasher import BcryptPasswordHasher
from chatroom.infrastructure.db.session import AsyncSessionLocal, create_all, engine
from chatroom.infrastructure.db.uow import SqlAlchemyUoW

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    ("Alice", "Smith", "alice@example.com"),
    ("Bob", "Jones", "bob@example.com"),
]

DEMO_MESSAGES = [
    ("alice@example.com", "Hello everyone!"),
    ("bob@example.com", "Hi Alice, welcome to the chatroom."),
    ("alice@example.com", "Does anyone know when the meeting starts?"),
    ("bob@example.com", "Ten o'clock, same room as last week."),
]


async def _ensure_user(
    uow: SqlAlchemyUoW,
    hasher: BcryptPasswordHasher,
    first_name: str,
    last_name: str,
    email: str,
) -> User:
    user = await uow.users.get_by_email(email)
    if user is not None:
        return user
    password_hash = await hasher.hash(DEMO_PASSWORD)
    user = await uow.users_w.create(first_name, last_name, email, password_hash)
    if user is None:
        raise RuntimeError(f"could not create demo user {email}")
    logger.info("Created user %s (%d)", email, user.id)
    return user


async def seed() -> None:
    if settings.DB_CREATE_ALL:
        await create_all()

    hasher = BcryptPasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    async with SqlAlchemyUoW(AsyncSessionLocal) as uow:
        users = {}
        for first_name, last_name, email in DEMO_USERS:
            users[email] = await _ensure_user(uow, hasher, first_name, last_name, email)

        for email, text in DEMO_MESSAGES:
            await uow.messages_w.create(users[email].id, text, datetime.now(timezone.utc))

        await uow.commit()
    logger.info("Seeded %d users and %d messages", len(users), len(DEMO_MESSAGES))
    await engine.dispose()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
