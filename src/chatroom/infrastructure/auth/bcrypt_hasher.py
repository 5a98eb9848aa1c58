from __future__ import annotations

import asyncio

import bcrypt


class BcryptPasswordHasher:
    """bcrypt hashing, run in a worker thread to keep the event loop free."""

    def __init__(self, rounds: int = 10) -> None:
        self._rounds = rounds

    async def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = await asyncio.to_thread(bcrypt.hashpw, password.encode(), salt)
        return hashed.decode()

    async def verify(self, password: str, password_hash: str) -> bool:
        try:
            return await asyncio.to_thread(
                bcrypt.checkpw, password.encode(), password_hash.encode(),
            )
        except ValueError:
            # stored value is not a bcrypt hash
            return False
