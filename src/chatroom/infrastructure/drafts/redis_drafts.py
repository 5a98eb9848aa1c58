"""Registration drafts stored in Redis with a TTL."""
from __future__ import annotations

import json
import logging
import secrets

import redis.asyncio as aioredis

from chatroom.application.dto.registration import RegistrationDraft

logger = logging.getLogger(__name__)


class RedisDraftStore:
    def __init__(
        self,
        redis: aioredis.Redis,
        ttl_seconds: int,
        key_prefix: str = "chatroom:registration:",
    ) -> None:
        self._redis = redis
        self.ttl_seconds = ttl_seconds
        self._prefix = key_prefix

    def _key(self, draft_id: str) -> str:
        return f"{self._prefix}{draft_id}"

    async def save(self, draft: RegistrationDraft) -> str:
        draft_id = secrets.token_urlsafe(24)
        raw = json.dumps(
            {
                "email": draft.email,
                "first_name": draft.first_name,
                "last_name": draft.last_name,
            }
        )
        await self._redis.set(self._key(draft_id), raw, ex=self.ttl_seconds)
        return draft_id

    async def get(self, draft_id: str) -> RegistrationDraft | None:
        raw = await self._redis.get(self._key(draft_id))
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            return RegistrationDraft(
                email=data["email"],
                first_name=data["first_name"],
                last_name=data["last_name"],
            )
        except (ValueError, KeyError):
            logger.warning("Discarding unreadable registration draft %s", draft_id)
            await self.discard(draft_id)
            return None

    async def discard(self, draft_id: str) -> None:
        await self._redis.delete(self._key(draft_id))
