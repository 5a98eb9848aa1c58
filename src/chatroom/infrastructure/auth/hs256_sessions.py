from __future__ import annotations

from datetime import timedelta

import jwt

from chatroom.application.dto.principal import Principal
from chatroom.application.ports.auth import InvalidSessionError
from chatroom.application.ports.clock import Clock, SystemClock


class HS256SessionCodec:
    """Issue and verify session tokens signed with a shared HS256 secret."""

    def __init__(
        self,
        secret: str,
        ttl_seconds: int,
        algorithm: str = "HS256",
        clock: Clock | None = None,
    ) -> None:
        self._secret = secret
        self._ttl = timedelta(seconds=ttl_seconds)
        self._algorithm = algorithm
        self._clock = clock or SystemClock()

    def issue(self, principal: Principal) -> str:
        now = self._clock.now()
        payload = {
            "sub": str(principal.user_id),
            "name": principal.full_name,
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    async def verify(self, token: str) -> Principal:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
            return Principal(user_id=int(payload["sub"]), full_name=payload.get("name", ""))
        except (jwt.PyJWTError, KeyError, ValueError) as exc:
            raise InvalidSessionError(str(exc)) from exc
