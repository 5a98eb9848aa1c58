"""Shared test fixtures."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import pytest

from chatroom.api.v1.schemas.message import (
    AuthoredMessageResponse,
    MessageResponse,
    UpdateCheckResponse,
)
from chatroom.api.v1.schemas.session import SessionResponse
from chatroom.application.dto.principal import Principal
from chatroom.application.dto.registration import RegistrationDraft
from chatroom.client.errors import ChatroomApiError, SessionExpiredError
from chatroom.domain.entities.message import AuthoredMessage, Message
from chatroom.domain.entities.user import User
from chatroom.domain.value_objects.timestamps import format_timestamp
from chatroom.infrastructure.freshness.watermark import InMemoryWatermark
from chatroom.services import freshness_service, message_service

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock; time only moves when a test moves it."""

    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float = 1.0) -> datetime:
        self.current += timedelta(seconds=seconds)
        return self.current

    def set(self, ts: datetime) -> None:
        self.current = ts


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def alice() -> Principal:
    return Principal(user_id=1, full_name="Alice Smith")


@pytest.fixture
def bob() -> Principal:
    return Principal(user_id=2, full_name="Bob Jones")


def make_user(
    *,
    user_id: int = 1,
    first_name: str = "Alice",
    last_name: str = "Smith",
    email: str = "alice@example.com",
    password: str = "secret",
) -> User:
    return User(
        id=user_id,
        first_name=first_name,
        last_name=last_name,
        email=email,
        password_hash=f"hashed:{password}",
        created_at=T0,
    )


def make_message(*, message_id: int = 1, user_id: int = 1, text: str = "hello") -> Message:
    return Message(id=message_id, user_id=user_id, text=text, created_at=T0, updated_at=T0)


@dataclass
class FakeUserReader:
    _store: dict[int, User] = field(default_factory=dict)

    async def get_by_id(self, user_id: int) -> User | None:
        return self._store.get(user_id)

    async def get_by_email(self, email: str) -> User | None:
        for u in self._store.values():
            if u.email == email:
                return u
        return None


@dataclass
class FakeUserWriter:
    _reader: FakeUserReader

    async def create(
        self, first_name: str, last_name: str, email: str, password_hash: str,
    ) -> User | None:
        if await self._reader.get_by_email(email) is not None:
            return None
        user = User(
            id=len(self._reader._store) + 1,
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=password_hash,
            created_at=T0,
        )
        self._reader._store[user.id] = user
        return user


@dataclass
class FakeMessageReader:
    _users: FakeUserReader
    _messages: list[Message] = field(default_factory=list)

    def _authored(self, m: Message) -> AuthoredMessage:
        author = self._users._store.get(m.user_id)
        return AuthoredMessage(
            id=m.id,
            user_id=m.user_id,
            text=m.text,
            full_name=author.full_name if author else "",
            created_at=m.created_at,
            updated_at=m.updated_at,
        )

    async def list_with_authors(self) -> list[AuthoredMessage]:
        return [self._authored(m) for m in sorted(self._messages, key=lambda m: m.id)]

    async def search_with_authors(self, text: str) -> list[AuthoredMessage]:
        needle = text.lower()
        return [m for m in await self.list_with_authors() if needle in m.text.lower()]


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader
    _next_id: int = 1

    async def create(self, user_id: int, text: str, ts: datetime) -> Message:
        self._next_id = max([self._next_id, *(m.id + 1 for m in self._reader._messages)])
        msg = Message(id=self._next_id, user_id=user_id, text=text, created_at=ts, updated_at=ts)
        self._next_id += 1
        self._reader._messages.append(msg)
        return msg

    async def update_text(
        self, message_id: int, user_id: int, text: str, ts: datetime,
    ) -> Message | None:
        for i, m in enumerate(self._reader._messages):
            if m.id == message_id and m.user_id == user_id:
                updated = Message(
                    id=m.id, user_id=m.user_id, text=text, created_at=m.created_at, updated_at=ts,
                )
                self._reader._messages[i] = updated
                return updated
        return None

    async def delete(self, message_id: int, user_id: int) -> bool:
        before = len(self._reader._messages)
        self._reader._messages = [
            m for m in self._reader._messages
            if not (m.id == message_id and m.user_id == user_id)
        ]
        return len(self._reader._messages) < before


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    users: FakeUserReader = field(default_factory=FakeUserReader)
    users_w: FakeUserWriter | None = None
    messages: FakeMessageReader | None = None
    messages_w: FakeMessageWriter | None = None
    _committed: bool = False

    def __post_init__(self) -> None:
        if self.users_w is None:
            self.users_w = FakeUserWriter(self.users)
        if self.messages is None:
            self.messages = FakeMessageReader(self.users)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)

    def add_user(self, user: User) -> User:
        self.users._store[user.id] = user
        return user

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        pass


class FakeHasher:
    async def hash(self, password: str) -> str:
        return f"hashed:{password}"

    async def verify(self, password: str, password_hash: str) -> bool:
        return password_hash == f"hashed:{password}"


@dataclass
class FakeDraftStore:
    ttl_seconds: int = 30
    _drafts: dict[str, RegistrationDraft] = field(default_factory=dict)

    async def save(self, draft: RegistrationDraft) -> str:
        draft_id = f"draft-{len(self._drafts) + 1}"
        self._drafts[draft_id] = draft
        return draft_id

    async def get(self, draft_id: str) -> RegistrationDraft | None:
        return self._drafts.get(draft_id)

    async def discard(self, draft_id: str) -> None:
        self._drafts.pop(draft_id, None)

    def expire_all(self) -> None:
        self._drafts.clear()


class FakeChatServer:
    """The server side of the polling protocol, minus HTTP.

    Runs the real services over a FakeUoW and an InMemoryWatermark that
    share one FakeClock, so tests control exactly when writes happen
    relative to each client's cursor.
    """

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.uow = FakeUoW()
        self.watermark = InMemoryWatermark(clock=clock)
        self.expired_users: set[int] = set()
        self.failing: set[str] = set()
        self.calls: list[str] = []

    def api_for(self, principal: Principal) -> FakeApi:
        self.uow.add_user(
            make_user(
                user_id=principal.user_id,
                first_name=principal.full_name.split()[0],
                last_name=principal.full_name.split()[-1],
                email=f"user{principal.user_id}@example.com",
            )
        )
        return FakeApi(self, principal)


class FakeApi:
    """Stands in for ChatroomApi, one instance per logged-in client."""

    def __init__(self, server: FakeChatServer, principal: Principal) -> None:
        self._server = server
        self.principal = principal

    def _enter(self, name: str) -> None:
        self._server.calls.append(name)
        if name in self._server.failing:
            raise ChatroomApiError(f"{name} unavailable", 503)

    def _guard(self, name: str) -> None:
        self._enter(name)
        if self.principal.user_id in self._server.expired_users:
            raise SessionExpiredError("Session expired", 401)

    async def logout(self) -> None:
        self._enter("logout")

    async def verify_session(self) -> SessionResponse | None:
        self._enter("verify_session")
        if self.principal.user_id in self._server.expired_users:
            return None
        return SessionResponse(user_id=self.principal.user_id, full_name=self.principal.full_name)

    async def check_messages(self, cursor: datetime | None) -> UpdateCheckResponse:
        self._guard("check_messages")
        check = freshness_service.check_for_updates(
            format_timestamp(cursor) if cursor else "0",
            self._server.watermark,
            self._server.clock,
        )
        return UpdateCheckResponse.model_validate(check)

    async def fetch_messages(self) -> list[AuthoredMessageResponse]:
        self._guard("fetch_messages")
        messages = await message_service.list_messages(self._server.uow)
        return [AuthoredMessageResponse.model_validate(m) for m in messages]

    async def search_messages(self, text: str) -> list[AuthoredMessageResponse]:
        self._guard("search_messages")
        outcome = await message_service.search_messages(text, self._server.uow)
        if not outcome.ok:
            raise ChatroomApiError(outcome.error.detail, 422)
        return [AuthoredMessageResponse.model_validate(m) for m in outcome.value]

    async def send_message(self, text: str) -> MessageResponse:
        self._guard("send_message")
        outcome = await message_service.create_message(
            self.principal, text, self._server.uow, self._server.watermark, self._server.clock,
        )
        if not outcome.ok:
            raise ChatroomApiError(outcome.error.detail, 422)
        return MessageResponse.model_validate(outcome.value)

    async def edit_message(self, message_id: int, text: str) -> MessageResponse:
        self._guard("edit_message")
        outcome = await message_service.update_message(
            message_id, self.principal, text,
            self._server.uow, self._server.watermark, self._server.clock,
        )
        if not outcome.ok:
            raise ChatroomApiError(outcome.error.detail, 404)
        return MessageResponse.model_validate(outcome.value)

    async def delete_message(self, message_id: int) -> None:
        self._guard("delete_message")
        outcome = await message_service.delete_message(
            message_id, self.principal, self._server.uow, self._server.watermark,
        )
        if not outcome.ok:
            raise ChatroomApiError(outcome.error.detail, 404)


@pytest.fixture
def server(clock: FakeClock) -> FakeChatServer:
    return FakeChatServer(clock)
