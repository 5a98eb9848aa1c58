from __future__ import annotations

import io
import sys

import httpx
import pytest

from chatroom.client import __main__ as cli
from chatroom.client.api import ChatroomApi
from chatroom.client.config import ClientSettings

SESSION = {"authenticated": True, "userId": 1, "fullName": "Alice Smith"}


def _settings(**overrides) -> ClientSettings:
    values = {
        "BASE_URL": "http://chatroom.test",
        "EMAIL": "carol@example.com",
        "PASSWORD": "pw",
        "FIRST_NAME": "Carol",
        "LAST_NAME": "King",
        "POLL_INTERVAL": 60,
    }
    values.update(overrides)
    return ClientSettings(**values)


def _chat_server(seen: list[tuple[str, str]]):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        path = request.url.path
        if path == "/api/v1/session":
            if request.method == "DELETE":
                return httpx.Response(200, json={"detail": "Logged out successfully"})
            return httpx.Response(200, json=SESSION)
        if path == "/api/v1/messages/check":
            return httpx.Response(200, json={"hasUpdates": False, "lastCheck": "2024-01-01T00:00:00Z"})
        if path == "/api/v1/messages":
            return httpx.Response(200, json=[])
        return httpx.Response(404, json={"detail": "Not Found"})

    return handler


@pytest.fixture
def use_transport(monkeypatch):
    def install(handler) -> None:
        transport = httpx.MockTransport(handler)
        monkeypatch.setattr(
            cli,
            "ChatroomApi",
            lambda base_url, timeout: ChatroomApi(base_url, timeout=timeout, transport=transport),
        )

    return install


@pytest.mark.asyncio
async def test_quit_logs_out(monkeypatch, use_transport):
    seen: list[tuple[str, str]] = []
    use_transport(_chat_server(seen))
    monkeypatch.setattr(sys, "stdin", io.StringIO("/quit\n"))

    assert await cli.run(_settings()) == 0

    assert seen[0] == ("POST", "/api/v1/session")
    assert seen[-1] == ("DELETE", "/api/v1/session")


@pytest.mark.asyncio
async def test_end_of_input_logs_out(monkeypatch, use_transport):
    seen: list[tuple[str, str]] = []
    use_transport(_chat_server(seen))
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))

    assert await cli.run(_settings()) == 0
    assert seen.count(("DELETE", "/api/v1/session")) == 1


@pytest.mark.asyncio
async def test_failed_login_exits_without_logout(monkeypatch, use_transport, capsys):
    seen: list[tuple[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        return httpx.Response(401, json={"detail": "Email or password invalid"})

    use_transport(handler)

    assert await cli.run(_settings()) == 1
    assert seen == [("POST", "/api/v1/session")]
    assert "Email or password invalid" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_register_command_completes_both_steps(capsys):
    bodies: list[tuple[str, bytes]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append((request.url.path, request.content))
        if request.url.path == "/api/v1/registration":
            return httpx.Response(
                201,
                json={"email": "carol@example.com", "firstName": "Carol", "lastName": "King", "expiresIn": 30},
            )
        return httpx.Response(201, json={"detail": "Registration successful, you can now login"})

    async with ChatroomApi("http://chatroom.test", transport=httpx.MockTransport(handler)) as api:
        assert await cli.register(api, _settings()) == 0

    assert [path for path, _ in bodies] == ["/api/v1/registration", "/api/v1/registration/complete"]
    assert b'"confirmPassword":"pw"' in bodies[1][1].replace(b" ", b"")
    assert "Registered carol@example.com" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_register_command_reports_conflict(capsys):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"detail": "Email already exists"})

    async with ChatroomApi("http://chatroom.test", transport=httpx.MockTransport(handler)) as api:
        assert await cli.register(api, _settings()) == 1

    assert "Email already exists" in capsys.readouterr().err
