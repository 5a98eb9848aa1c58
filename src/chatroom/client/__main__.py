"""Terminal client: python -m chatroom.client [register]

Reads CHATROOM_* settings. With ``register`` it creates the account from
CHATROOM_EMAIL, CHATROOM_FIRST_NAME, CHATROOM_LAST_NAME and CHATROOM_PASSWORD
and exits. Otherwise it logs in, prints the board whenever it changes, logs
out on exit and accepts commands on stdin:

    <text>               send a message
    /edit <id> <text>    edit one of your messages
    /delete <id>         delete one of your messages
    /search <text>       show matching messages
    /all                 back to all messages
    /quit
"""
from __future__ import annotations

import asyncio
import logging
import sys

from chatroom.client.api import ChatroomApi
from chatroom.client.board import MessageBoard
from chatroom.client.config import ClientSettings
from chatroom.client.errors import ChatroomApiError, SessionExpiredError
from chatroom.client.session import ChatroomSession

logger = logging.getLogger(__name__)


def _print_board(board: MessageBoard) -> None:
    print("\n".join(["", "-" * 60, *board.render()]), flush=True)


async def _dispatch(session: ChatroomSession, line: str) -> bool:
    """Handle one input line. Returns False when the user wants to quit."""
    command, _, rest = line.partition(" ")
    if command == "/quit":
        return False
    if command == "/all":
        await session.show_all()
    elif command == "/search":
        await session.search(rest)
    elif command == "/delete":
        if rest.strip().isdigit():
            await session.delete(int(rest))
        else:
            print("usage: /delete <id>")
    elif command == "/edit":
        message_id, _, text = rest.partition(" ")
        if message_id.isdigit():
            await session.edit(int(message_id), text)
        else:
            print("usage: /edit <id> <text>")
    else:
        await session.send(line)
    return True


async def _read_commands(session: ChatroomSession, done: asyncio.Event) -> None:
    while not done.is_set():
        line = await asyncio.to_thread(sys.stdin.readline)
        if not line:
            break
        line = line.strip()
        if line and not await _dispatch(session, line):
            break
    done.set()


async def run(settings: ClientSettings) -> int:
    done = asyncio.Event()

    async def _session_lost() -> None:
        print("Session expired, please log in again.", file=sys.stderr)
        done.set()

    async with ChatroomApi(settings.BASE_URL, timeout=settings.TIMEOUT) as api:
        try:
            await api.login(settings.EMAIL, settings.PASSWORD)
        except ChatroomApiError as exc:
            print(f"Login failed: {exc.detail}", file=sys.stderr)
            return 1

        session = ChatroomSession(
            api,
            board=MessageBoard(on_change=_print_board),
            interval=settings.POLL_INTERVAL,
            on_session_lost=_session_lost,
        )
        try:
            await session.open()
        except SessionExpiredError:
            return 1
        reader = asyncio.create_task(_read_commands(session, done))
        try:
            await done.wait()
        finally:
            reader.cancel()
            await session.logout()
    return 0


async def register(api: ChatroomApi, settings: ClientSettings) -> int:
    """Two-step signup: submit the details, then set the password."""
    try:
        draft = await api.register(settings.EMAIL, settings.FIRST_NAME, settings.LAST_NAME)
        await api.complete_registration(settings.PASSWORD, settings.PASSWORD)
    except ChatroomApiError as exc:
        print(f"Registration failed: {exc.detail}", file=sys.stderr)
        return 1
    print(f"Registered {draft.email}, you can now log in")
    return 0


async def _register(settings: ClientSettings) -> int:
    async with ChatroomApi(settings.BASE_URL, timeout=settings.TIMEOUT) as api:
        return await register(api, settings)


def main() -> None:
    logging.basicConfig(level=logging.WARNING, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        settings = ClientSettings()
        if sys.argv[1:] == ["register"]:
            sys.exit(asyncio.run(_register(settings)))
        sys.exit(asyncio.run(run(settings)))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
