"""Client-side polling loop.

The poller keeps a cursor: the local time of its last complete refetch. On
every tick it re-validates the session, asks the server whether the message
set changed since the cursor, and if so replaces the whole local set and
stamps a new cursor.

The cursor is taken from the local clock after the refetch finishes, not
from the server's ``lastCheck``. A write that lands while the refetch is in
flight may still be missed by that refetch; it is picked up on the next tick
because the watermark then sits past the cursor or the write is already in
the list. This is eventual consistency, bounded by one interval.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import datetime
from enum import StrEnum
from typing import AsyncIterator, Awaitable, Callable

from chatroom.application.ports.clock import Clock, SystemClock
from chatroom.client.api import ChatroomApi
from chatroom.client.board import BoardMode, MessageBoard, NotificationLevel
from chatroom.client.errors import ChatroomApiError, SessionExpiredError

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 10.0

SessionLostHook = Callable[[], Awaitable[None]]


class PollerState(StrEnum):
    IDLE = "idle"
    POLLING = "polling"
    CHECKING = "checking"
    REFRESHING = "refreshing"
    STOPPED = "stopped"


class MessagePoller:
    def __init__(
        self,
        api: ChatroomApi,
        board: MessageBoard,
        *,
        interval: float = DEFAULT_INTERVAL,
        clock: Clock | None = None,
        on_session_lost: SessionLostHook | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._api = api
        self._board = board
        self._interval = interval
        self._clock = clock or SystemClock()
        self._on_session_lost = on_session_lost
        self._state = PollerState.IDLE
        self._cursor: datetime | None = None
        self._task: asyncio.Task[None] | None = None
        self._refresh_lock = asyncio.Lock()

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def cursor(self) -> datetime | None:
        return self._cursor

    @property
    def interval(self) -> float:
        return self._interval

    async def start(self) -> None:
        """Run one check immediately, then keep checking every interval."""
        if self._state is not PollerState.IDLE:
            raise RuntimeError(f"cannot start a poller in state {self._state}")
        self._state = PollerState.POLLING
        await self.check_once()
        if self._state is PollerState.STOPPED:
            return
        self._task = asyncio.create_task(self._run(), name="chatroom-poller")

    async def stop(self) -> None:
        self._state = PollerState.STOPPED
        task, self._task = self._task, None
        if task is None or task is asyncio.current_task():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _run(self) -> None:
        while self._state is not PollerState.STOPPED:
            await asyncio.sleep(self._interval)
            try:
                await self.check_once()
            except Exception:
                # keep the timer alive; the next tick retries
                logger.exception("Polling cycle failed")
                self._resume()

    async def check_once(self) -> bool:
        """One polling cycle. Returns True if the local set was refreshed.

        Skipped when a cycle or refresh is already in flight.
        """
        if self._state is not PollerState.POLLING or self._refresh_lock.locked():
            return False
        self._state = PollerState.CHECKING

        try:
            session = await self._api.verify_session()
            if session is None:
                await self._session_lost()
                return False
            self._board.current_user_id = session.user_id
            check = await self._api.check_messages(self._cursor)
        except SessionExpiredError:
            await self._session_lost()
            return False
        except ChatroomApiError as exc:
            logger.warning("Error checking for message updates: %s", exc)
            self._board.notify("Error checking for message updates", NotificationLevel.DANGER)
            self._resume()
            return False

        if not check.has_updates:
            self._resume()
            return False
        if self._board.mode is BoardMode.SEARCH:
            # search results stay on screen until the user asks for all messages
            logger.debug("Updates pending while search results are shown")
            self._resume()
            return False

        refreshed = await self.refresh(keep_search=True)
        self._resume()
        return refreshed

    async def refresh(self, *, keep_search: bool = False) -> bool:
        """Refetch the full list, replace the board and advance the cursor.

        With ``keep_search`` the refresh is dropped if search results went on
        screen while it waited for the lock.
        """
        if self._state is PollerState.STOPPED:
            return False
        async with self._refresh_lock:
            if keep_search and self._board.mode is BoardMode.SEARCH:
                return False
            previous = self._state
            self._state = PollerState.REFRESHING
            try:
                messages = await self._api.fetch_messages()
            except SessionExpiredError:
                await self._session_lost()
                return False
            except ChatroomApiError as exc:
                logger.warning("Error fetching messages: %s", exc)
                self._board.notify("Failed to fetch messages", NotificationLevel.DANGER)
                return False
            finally:
                if self._state is PollerState.REFRESHING:
                    self._state = previous

            self._board.replace(messages)
            self._cursor = self._clock.now()
            return True

    @contextlib.asynccontextmanager
    async def exclusive(self) -> AsyncIterator[None]:
        """Hold off refreshes while the caller replaces the board itself."""
        async with self._refresh_lock:
            yield

    async def handle_session_lost(self) -> None:
        await self._session_lost()

    def _resume(self) -> None:
        if self._state is not PollerState.STOPPED:
            self._state = PollerState.POLLING

    async def _session_lost(self) -> None:
        if self._state is PollerState.STOPPED:
            return
        logger.info("Session is no longer valid, stopping poller")
        await self.stop()
        if self._on_session_lost is not None:
            await self._on_session_lost()
