"""User-facing chat session: polling plus the user's own actions.

Sends, edits and deletes go straight to the server and, on success, force a
refresh so the acting client sees its own write at once. Other clients see
it on their next poll.
"""
from __future__ import annotations

import logging
from typing import Awaitable

from chatroom.api.v1.schemas.session import SessionResponse
from chatroom.application.ports.clock import Clock
from chatroom.client.api import ChatroomApi
from chatroom.client.board import BoardMode, MessageBoard, NotificationLevel
from chatroom.client.errors import ChatroomApiError, SessionExpiredError
from chatroom.client.poller import DEFAULT_INTERVAL, MessagePoller, PollerState, SessionLostHook

logger = logging.getLogger(__name__)


class ChatroomSession:
    def __init__(
        self,
        api: ChatroomApi,
        *,
        board: MessageBoard | None = None,
        interval: float = DEFAULT_INTERVAL,
        clock: Clock | None = None,
        on_session_lost: SessionLostHook | None = None,
    ) -> None:
        self._api = api
        self.board = board or MessageBoard(clock=clock)
        self.poller = MessagePoller(
            api,
            self.board,
            interval=interval,
            clock=clock,
            on_session_lost=on_session_lost,
        )

    async def open(self) -> SessionResponse:
        """Load the message list and start polling."""
        session = await self._api.verify_session()
        if session is None:
            await self.poller.handle_session_lost()
            raise SessionExpiredError("Session expired", 401)
        self.board.current_user_id = session.user_id
        await self.poller.refresh()
        if self.poller.state is PollerState.STOPPED:
            # expired between the verify and the first fetch
            raise SessionExpiredError("Session expired", 401)
        await self.poller.start()
        return session

    async def close(self) -> None:
        await self.poller.stop()

    async def logout(self) -> None:
        """Stop polling and end the session on the server."""
        await self.poller.stop()
        try:
            await self._api.logout()
        except SessionExpiredError:
            logger.debug("Session already gone at logout")
        except ChatroomApiError as exc:
            logger.warning("Error logging out: %s", exc)

    async def send(self, text: str) -> bool:
        text = text.strip()
        if not text:
            self.board.notify("Message cannot be empty", NotificationLevel.DANGER)
            return False
        return await self._mutate(
            self._api.send_message(text),
            success="Message sent successfully",
            failure="Error sending message",
        )

    async def edit(self, message_id: int, text: str) -> bool:
        text = text.strip()
        if not text:
            self.board.notify("Message cannot be empty", NotificationLevel.DANGER)
            return False
        return await self._mutate(
            self._api.edit_message(message_id, text),
            success="Message updated successfully",
            failure="Error updating message",
        )

    async def delete(self, message_id: int) -> bool:
        return await self._mutate(
            self._api.delete_message(message_id),
            success="Message deleted successfully",
            failure="Error deleting message",
        )

    async def search(self, text: str) -> bool:
        """Show matching messages once. The cursor is left alone."""
        text = text.strip()
        if not text:
            self.board.notify("Please enter search text", NotificationLevel.WARNING)
            return False
        try:
            async with self.poller.exclusive():
                results = await self._api.search_messages(text)
                self.board.replace(results, mode=BoardMode.SEARCH)
        except SessionExpiredError:
            await self.poller.handle_session_lost()
            return False
        except ChatroomApiError as exc:
            self.board.notify(f"Error searching messages: {exc.detail}", NotificationLevel.DANGER)
            await self.poller.refresh()
            return False
        return True

    async def show_all(self) -> bool:
        return await self.poller.refresh()

    async def _mutate(self, call: Awaitable[object], *, success: str, failure: str) -> bool:
        try:
            await call
        except SessionExpiredError:
            await self.poller.handle_session_lost()
            return False
        except ChatroomApiError as exc:
            logger.warning("%s: %s", failure, exc)
            self.board.notify(exc.detail or failure, NotificationLevel.DANGER)
            return False
        await self.poller.refresh()
        self.board.notify(success)
        return True
