"""Websocket subscriptions for the in-app notification inbox."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class NotificationConnectionManager:
    """Track open inbox websockets per portal user.

    A user may have several tabs open; every socket receives each push.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[WebSocket]] = {}

    async def connect(self, user_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        sockets = self._subscribers.setdefault(user_id, [])
        if websocket not in sockets:
            sockets.append(websocket)
        logger.debug("Inbox websocket opened for user %s (%s open)", user_id, len(sockets))

    def disconnect(self, user_id: str, websocket: WebSocket) -> None:
        sockets = self._subscribers.get(user_id, [])
        if websocket in sockets:
            sockets.remove(websocket)
        if not sockets:
            self._subscribers.pop(user_id, None)

    def has_subscribers(self, user_id: str | None) -> bool:
        return bool(user_id and self._subscribers.get(user_id))

    async def send_to_user(self, user_id: str, message: dict[str, Any]) -> int:
        """Push ``message`` to the user's sockets and return how many accepted it.

        Sockets that fail to send are treated as closed and dropped.
        """

        delivered = 0
        for websocket in tuple(self._subscribers.get(user_id, ())):
            try:
                await websocket.send_json(message)
            except Exception:
                logger.debug("Dropping closed inbox websocket for user %s", user_id)
                self.disconnect(user_id, websocket)
            else:
                delivered += 1
        return delivered


notification_manager = NotificationConnectionManager()


__all__ = ["NotificationConnectionManager", "notification_manager"]
