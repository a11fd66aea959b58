"""Push freshly sent in-app notifications to the user's open inbox sockets."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from anyio import from_thread

from compliance_notifier.domain.entities import Notification

from .manager import NotificationConnectionManager, notification_manager

logger = logging.getLogger(__name__)


class NotificationPublisher:
    """Bridge the synchronous send path to the async websocket manager."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager
        self._pending: set[asyncio.Task[int]] = set()

    def dispatch(self, notification: Notification) -> bool:
        """Schedule ``notification`` for its user's open websockets.

        Returns ``False`` when nobody is listening or no event loop is
        reachable from the current thread (e.g. a CLI sweep); the stored row
        remains the deliverable either way.
        """

        user_id = notification.user_id
        if not self._manager.has_subscribers(user_id):
            return False

        message = {"type": "notification", "data": self._serialize(notification)}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self._manager.send_to_user, user_id, message)
            except RuntimeError:
                logger.debug("No event loop available to push notification %s", notification.id)
                return False
        else:
            task = loop.create_task(self._manager.send_to_user(user_id, message))
            self._pending.add(task)
            task.add_done_callback(self._finish)
        return True

    def _finish(self, task: asyncio.Task[int]) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Realtime push failed", exc_info=task.exception())

    @staticmethod
    def _serialize(notification: Notification) -> dict[str, Any]:
        return {
            "id": notification.id,
            "organization_id": notification.organization_id,
            "user_id": notification.user_id,
            "type": notification.type,
            "priority": notification.priority,
            "title": notification.title,
            "message": notification.message,
            "action_url": notification.action_url,
            "created_at": notification.created_at.isoformat()
            if notification.created_at
            else None,
            "read_at": notification.read_at.isoformat() if notification.read_at else None,
        }


notification_publisher = NotificationPublisher(notification_manager)


def dispatch_notification(notification: Notification) -> bool:
    """Push ``notification`` through the process-wide publisher."""

    return notification_publisher.dispatch(notification)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Inbox payload shared by live pushes and the websocket init message."""

    return NotificationPublisher._serialize(notification)


__all__ = [
    "NotificationPublisher",
    "notification_publisher",
    "dispatch_notification",
    "serialize_notification",
]
