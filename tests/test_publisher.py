"""Tests for pushing in-app notifications to open inbox sockets."""

from __future__ import annotations

import asyncio

from compliance_notifier.domain.entities import (
    NOTIFICATION_CHANNEL_IN_APP,
    NOTIFICATION_PRIORITY_NORMAL,
    WELCOME,
    Notification,
)
from compliance_notifier.infrastructure.notifications import NotificationPublisher


class FakeManager:
    def __init__(self, error: Exception | None = None) -> None:
        self.sent: list[tuple[str, dict]] = []
        self.error = error

    def has_subscribers(self, user_id):
        return user_id == "user-1"

    async def send_to_user(self, user_id, message):
        if self.error is not None:
            raise self.error
        self.sent.append((user_id, message))
        return 1


def _notification(user_id="user-1") -> Notification:
    return Notification(
        id=7,
        organization_id=None,
        user_id=user_id,
        type=WELCOME,
        channel=NOTIFICATION_CHANNEL_IN_APP,
        priority=NOTIFICATION_PRIORITY_NORMAL,
        title="Welcome",
        message="Welcome to the portal.",
    )


async def _dispatch_and_settle(publisher, notification):
    dispatched = publisher.dispatch(notification)
    pending = len(publisher._pending)
    await asyncio.gather(*publisher._pending, return_exceptions=True)
    await asyncio.sleep(0)
    return dispatched, pending


def test_push_task_is_tracked_until_it_finishes():
    manager = FakeManager()
    publisher = NotificationPublisher(manager)

    dispatched, pending = asyncio.run(_dispatch_and_settle(publisher, _notification()))

    assert dispatched is True
    assert pending == 1
    assert publisher._pending == set()
    assert manager.sent[0][1]["data"]["id"] == 7


def test_failed_push_is_logged(caplog):
    publisher = NotificationPublisher(FakeManager(error=RuntimeError("socket closed")))

    with caplog.at_level("ERROR"):
        asyncio.run(_dispatch_and_settle(publisher, _notification()))

    assert publisher._pending == set()
    assert "Realtime push failed" in caplog.text


def test_nobody_listening_is_not_dispatched():
    publisher = NotificationPublisher(FakeManager())

    assert publisher.dispatch(_notification(user_id="user-2")) is False
