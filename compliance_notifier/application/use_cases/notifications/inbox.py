"""Read and acknowledge in-app notifications."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from compliance_notifier.domain.entities import Notification
from compliance_notifier.infrastructure.repositories import NotificationRepository


def list_notifications(
    session: Session, *, user_id: str, unread_only: bool = False, limit: int | None = 20
) -> Sequence[Notification]:
    repository = NotificationRepository(session)
    return repository.list_for_user(user_id, unread_only=unread_only, limit=limit)


def count_unread(session: Session, *, user_id: str) -> int:
    return NotificationRepository(session).count_unread(user_id)


def mark_notification_read(
    session: Session, *, user_id: str, notification_id: int
) -> Notification:
    """Mark one of the user's notifications as read.

    Raises ``ValueError`` when the notification does not exist or belongs to
    someone else.
    """

    repository = NotificationRepository(session)
    notification = repository.get(notification_id)
    if notification is None or notification.user_id != user_id:
        raise ValueError("Notification not found")
    if notification.read_at is None:
        repository.mark_as_read([notification_id], user_id=user_id)
        session.commit()
        notification = repository.get(notification_id) or notification
    return notification


def mark_all_notifications_read(session: Session, *, user_id: str) -> int:
    repository = NotificationRepository(session)
    updated = repository.mark_all_as_read(user_id=user_id)
    session.commit()
    return updated


__all__ = [
    "count_unread",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
]
