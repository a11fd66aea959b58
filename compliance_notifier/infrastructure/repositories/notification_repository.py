"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Iterable

from sqlalchemy import or_
from sqlalchemy.orm import Session

from compliance_notifier.domain.entities import (
    NOTIFICATION_CHANNEL_IN_APP,
    NOTIFICATION_STATUS_FAILED,
    NOTIFICATION_STATUS_PENDING,
    NOTIFICATION_STATUS_SENT,
    Notification,
)
from compliance_notifier.infrastructure.models import NotificationModel
from compliance_notifier.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide persistence operations for :class:`Notification` objects.

    Methods flush but never commit; the calling use case owns the unit of work.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        model.created_at = ensure_app_naive_datetime(
            notification.created_at or now_in_app_timezone()
        )
        self.session.add(model)
        self.session.flush()
        return self._to_entity(model)

    def mark_sent(
        self, notification_id: int, *, external_id: str | None, sent_at: datetime
    ) -> Notification:
        model = self._require_model(notification_id)
        model.status = NOTIFICATION_STATUS_SENT
        model.sent_at = ensure_app_naive_datetime(sent_at)
        model.external_id = external_id
        model.next_retry_at = None
        model.failure_reason = None
        self.session.flush()
        return self._to_entity(model)

    def mark_failed(
        self, notification_id: int, *, reason: str, max_retries: int
    ) -> Notification:
        model = self._require_model(notification_id)
        if model.status == NOTIFICATION_STATUS_SENT:
            msg = f"Notification {notification_id} was already sent"
            raise ValueError(msg)
        model.status = NOTIFICATION_STATUS_FAILED
        model.failure_reason = reason
        model.retry_count = min((model.retry_count or 0) + 1, max_retries)
        self.session.flush()
        return self._to_entity(model)

    def record_retry_attempt(self, notification_id: int, *, attempted_at: datetime) -> None:
        model = self._require_model(notification_id)
        model.last_retry_at = ensure_app_naive_datetime(attempted_at)
        self.session.flush()

    def schedule_retry(
        self, notification_id: int, *, next_retry_at: datetime | None
    ) -> None:
        model = self._require_model(notification_id)
        model.next_retry_at = ensure_app_naive_datetime(next_retry_at)
        self.session.flush()

    def list_due_scheduled(self, *, now: datetime, limit: int) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.status == NOTIFICATION_STATUS_PENDING)
            .filter(NotificationModel.scheduled_for <= ensure_app_naive_datetime(now))
            .order_by(NotificationModel.scheduled_for.asc(), NotificationModel.id.asc())
            .limit(limit)
        )
        return [self._to_entity(model) for model in query.all()]

    def list_retryable(
        self, *, now: datetime, max_retries: int, limit: int
    ) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.status == NOTIFICATION_STATUS_FAILED)
            .filter(NotificationModel.retry_count < max_retries)
            .filter(
                or_(
                    NotificationModel.next_retry_at.is_(None),
                    NotificationModel.next_retry_at <= ensure_app_naive_datetime(now),
                )
            )
            .order_by(NotificationModel.id.asc())
            .limit(limit)
        )
        return [self._to_entity(model) for model in query.all()]

    def list_terminal_failures(
        self, *, max_retries: int, limit: int | None = 100
    ) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.status == NOTIFICATION_STATUS_FAILED)
            .filter(NotificationModel.retry_count >= max_retries)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def list_for_user(
        self,
        user_id: str,
        *,
        unread_only: bool = False,
        limit: int | None = 20,
    ) -> Sequence[Notification]:
        query = self.session.query(NotificationModel)
        if unread_only:
            query = query.filter(NotificationModel.user_id == user_id).filter(
                NotificationModel.channel == NOTIFICATION_CHANNEL_IN_APP,
                NotificationModel.read_at.is_(None),
            )
        else:
            # System-wide notifications carry neither a user nor an organization.
            query = query.filter(
                or_(
                    NotificationModel.user_id == user_id,
                    (NotificationModel.user_id.is_(None))
                    & (NotificationModel.organization_id.is_(None)),
                )
            )
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count_unread(self, user_id: str) -> int:
        return (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.channel == NOTIFICATION_CHANNEL_IN_APP)
            .filter(NotificationModel.read_at.is_(None))
            .count()
        )

    def mark_as_read(self, notification_ids: Iterable[int], *, user_id: str) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id.in_(ids),
                NotificationModel.user_id == user_id,
                NotificationModel.read_at.is_(None),
            )
            .update(
                {
                    NotificationModel.read_at: ensure_app_naive_datetime(
                        now_in_app_timezone()
                    )
                },
                synchronize_session=False,
            )
        )
        self.session.flush()
        return updated

    def mark_all_as_read(self, *, user_id: str) -> int:
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.user_id == user_id,
                NotificationModel.read_at.is_(None),
            )
            .update(
                {
                    NotificationModel.read_at: ensure_app_naive_datetime(
                        now_in_app_timezone()
                    )
                },
                synchronize_session=False,
            )
        )
        self.session.flush()
        return updated

    def _require_model(self, notification_id: int) -> NotificationModel:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            msg = f"Notification with id {notification_id} not found"
            raise ValueError(msg)
        return model

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel, notification: Notification
    ) -> None:
        model.organization_id = notification.organization_id
        model.user_id = notification.user_id
        model.type = notification.type
        model.channel = notification.channel
        model.priority = notification.priority
        model.title = notification.title
        model.message = notification.message
        model.action_url = notification.action_url
        model.recipient = notification.recipient
        model.status = notification.status
        model.scheduled_for = ensure_app_naive_datetime(notification.scheduled_for)
        model.sent_at = ensure_app_naive_datetime(notification.sent_at)
        model.read_at = ensure_app_naive_datetime(notification.read_at)
        model.last_retry_at = ensure_app_naive_datetime(notification.last_retry_at)
        model.next_retry_at = ensure_app_naive_datetime(notification.next_retry_at)
        model.retry_count = notification.retry_count
        model.external_id = notification.external_id
        model.failure_reason = notification.failure_reason

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            organization_id=model.organization_id,
            user_id=model.user_id,
            type=model.type,
            channel=model.channel,
            priority=model.priority,
            title=model.title,
            message=model.message,
            action_url=model.action_url,
            recipient=model.recipient,
            status=model.status,
            scheduled_for=ensure_app_timezone(model.scheduled_for),
            created_at=ensure_app_timezone(model.created_at),
            sent_at=ensure_app_timezone(model.sent_at),
            read_at=ensure_app_timezone(model.read_at),
            last_retry_at=ensure_app_timezone(model.last_retry_at),
            next_retry_at=ensure_app_timezone(model.next_retry_at),
            retry_count=model.retry_count or 0,
            external_id=model.external_id,
            failure_reason=model.failure_reason,
        )


__all__ = ["NotificationRepository"]
