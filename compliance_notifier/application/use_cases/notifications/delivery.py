"""Deliver scheduled notifications and retry failed ones with backoff."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from compliance_notifier.config import get_settings
from compliance_notifier.domain.entities import Notification
from compliance_notifier.infrastructure.repositories import NotificationRepository
from compliance_notifier.utils import now_in_app_timezone

from .dispatch import NotificationChannels, send_notification

logger = logging.getLogger(__name__)


def compute_next_retry_at(attempt: int, failed_at: datetime) -> datetime:
    """Return when attempt ``attempt`` (1-based) may be retried.

    The delay doubles with every attempt, starting at the configured initial
    backoff and never exceeding the configured maximum.
    """

    settings = get_settings()
    exponent = max(attempt, 1) - 1
    delay = min(
        settings.retry_initial_backoff_seconds * (2**exponent),
        settings.retry_max_backoff_seconds,
    )
    return failed_at + timedelta(seconds=delay)


def process_scheduled_notifications(
    session: Session,
    *,
    channels: NotificationChannels | None = None,
    limit: int | None = None,
) -> int:
    """Send pending notifications whose schedule has elapsed.

    Returns the number delivered successfully. Each record is committed on
    its own so one broken row does not hold back the rest of the batch.
    """

    settings = get_settings()
    repository = NotificationRepository(session)
    due = repository.list_due_scheduled(
        now=now_in_app_timezone(), limit=limit or settings.scheduled_batch_size
    )

    delivered = 0
    for notification in due:
        try:
            result = send_notification(session, notification.id, channels=channels)
        except Exception:
            session.rollback()
            logger.exception("Failed to process scheduled notification %s", notification.id)
            continue
        if result.success:
            delivered += 1
    if due:
        logger.info("Processed %s scheduled notifications, %s sent", len(due), delivered)
    return delivered


def retry_failed_notifications(
    session: Session,
    *,
    channels: NotificationChannels | None = None,
    limit: int | None = None,
) -> int:
    """Retry failed notifications that still have attempts left.

    Returns the number that succeeded on this pass.
    """

    settings = get_settings()
    max_retries = settings.notification_max_retries
    repository = NotificationRepository(session)
    candidates = repository.list_retryable(
        now=now_in_app_timezone(),
        max_retries=max_retries,
        limit=limit or settings.retry_batch_size,
    )

    recovered = 0
    for notification in candidates:
        try:
            attempted_at = now_in_app_timezone()
            repository.record_retry_attempt(notification.id, attempted_at=attempted_at)
            result = send_notification(
                session, notification.id, channels=channels, commit=False
            )
            if result.success:
                recovered += 1
            else:
                updated = repository.get(notification.id)
                next_retry_at = None
                if updated is not None and updated.retry_count < max_retries:
                    next_retry_at = compute_next_retry_at(updated.retry_count, attempted_at)
                else:
                    logger.warning(
                        "Notification %s exhausted its %s delivery attempts",
                        notification.id,
                        max_retries,
                    )
                repository.schedule_retry(notification.id, next_retry_at=next_retry_at)
            session.commit()
        except Exception:
            session.rollback()
            logger.exception("Failed to retry notification %s", notification.id)
    if candidates:
        logger.info("Retried %s failed notifications, %s recovered", len(candidates), recovered)
    return recovered


def list_terminal_failures(
    session: Session, *, limit: int | None = 100
) -> Sequence[Notification]:
    """Return failed notifications that will not be retried again."""

    return NotificationRepository(session).list_terminal_failures(
        max_retries=get_settings().notification_max_retries, limit=limit
    )


__all__ = [
    "compute_next_retry_at",
    "list_terminal_failures",
    "process_scheduled_notifications",
    "retry_failed_notifications",
]
