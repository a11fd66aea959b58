"""Create notification records and push them through their delivery channel."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from sqlalchemy.orm import Session

from compliance_notifier.config import get_settings
from compliance_notifier.domain.entities import (
    NOTIFICATION_CHANNEL_EMAIL,
    NOTIFICATION_CHANNEL_IN_APP,
    NOTIFICATION_CHANNEL_PUSH,
    NOTIFICATION_CHANNEL_SMS,
    NOTIFICATION_CHANNELS,
    NOTIFICATION_PRIORITIES,
    NOTIFICATION_PRIORITY_NORMAL,
    NOTIFICATION_STATUS_PENDING,
    NOTIFICATION_STATUS_QUEUED,
    NOTIFICATION_STATUS_SENT,
    Notification,
)
from compliance_notifier.infrastructure import email as email_channel
from compliance_notifier.infrastructure import sms as sms_channel
from compliance_notifier.infrastructure.email import EmailSendResult, render_notification_email
from compliance_notifier.infrastructure.notifications import dispatch_notification
from compliance_notifier.infrastructure.repositories import NotificationRepository
from compliance_notifier.infrastructure.sms import SmsSendResult
from compliance_notifier.utils import ensure_app_timezone, now_in_app_timezone

from .preferences import should_send
from .rules import get_notification_rule

logger = logging.getLogger(__name__)

EmailSender = Callable[[str, str, str], EmailSendResult]
SmsSender = Callable[[str, str], SmsSendResult]


class ChannelDeliveryError(RuntimeError):
    """Raised when a channel provider rejects or cannot accept a message."""


@dataclass(frozen=True)
class NotificationChannels:
    """Channel adapters used to deliver notifications."""

    email: EmailSender
    sms: SmsSender


def default_channels() -> NotificationChannels:
    return NotificationChannels(email=email_channel.send_email, sms=sms_channel.send_sms)


@dataclass
class NotificationRequest:
    type: str
    channel: str
    title: str
    message: str
    organization_id: int | None = None
    user_id: str | None = None
    priority: str = NOTIFICATION_PRIORITY_NORMAL
    action_url: str | None = None
    recipient: str | None = None
    scheduled_for: datetime | None = None


@dataclass(frozen=True)
class SendResult:
    success: bool
    notification_id: int | None = None
    external_id: str | None = None
    skipped: bool = False
    reason: str | None = None
    error: str | None = None


def _validate_request(params: NotificationRequest) -> None:
    get_notification_rule(params.type)
    if params.channel not in NOTIFICATION_CHANNELS:
        raise ValueError(f"Unknown notification channel: {params.channel}")
    if params.priority not in NOTIFICATION_PRIORITIES:
        raise ValueError(f"Unknown notification priority: {params.priority}")
    if not (params.title or "").strip():
        raise ValueError("Notification title is required")
    if not (params.message or "").strip():
        raise ValueError("Notification message is required")


def create_notification(
    session: Session,
    params: NotificationRequest,
    *,
    channels: NotificationChannels | None = None,
    commit: bool = True,
) -> SendResult:
    """Persist a notification and deliver it unless it is scheduled for later.

    A preference veto is not an error: nothing is stored and the result is
    marked ``skipped``. With ``commit=False`` the caller owns the transaction.
    """

    _validate_request(params)

    decision = should_send(
        session,
        organization_id=params.organization_id,
        user_id=params.user_id,
        type=params.type,
        channel=params.channel,
        priority=params.priority,
    )
    if not decision.send:
        logger.info(
            "Skipped %s %s notification (organization=%s user=%s): %s",
            params.type,
            params.channel,
            params.organization_id,
            params.user_id,
            decision.reason,
        )
        return SendResult(success=True, skipped=True, reason=decision.reason)

    now = now_in_app_timezone()
    scheduled_for = ensure_app_timezone(params.scheduled_for)
    deferred = scheduled_for is not None and scheduled_for > now

    repository = NotificationRepository(session)
    notification = repository.create(
        Notification(
            id=None,
            organization_id=params.organization_id,
            user_id=params.user_id,
            type=params.type,
            channel=params.channel,
            priority=params.priority,
            title=params.title,
            message=params.message,
            action_url=params.action_url,
            recipient=params.recipient,
            status=NOTIFICATION_STATUS_PENDING if deferred else NOTIFICATION_STATUS_QUEUED,
            scheduled_for=scheduled_for,
            created_at=now,
        )
    )

    if deferred:
        if commit:
            session.commit()
        logger.debug("Notification %s scheduled for %s", notification.id, scheduled_for)
        return SendResult(success=True, notification_id=notification.id)

    return send_notification(session, notification.id, channels=channels, commit=commit)


def _deliver(notification: Notification, channels: NotificationChannels) -> str | None:
    """Hand ``notification`` to its channel and return the provider message id."""

    if notification.channel == NOTIFICATION_CHANNEL_EMAIL:
        if not notification.recipient:
            raise ChannelDeliveryError("Email recipient is missing")
        html_content = render_notification_email(
            notification.title, notification.message, notification.action_url
        )
        result = channels.email(notification.title, html_content, notification.recipient)
        if not result.success:
            raise ChannelDeliveryError(result.error or "Email delivery failed")
        return result.id

    if notification.channel == NOTIFICATION_CHANNEL_SMS:
        if not notification.recipient:
            raise ChannelDeliveryError("SMS recipient is missing")
        result = channels.sms(notification.recipient, notification.message)
        if not result.success:
            raise ChannelDeliveryError(result.error or "SMS delivery failed")
        return result.message_id

    if notification.channel == NOTIFICATION_CHANNEL_IN_APP:
        try:
            dispatch_notification(notification)
        except Exception:
            logger.exception("Realtime push failed for notification %s", notification.id)
        return str(notification.id)

    if notification.channel == NOTIFICATION_CHANNEL_PUSH:
        logger.info("Push delivery is not available; notification %s marked sent", notification.id)
        return None

    raise ValueError(f"Unknown notification channel: {notification.channel}")


def send_notification(
    session: Session,
    notification_id: int,
    *,
    channels: NotificationChannels | None = None,
    commit: bool = True,
) -> SendResult:
    """Deliver a stored notification and record the outcome on its row."""

    repository = NotificationRepository(session)
    notification = repository.get(notification_id)
    if notification is None:
        return SendResult(success=False, error="Notification not found")

    if notification.status == NOTIFICATION_STATUS_SENT:
        return SendResult(
            success=True,
            notification_id=notification.id,
            external_id=notification.external_id,
        )

    channels = channels or default_channels()
    try:
        external_id = _deliver(notification, channels)
    except Exception as exc:
        failed = repository.mark_failed(
            notification.id,
            reason=str(exc),
            max_retries=get_settings().notification_max_retries,
        )
        if commit:
            session.commit()
        logger.warning(
            "Delivery of notification %s over %s failed (attempt %s): %s",
            notification.id,
            notification.channel,
            failed.retry_count,
            exc,
        )
        return SendResult(success=False, notification_id=notification.id, error=str(exc))

    repository.mark_sent(notification.id, external_id=external_id, sent_at=now_in_app_timezone())
    if commit:
        session.commit()
    return SendResult(success=True, notification_id=notification.id, external_id=external_id)


__all__ = [
    "ChannelDeliveryError",
    "NotificationChannels",
    "NotificationRequest",
    "SendResult",
    "create_notification",
    "default_channels",
    "send_notification",
]
