"""Domain entity representing a notification delivery attempt."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

NOTIFICATION_CHANNEL_EMAIL = "EMAIL"
NOTIFICATION_CHANNEL_SMS = "SMS"
NOTIFICATION_CHANNEL_IN_APP = "IN_APP"
NOTIFICATION_CHANNEL_PUSH = "PUSH"
NOTIFICATION_CHANNELS = (
    NOTIFICATION_CHANNEL_EMAIL,
    NOTIFICATION_CHANNEL_SMS,
    NOTIFICATION_CHANNEL_IN_APP,
    NOTIFICATION_CHANNEL_PUSH,
)

NOTIFICATION_PRIORITY_LOW = "LOW"
NOTIFICATION_PRIORITY_NORMAL = "NORMAL"
NOTIFICATION_PRIORITY_HIGH = "HIGH"
NOTIFICATION_PRIORITY_CRITICAL = "CRITICAL"
NOTIFICATION_PRIORITIES = (
    NOTIFICATION_PRIORITY_LOW,
    NOTIFICATION_PRIORITY_NORMAL,
    NOTIFICATION_PRIORITY_HIGH,
    NOTIFICATION_PRIORITY_CRITICAL,
)

NOTIFICATION_STATUS_PENDING = "PENDING"
NOTIFICATION_STATUS_QUEUED = "QUEUED"
NOTIFICATION_STATUS_SENT = "SENT"
NOTIFICATION_STATUS_FAILED = "FAILED"

INSURANCE_EXPIRY = "INSURANCE_EXPIRY"
INSURANCE_EXPIRED = "INSURANCE_EXPIRED"
LBP_EXPIRY = "LBP_EXPIRY"
LBP_STATUS_CHANGE = "LBP_STATUS_CHANGE"
AUDIT_SCHEDULED = "AUDIT_SCHEDULED"
AUDIT_REMINDER = "AUDIT_REMINDER"
AUDIT_COMPLETED = "AUDIT_COMPLETED"
CAPA_DUE = "CAPA_DUE"
CAPA_OVERDUE = "CAPA_OVERDUE"
COMPLIANCE_ALERT = "COMPLIANCE_ALERT"
DOCUMENT_REVIEW_DUE = "DOCUMENT_REVIEW_DUE"
TESTIMONIAL_REQUEST = "TESTIMONIAL_REQUEST"
TESTIMONIAL_RECEIVED = "TESTIMONIAL_RECEIVED"
TIER_CHANGE = "TIER_CHANGE"
WELCOME = "WELCOME"
SYSTEM = "SYSTEM"
PROGRAMME_RENEWAL = "PROGRAMME_RENEWAL"
PROGRAMME_STATUS_CHANGE = "PROGRAMME_STATUS_CHANGE"
CREDENTIAL_EXPIRY = "CREDENTIAL_EXPIRY"
CREDENTIAL_STATUS_CHANGE = "CREDENTIAL_STATUS_CHANGE"


@dataclass
class Notification:
    """A single message addressed to a user and/or organization."""

    id: int | None
    organization_id: int | None
    user_id: str | None
    type: str
    channel: str
    priority: str
    title: str
    message: str
    action_url: str | None = None
    recipient: str | None = None
    status: str = NOTIFICATION_STATUS_QUEUED
    scheduled_for: datetime | None = None
    created_at: datetime | None = None
    sent_at: datetime | None = None
    read_at: datetime | None = None
    last_retry_at: datetime | None = None
    next_retry_at: datetime | None = None
    retry_count: int = 0
    external_id: str | None = None
    failure_reason: str | None = None

    def is_terminal_failure(self, max_retries: int) -> bool:
        """Return ``True`` when the record failed and exhausted its retries."""

        return self.status == NOTIFICATION_STATUS_FAILED and self.retry_count >= max_retries


__all__ = [
    "Notification",
    "NOTIFICATION_CHANNEL_EMAIL",
    "NOTIFICATION_CHANNEL_SMS",
    "NOTIFICATION_CHANNEL_IN_APP",
    "NOTIFICATION_CHANNEL_PUSH",
    "NOTIFICATION_CHANNELS",
    "NOTIFICATION_PRIORITY_LOW",
    "NOTIFICATION_PRIORITY_NORMAL",
    "NOTIFICATION_PRIORITY_HIGH",
    "NOTIFICATION_PRIORITY_CRITICAL",
    "NOTIFICATION_PRIORITIES",
    "NOTIFICATION_STATUS_PENDING",
    "NOTIFICATION_STATUS_QUEUED",
    "NOTIFICATION_STATUS_SENT",
    "NOTIFICATION_STATUS_FAILED",
    "INSURANCE_EXPIRY",
    "INSURANCE_EXPIRED",
    "LBP_EXPIRY",
    "LBP_STATUS_CHANGE",
    "AUDIT_SCHEDULED",
    "AUDIT_REMINDER",
    "AUDIT_COMPLETED",
    "CAPA_DUE",
    "CAPA_OVERDUE",
    "COMPLIANCE_ALERT",
    "DOCUMENT_REVIEW_DUE",
    "TESTIMONIAL_REQUEST",
    "TESTIMONIAL_RECEIVED",
    "TIER_CHANGE",
    "WELCOME",
    "SYSTEM",
    "PROGRAMME_RENEWAL",
    "PROGRAMME_STATUS_CHANGE",
    "CREDENTIAL_EXPIRY",
    "CREDENTIAL_STATUS_CHANGE",
]
