"""Domain entities describing notification opt-in settings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class UserNotificationPreference:
    """Per-user channel switches and per-topic opt-ins."""

    id: int | None
    user_id: str
    email_enabled: bool = True
    email_insurance: bool = True
    email_audit: bool = True
    email_compliance: bool = True
    email_newsletter: bool = True
    sms_enabled: bool = False
    sms_insurance: bool = True
    sms_audit: bool = False
    sms_critical: bool = True
    sms_phone_number: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class OrganizationNotificationPreference:
    """Organization-wide policy consulted before any user preference."""

    id: int | None
    organization_id: int
    email_enabled: bool = True
    email_insurance_alerts: bool = True
    email_audit_alerts: bool = True
    email_compliance_alerts: bool = True
    email_system_alerts: bool = True
    sms_enabled: bool = False
    sms_insurance_alerts: bool = True
    sms_audit_alerts: bool = False
    sms_critical_alerts: bool = True
    notification_email: str | None = None
    notification_phone: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


__all__ = ["UserNotificationPreference", "OrganizationNotificationPreference"]
