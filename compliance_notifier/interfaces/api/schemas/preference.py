"""Pydantic models for notification preference settings."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_NULLABLE_FIELDS = {"sms_phone_number", "notification_email", "notification_phone"}


def _drop_null_flags(values: dict[str, Any]) -> dict[str, Any]:
    """Ignore explicit nulls for switches, which cannot be unset."""

    return {
        name: value
        for name, value in values.items()
        if value is not None or name in _NULLABLE_FIELDS
    }


class UserNotificationPreferenceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    email_enabled: bool
    email_insurance: bool
    email_audit: bool
    email_compliance: bool
    email_newsletter: bool
    sms_enabled: bool
    sms_insurance: bool
    sms_audit: bool
    sms_critical: bool
    sms_phone_number: str | None = None
    updated_at: datetime | None = None


class UserNotificationPreferenceUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    model_config = ConfigDict(extra="forbid")

    email_enabled: bool | None = None
    email_insurance: bool | None = None
    email_audit: bool | None = None
    email_compliance: bool | None = None
    email_newsletter: bool | None = None
    sms_enabled: bool | None = None
    sms_insurance: bool | None = None
    sms_audit: bool | None = None
    sms_critical: bool | None = None
    sms_phone_number: str | None = Field(default=None, max_length=20)

    def changes(self) -> dict[str, Any]:
        return _drop_null_flags(self.model_dump(exclude_unset=True))


class OrganizationNotificationPreferenceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    organization_id: int
    email_enabled: bool
    email_insurance_alerts: bool
    email_audit_alerts: bool
    email_compliance_alerts: bool
    email_system_alerts: bool
    sms_enabled: bool
    sms_insurance_alerts: bool
    sms_audit_alerts: bool
    sms_critical_alerts: bool
    notification_email: str | None = None
    notification_phone: str | None = None
    updated_at: datetime | None = None


class OrganizationNotificationPreferenceUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email_enabled: bool | None = None
    email_insurance_alerts: bool | None = None
    email_audit_alerts: bool | None = None
    email_compliance_alerts: bool | None = None
    email_system_alerts: bool | None = None
    sms_enabled: bool | None = None
    sms_insurance_alerts: bool | None = None
    sms_audit_alerts: bool | None = None
    sms_critical_alerts: bool | None = None
    notification_email: str | None = Field(default=None, max_length=120)
    notification_phone: str | None = Field(default=None, max_length=20)

    def changes(self) -> dict[str, Any]:
        return _drop_null_flags(self.model_dump(exclude_unset=True))


__all__ = [
    "OrganizationNotificationPreferenceRead",
    "OrganizationNotificationPreferenceUpdate",
    "UserNotificationPreferenceRead",
    "UserNotificationPreferenceUpdate",
]
