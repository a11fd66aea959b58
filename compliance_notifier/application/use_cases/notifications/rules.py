"""Mapping from notification types to the preference fields that gate them."""

from __future__ import annotations

from dataclasses import dataclass

from compliance_notifier.domain.entities import (
    AUDIT_COMPLETED,
    AUDIT_REMINDER,
    AUDIT_SCHEDULED,
    CAPA_DUE,
    CAPA_OVERDUE,
    COMPLIANCE_ALERT,
    CREDENTIAL_EXPIRY,
    CREDENTIAL_STATUS_CHANGE,
    DOCUMENT_REVIEW_DUE,
    INSURANCE_EXPIRED,
    INSURANCE_EXPIRY,
    LBP_EXPIRY,
    LBP_STATUS_CHANGE,
    NOTIFICATION_CHANNEL_EMAIL,
    NOTIFICATION_CHANNEL_SMS,
    PROGRAMME_RENEWAL,
    PROGRAMME_STATUS_CHANGE,
    SYSTEM,
    TESTIMONIAL_RECEIVED,
    TESTIMONIAL_REQUEST,
    TIER_CHANGE,
    WELCOME,
)

USER_SMS_CRITICAL_FIELD = "sms_critical"


@dataclass(frozen=True)
class NotificationRule:
    """Preference fields consulted for one notification type.

    ``None`` for a field means the corresponding level has no per-topic
    switch; only its master switch applies. ``always_send_email`` and
    ``always_send_sms`` bypass every preference for that channel.
    """

    email_pref: str | None = None
    sms_pref: str | None = None
    org_email_pref: str | None = None
    org_sms_pref: str | None = None
    always_send_email: bool = False
    always_send_sms: bool = False

    @property
    def critical_sms(self) -> bool:
        return self.sms_pref == USER_SMS_CRITICAL_FIELD

    def always_send(self, channel: str) -> bool:
        if channel == NOTIFICATION_CHANNEL_EMAIL:
            return self.always_send_email
        if channel == NOTIFICATION_CHANNEL_SMS:
            return self.always_send_sms
        return True

    def user_field(self, channel: str) -> str | None:
        return self.email_pref if channel == NOTIFICATION_CHANNEL_EMAIL else self.sms_pref

    def organization_field(self, channel: str) -> str | None:
        if channel == NOTIFICATION_CHANNEL_EMAIL:
            return self.org_email_pref
        return self.org_sms_pref


_INSURANCE = NotificationRule(
    email_pref="email_insurance",
    sms_pref="sms_insurance",
    org_email_pref="email_insurance_alerts",
    org_sms_pref="sms_insurance_alerts",
)
_LBP = NotificationRule(
    sms_pref=USER_SMS_CRITICAL_FIELD,
    org_sms_pref="sms_critical_alerts",
    always_send_email=True,
)
_AUDIT = NotificationRule(
    email_pref="email_audit",
    sms_pref="sms_audit",
    org_email_pref="email_audit_alerts",
    org_sms_pref="sms_audit_alerts",
)
_COMPLIANCE = NotificationRule(
    email_pref="email_compliance",
    sms_pref=USER_SMS_CRITICAL_FIELD,
    org_email_pref="email_compliance_alerts",
    org_sms_pref="sms_critical_alerts",
)
_DOCUMENT = NotificationRule(
    email_pref="email_compliance",
    org_email_pref="email_compliance_alerts",
    always_send_sms=True,
)
_TESTIMONIAL = NotificationRule(
    email_pref="email_newsletter",
    org_email_pref="email_system_alerts",
    always_send_sms=True,
)
_SYSTEM = NotificationRule(
    sms_pref=USER_SMS_CRITICAL_FIELD,
    org_email_pref="email_system_alerts",
    org_sms_pref="sms_critical_alerts",
    always_send_email=True,
)
_WELCOME = NotificationRule(
    org_email_pref="email_system_alerts",
    always_send_email=True,
    always_send_sms=True,
)
_RENEWAL = NotificationRule(
    email_pref="email_compliance",
    sms_pref=USER_SMS_CRITICAL_FIELD,
    org_email_pref="email_compliance_alerts",
    org_sms_pref="sms_insurance_alerts",
)
_STATUS_CHANGE = NotificationRule(
    sms_pref=USER_SMS_CRITICAL_FIELD,
    org_email_pref="email_system_alerts",
    org_sms_pref="sms_critical_alerts",
    always_send_email=True,
)

NOTIFICATION_RULES: dict[str, NotificationRule] = {
    INSURANCE_EXPIRY: _INSURANCE,
    INSURANCE_EXPIRED: _INSURANCE,
    LBP_EXPIRY: _LBP,
    LBP_STATUS_CHANGE: _LBP,
    AUDIT_SCHEDULED: _AUDIT,
    AUDIT_REMINDER: _AUDIT,
    AUDIT_COMPLETED: _AUDIT,
    CAPA_DUE: _COMPLIANCE,
    CAPA_OVERDUE: _COMPLIANCE,
    COMPLIANCE_ALERT: _COMPLIANCE,
    DOCUMENT_REVIEW_DUE: _DOCUMENT,
    TESTIMONIAL_REQUEST: _TESTIMONIAL,
    TESTIMONIAL_RECEIVED: _TESTIMONIAL,
    TIER_CHANGE: _SYSTEM,
    SYSTEM: _SYSTEM,
    WELCOME: _WELCOME,
    PROGRAMME_RENEWAL: _RENEWAL,
    CREDENTIAL_EXPIRY: _RENEWAL,
    PROGRAMME_STATUS_CHANGE: _STATUS_CHANGE,
    CREDENTIAL_STATUS_CHANGE: _STATUS_CHANGE,
}


def get_notification_rule(notification_type: str) -> NotificationRule:
    """Return the rule for ``notification_type`` or raise ``ValueError``."""

    try:
        return NOTIFICATION_RULES[notification_type]
    except KeyError:
        msg = f"Unknown notification type: {notification_type}"
        raise ValueError(msg) from None


__all__ = [
    "NotificationRule",
    "NOTIFICATION_RULES",
    "USER_SMS_CRITICAL_FIELD",
    "get_notification_rule",
]
