"""Notification delivery: preference checks, dispatch, retries and inbox."""

from .delivery import (
    compute_next_retry_at,
    list_terminal_failures,
    process_scheduled_notifications,
    retry_failed_notifications,
)
from .dispatch import (
    ChannelDeliveryError,
    NotificationChannels,
    NotificationRequest,
    SendResult,
    create_notification,
    default_channels,
    send_notification,
)
from .inbox import (
    count_unread,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from .messages import (
    COMPLIANCE_AT_RISK_THRESHOLD,
    SmsTemplates,
    member_lbp_message,
    notify_audit_scheduled,
    notify_capa_overdue,
    notify_compliance_alert,
    notify_insurance_expired,
    notify_insurance_expiry,
    notify_lbp_status_change,
    organization_lbp_message,
)
from .preferences import (
    OrganizationNotFoundError,
    PreferenceDecision,
    get_organization_preferences,
    get_user_preferences,
    should_send,
    update_organization_preferences,
    update_user_preferences,
)
from .rules import NOTIFICATION_RULES, NotificationRule, get_notification_rule

__all__ = [
    "ChannelDeliveryError",
    "COMPLIANCE_AT_RISK_THRESHOLD",
    "NOTIFICATION_RULES",
    "NotificationChannels",
    "NotificationRequest",
    "NotificationRule",
    "OrganizationNotFoundError",
    "PreferenceDecision",
    "SendResult",
    "SmsTemplates",
    "compute_next_retry_at",
    "count_unread",
    "create_notification",
    "default_channels",
    "get_notification_rule",
    "get_organization_preferences",
    "get_user_preferences",
    "list_notifications",
    "list_terminal_failures",
    "mark_all_notifications_read",
    "mark_notification_read",
    "member_lbp_message",
    "notify_audit_scheduled",
    "notify_capa_overdue",
    "notify_compliance_alert",
    "notify_insurance_expired",
    "notify_insurance_expiry",
    "notify_lbp_status_change",
    "organization_lbp_message",
    "process_scheduled_notifications",
    "retry_failed_notifications",
    "send_notification",
    "should_send",
    "update_organization_preferences",
    "update_user_preferences",
]
