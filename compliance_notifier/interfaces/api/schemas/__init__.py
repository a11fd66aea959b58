from .cron import CronJobResponse
from .notification import (
    NotificationListResponse,
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
)
from .preference import (
    OrganizationNotificationPreferenceRead,
    OrganizationNotificationPreferenceUpdate,
    UserNotificationPreferenceRead,
    UserNotificationPreferenceUpdate,
)

__all__ = [
    "CronJobResponse",
    "NotificationListResponse",
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
    "OrganizationNotificationPreferenceRead",
    "OrganizationNotificationPreferenceUpdate",
    "UserNotificationPreferenceRead",
    "UserNotificationPreferenceUpdate",
]
