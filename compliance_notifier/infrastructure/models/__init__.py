"""ORM models used by the application infrastructure."""

from .compliance import (
    CapaRecordModel,
    DocumentModel,
    InsurancePolicyModel,
    ProgrammeEnrolmentModel,
)
from .notification import NotificationModel
from .notification_preference import (
    OrganizationNotificationPreferenceModel,
    UserNotificationPreferenceModel,
)
from .organization import OrganizationMemberModel, OrganizationModel

__all__ = [
    "CapaRecordModel",
    "DocumentModel",
    "InsurancePolicyModel",
    "ProgrammeEnrolmentModel",
    "NotificationModel",
    "OrganizationNotificationPreferenceModel",
    "UserNotificationPreferenceModel",
    "OrganizationMemberModel",
    "OrganizationModel",
]
