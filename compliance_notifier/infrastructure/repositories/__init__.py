"""Repository implementations for infrastructure layer."""

from .capa_record_repository import CapaRecordRepository
from .document_repository import DOCUMENT_REVIEW_THRESHOLDS, DocumentRepository
from .insurance_policy_repository import (
    INSURANCE_ALERT_THRESHOLDS,
    InsurancePolicyRepository,
)
from .notification_preference_repository import (
    OrganizationNotificationPreferenceRepository,
    UserNotificationPreferenceRepository,
)
from .notification_repository import NotificationRepository
from .organization_repository import OrganizationRepository
from .programme_enrolment_repository import (
    RENEWAL_ALERT_THRESHOLDS,
    ProgrammeEnrolmentRepository,
)

__all__ = [
    "CapaRecordRepository",
    "DocumentRepository",
    "DOCUMENT_REVIEW_THRESHOLDS",
    "InsurancePolicyRepository",
    "INSURANCE_ALERT_THRESHOLDS",
    "NotificationRepository",
    "OrganizationNotificationPreferenceRepository",
    "OrganizationRepository",
    "ProgrammeEnrolmentRepository",
    "RENEWAL_ALERT_THRESHOLDS",
    "UserNotificationPreferenceRepository",
]
