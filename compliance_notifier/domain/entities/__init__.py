"""Domain entities exposed by the application."""

from .capa_record import (
    CAPA_ACTIVE_STATUSES,
    CAPA_STATUS_CLOSED,
    CAPA_STATUS_IN_PROGRESS,
    CAPA_STATUS_OPEN,
    CAPA_STATUS_OVERDUE,
    CAPA_STATUS_PENDING_VERIFICATION,
    CapaRecord,
)
from .document import Document
from .insurance_policy import INSURANCE_POLICY_TYPE_LABELS, InsurancePolicy
from .notification import (
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
    NOTIFICATION_CHANNEL_IN_APP,
    NOTIFICATION_CHANNEL_PUSH,
    NOTIFICATION_CHANNEL_SMS,
    NOTIFICATION_CHANNELS,
    NOTIFICATION_PRIORITIES,
    NOTIFICATION_PRIORITY_CRITICAL,
    NOTIFICATION_PRIORITY_HIGH,
    NOTIFICATION_PRIORITY_LOW,
    NOTIFICATION_PRIORITY_NORMAL,
    NOTIFICATION_STATUS_FAILED,
    NOTIFICATION_STATUS_PENDING,
    NOTIFICATION_STATUS_QUEUED,
    NOTIFICATION_STATUS_SENT,
    PROGRAMME_RENEWAL,
    PROGRAMME_STATUS_CHANGE,
    SYSTEM,
    TESTIMONIAL_RECEIVED,
    TESTIMONIAL_REQUEST,
    TIER_CHANGE,
    WELCOME,
    Notification,
)
from .notification_preference import (
    OrganizationNotificationPreference,
    UserNotificationPreference,
)
from .organization import (
    LBP_STATUS_CANCELLED,
    LBP_STATUS_CURRENT,
    LBP_STATUS_EXPIRED,
    LBP_STATUS_NOT_FOUND,
    LBP_STATUS_SUSPENDED,
    MEMBER_ROLE_ADMIN,
    MEMBER_ROLE_OWNER,
    MEMBER_ROLE_STAFF,
    Organization,
    OrganizationMember,
)
from .programme_enrolment import (
    ENROLMENT_STATUS_ACTIVE,
    ENROLMENT_STATUS_PENDING,
    ENROLMENT_STATUS_RENEWAL_DUE,
    ENROLMENT_STATUS_SUSPENDED,
    ENROLMENT_STATUS_WITHDRAWN,
    ProgrammeEnrolment,
)

__all__ = [
    "CapaRecord",
    "CAPA_ACTIVE_STATUSES",
    "CAPA_STATUS_CLOSED",
    "CAPA_STATUS_IN_PROGRESS",
    "CAPA_STATUS_OPEN",
    "CAPA_STATUS_OVERDUE",
    "CAPA_STATUS_PENDING_VERIFICATION",
    "Document",
    "InsurancePolicy",
    "INSURANCE_POLICY_TYPE_LABELS",
    "Notification",
    "NOTIFICATION_CHANNEL_EMAIL",
    "NOTIFICATION_CHANNEL_IN_APP",
    "NOTIFICATION_CHANNEL_PUSH",
    "NOTIFICATION_CHANNEL_SMS",
    "NOTIFICATION_CHANNELS",
    "NOTIFICATION_PRIORITIES",
    "NOTIFICATION_PRIORITY_CRITICAL",
    "NOTIFICATION_PRIORITY_HIGH",
    "NOTIFICATION_PRIORITY_LOW",
    "NOTIFICATION_PRIORITY_NORMAL",
    "NOTIFICATION_STATUS_FAILED",
    "NOTIFICATION_STATUS_PENDING",
    "NOTIFICATION_STATUS_QUEUED",
    "NOTIFICATION_STATUS_SENT",
    "AUDIT_COMPLETED",
    "AUDIT_REMINDER",
    "AUDIT_SCHEDULED",
    "CAPA_DUE",
    "CAPA_OVERDUE",
    "COMPLIANCE_ALERT",
    "CREDENTIAL_EXPIRY",
    "CREDENTIAL_STATUS_CHANGE",
    "DOCUMENT_REVIEW_DUE",
    "INSURANCE_EXPIRED",
    "INSURANCE_EXPIRY",
    "LBP_EXPIRY",
    "LBP_STATUS_CHANGE",
    "PROGRAMME_RENEWAL",
    "PROGRAMME_STATUS_CHANGE",
    "SYSTEM",
    "TESTIMONIAL_RECEIVED",
    "TESTIMONIAL_REQUEST",
    "TIER_CHANGE",
    "WELCOME",
    "OrganizationNotificationPreference",
    "UserNotificationPreference",
    "Organization",
    "OrganizationMember",
    "LBP_STATUS_CANCELLED",
    "LBP_STATUS_CURRENT",
    "LBP_STATUS_EXPIRED",
    "LBP_STATUS_NOT_FOUND",
    "LBP_STATUS_SUSPENDED",
    "MEMBER_ROLE_ADMIN",
    "MEMBER_ROLE_OWNER",
    "MEMBER_ROLE_STAFF",
    "ProgrammeEnrolment",
    "ENROLMENT_STATUS_ACTIVE",
    "ENROLMENT_STATUS_PENDING",
    "ENROLMENT_STATUS_RENEWAL_DUE",
    "ENROLMENT_STATUS_SUSPENDED",
    "ENROLMENT_STATUS_WITHDRAWN",
]
