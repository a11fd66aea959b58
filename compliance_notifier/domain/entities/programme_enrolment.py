"""Domain entity representing an organization's programme enrolment."""

from dataclasses import dataclass
from datetime import datetime

ENROLMENT_STATUS_PENDING = "PENDING"
ENROLMENT_STATUS_ACTIVE = "ACTIVE"
ENROLMENT_STATUS_RENEWAL_DUE = "RENEWAL_DUE"
ENROLMENT_STATUS_SUSPENDED = "SUSPENDED"
ENROLMENT_STATUS_WITHDRAWN = "WITHDRAWN"


@dataclass
class ProgrammeEnrolment:
    """Annual enrolment renewed on its anniversary date."""

    id: int | None
    organization_id: int
    status: str
    anniversary_date: datetime
    renewal_alert90_sent: bool = False
    renewal_alert60_sent: bool = False
    renewal_alert30_sent: bool = False

    def renewal_alert_sent(self, threshold_days: int) -> bool:
        return bool(getattr(self, f"renewal_alert{threshold_days}_sent"))


__all__ = [
    "ProgrammeEnrolment",
    "ENROLMENT_STATUS_PENDING",
    "ENROLMENT_STATUS_ACTIVE",
    "ENROLMENT_STATUS_RENEWAL_DUE",
    "ENROLMENT_STATUS_SUSPENDED",
    "ENROLMENT_STATUS_WITHDRAWN",
]
