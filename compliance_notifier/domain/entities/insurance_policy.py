"""Domain entity representing an insurance policy held by an organization."""

from dataclasses import dataclass
from datetime import datetime

INSURANCE_POLICY_TYPE_LABELS = {
    "PUBLIC_LIABILITY": "Public Liability",
    "PROFESSIONAL_INDEMNITY": "Professional Indemnity",
    "STATUTORY_LIABILITY": "Statutory Liability",
    "EMPLOYERS_LIABILITY": "Employers Liability",
    "MOTOR_VEHICLE": "Motor Vehicle",
    "CONTRACT_WORKS": "Contract Works",
}


@dataclass
class InsurancePolicy:
    """Policy whose expiry is monitored for 90/60/30 day reminders."""

    id: int | None
    organization_id: int
    policy_type: str
    expiry_date: datetime
    policy_number: str | None = None
    alert90_sent: bool = False
    alert60_sent: bool = False
    alert30_sent: bool = False
    expired_alert_sent: bool = False

    @property
    def policy_type_label(self) -> str:
        return INSURANCE_POLICY_TYPE_LABELS.get(self.policy_type, self.policy_type)

    def alert_sent(self, threshold_days: int) -> bool:
        return bool(getattr(self, f"alert{threshold_days}_sent"))


__all__ = ["InsurancePolicy", "INSURANCE_POLICY_TYPE_LABELS"]
