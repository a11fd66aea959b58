"""Periodic jobs that turn compliance deadlines into notifications."""

from .capa_overdue import check_overdue_capas
from .document_review import check_document_reviews
from .insurance_expiry import check_insurance_expiries
from .lbp_status import check_lbp_status_changes
from .programme_renewal import check_programme_renewals
from .result import SweepResult
from .runner import run_notification_cron

__all__ = [
    "SweepResult",
    "check_document_reviews",
    "check_insurance_expiries",
    "check_lbp_status_changes",
    "check_overdue_capas",
    "check_programme_renewals",
    "run_notification_cron",
]
