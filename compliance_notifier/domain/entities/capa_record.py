"""Domain entity representing a corrective and preventive action (CAPA)."""

from dataclasses import dataclass
from datetime import datetime

CAPA_STATUS_OPEN = "OPEN"
CAPA_STATUS_IN_PROGRESS = "IN_PROGRESS"
CAPA_STATUS_PENDING_VERIFICATION = "PENDING_VERIFICATION"
CAPA_STATUS_CLOSED = "CLOSED"
CAPA_STATUS_OVERDUE = "OVERDUE"

CAPA_ACTIVE_STATUSES = (CAPA_STATUS_OPEN, CAPA_STATUS_IN_PROGRESS)


@dataclass
class CapaRecord:
    """Corrective action with a due date."""

    id: int | None
    organization_id: int
    title: str
    status: str
    due_date: datetime | None
    assigned_to: str | None = None


__all__ = [
    "CapaRecord",
    "CAPA_STATUS_OPEN",
    "CAPA_STATUS_IN_PROGRESS",
    "CAPA_STATUS_PENDING_VERIFICATION",
    "CAPA_STATUS_CLOSED",
    "CAPA_STATUS_OVERDUE",
    "CAPA_ACTIVE_STATUSES",
]
