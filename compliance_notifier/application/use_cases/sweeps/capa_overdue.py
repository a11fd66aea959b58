"""Sweep flagging corrective actions that passed their due date."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from compliance_notifier.application.use_cases.notifications import messages
from compliance_notifier.application.use_cases.notifications.dispatch import (
    NotificationChannels,
)
from compliance_notifier.infrastructure.database import atomic
from compliance_notifier.infrastructure.repositories import (
    CapaRecordRepository,
    OrganizationRepository,
)
from compliance_notifier.utils import ensure_app_timezone, now_in_app_timezone

from .recipients import responsible_member
from .result import SweepResult

logger = logging.getLogger(__name__)


def check_overdue_capas(
    session: Session,
    *,
    now: datetime | None = None,
    channels: NotificationChannels | None = None,
) -> SweepResult:
    """Mark open or in-progress CAPAs past due as ``OVERDUE`` and alert the assignee.

    The status change doubles as the idempotency claim: a CAPA already moved
    by an overlapping run is skipped.
    """

    now = ensure_app_timezone(now) or now_in_app_timezone()
    result = SweepResult()
    capas = CapaRecordRepository(session)
    organizations = OrganizationRepository(session)

    for capa in capas.list_overdue(now=now):
        result.checked += 1
        try:
            with atomic(session):
                if not capas.claim_overdue(capa.id):
                    continue
                organization = organizations.get(capa.organization_id)
                assignee = (
                    responsible_member(organization, capa.assigned_to)
                    if organization
                    else None
                )
                if assignee is None:
                    logger.warning(
                        "CAPA %s marked overdue but nobody could be notified", capa.id
                    )
                    continue
                messages.notify_capa_overdue(
                    session,
                    organization_id=capa.organization_id,
                    capa_title=capa.title,
                    assignee_email=assignee.email,
                    assignee_phone=assignee.phone,
                    assignee_user_id=assignee.user_id,
                    channels=channels,
                    commit=False,
                )
            result.alerted += 1
        except Exception:
            result.failed += 1
            logger.exception("Failed to process overdue CAPA %s", capa.id)

    logger.info(
        "Overdue CAPA sweep: checked=%s alerted=%s failed=%s",
        result.checked,
        result.alerted,
        result.failed,
    )
    return result


__all__ = ["check_overdue_capas"]
