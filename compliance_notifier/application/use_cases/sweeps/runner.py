"""Run the periodic notification jobs as one batch."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from sqlalchemy.orm import Session

from compliance_notifier.application.use_cases.notifications.delivery import (
    process_scheduled_notifications,
    retry_failed_notifications,
)
from compliance_notifier.application.use_cases.notifications.dispatch import (
    NotificationChannels,
)

from .capa_overdue import check_overdue_capas
from .insurance_expiry import check_insurance_expiries
from .result import SweepResult

logger = logging.getLogger(__name__)


def _run_stage(session: Session, name: str, job: Callable[[], Any]) -> Any:
    try:
        outcome = job()
    except Exception:
        session.rollback()
        logger.exception("Notification cron stage %s failed", name)
        return {"error": f"{name} failed"}
    if isinstance(outcome, SweepResult):
        return outcome.as_dict()
    return outcome


def run_notification_cron(
    session: Session,
    *,
    now: datetime | None = None,
    channels: NotificationChannels | None = None,
) -> dict[str, Any]:
    """Deliver due and retryable notifications, then run the expiry sweeps.

    A failing stage is logged and reported; the remaining stages still run.
    """

    summary = {
        "scheduled": _run_stage(
            session,
            "scheduled",
            lambda: process_scheduled_notifications(session, channels=channels),
        ),
        "retried": _run_stage(
            session,
            "retried",
            lambda: retry_failed_notifications(session, channels=channels),
        ),
        "insurance": _run_stage(
            session,
            "insurance",
            lambda: check_insurance_expiries(session, now=now, channels=channels),
        ),
        "capa": _run_stage(
            session,
            "capa",
            lambda: check_overdue_capas(session, now=now, channels=channels),
        ),
    }
    logger.info("Notification cron finished: %s", summary)
    return summary


__all__ = ["run_notification_cron"]
