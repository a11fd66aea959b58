"""Endpoints triggered by the platform scheduler."""

from __future__ import annotations

import logging
from typing import Any, Callable

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from compliance_notifier.application.use_cases.sweeps import (
    SweepResult,
    check_document_reviews,
    check_lbp_status_changes,
    check_programme_renewals,
    run_notification_cron,
)
from compliance_notifier.infrastructure.database import get_db
from compliance_notifier.interfaces.api.dependencies import verify_cron_request
from compliance_notifier.interfaces.api.schemas import CronJobResponse
from compliance_notifier.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/cron",
    tags=["cron"],
    dependencies=[Depends(verify_cron_request)],
)

_CRON_METHODS = ["GET", "POST"]


def _run_job(name: str, job: Callable[[], Any]) -> CronJobResponse:
    try:
        outcome = job()
    except Exception as exc:
        logger.exception("Cron job %s failed", name)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Cron job failed",
        ) from exc
    results = outcome.as_dict() if isinstance(outcome, SweepResult) else outcome
    return CronJobResponse(results=results, processed_at=now_in_app_timezone())


@router.api_route("/notifications", methods=_CRON_METHODS, response_model=CronJobResponse)
def notifications_cron(db: Session = Depends(get_db)) -> CronJobResponse:
    """Deliver scheduled and failed notifications and run the expiry sweeps."""

    return _run_job("notifications", lambda: run_notification_cron(db))


@router.api_route("/verify-lbp", methods=_CRON_METHODS, response_model=CronJobResponse)
def verify_lbp_cron(db: Session = Depends(get_db)) -> CronJobResponse:
    return _run_job("verify-lbp", lambda: check_lbp_status_changes(db))


@router.api_route(
    "/document-reviews", methods=_CRON_METHODS, response_model=CronJobResponse
)
def document_reviews_cron(db: Session = Depends(get_db)) -> CronJobResponse:
    return _run_job("document-reviews", lambda: check_document_reviews(db))


@router.api_route(
    "/programme-renewals", methods=_CRON_METHODS, response_model=CronJobResponse
)
def programme_renewals_cron(db: Session = Depends(get_db)) -> CronJobResponse:
    return _run_job("programme-renewals", lambda: check_programme_renewals(db))
