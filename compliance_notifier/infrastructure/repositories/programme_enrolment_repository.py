"""Persistence layer for programme enrolments."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta

from sqlalchemy import update
from sqlalchemy.orm import Session

from compliance_notifier.domain.entities import (
    ENROLMENT_STATUS_ACTIVE,
    ENROLMENT_STATUS_RENEWAL_DUE,
    ProgrammeEnrolment,
)
from compliance_notifier.infrastructure.models import ProgrammeEnrolmentModel
from compliance_notifier.utils import ensure_app_naive_datetime, ensure_app_timezone

from .alert_flags import claim_alert_flag

RENEWAL_ALERT_THRESHOLDS = (90, 60, 30)


class ProgrammeEnrolmentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, enrolment_id: int) -> ProgrammeEnrolment | None:
        model = self.session.get(ProgrammeEnrolmentModel, enrolment_id)
        return self._to_entity(model) if model else None

    def list_renewal_candidates(
        self, *, now: datetime, horizon_days: int = max(RENEWAL_ALERT_THRESHOLDS)
    ) -> Sequence[ProgrammeEnrolment]:
        upper = ensure_app_naive_datetime(now + timedelta(days=horizon_days))
        query = (
            self.session.query(ProgrammeEnrolmentModel)
            .filter(
                ProgrammeEnrolmentModel.status.in_(
                    (ENROLMENT_STATUS_ACTIVE, ENROLMENT_STATUS_RENEWAL_DUE)
                )
            )
            .filter(ProgrammeEnrolmentModel.anniversary_date <= upper)
            .order_by(
                ProgrammeEnrolmentModel.anniversary_date.asc(),
                ProgrammeEnrolmentModel.id.asc(),
            )
        )
        return [self._to_entity(model) for model in query.all()]

    def claim_renewal_alert(self, enrolment_id: int, threshold_days: int) -> bool:
        if threshold_days not in RENEWAL_ALERT_THRESHOLDS:
            msg = f"Unsupported renewal alert threshold: {threshold_days}"
            raise ValueError(msg)
        return claim_alert_flag(
            self.session,
            ProgrammeEnrolmentModel,
            enrolment_id,
            f"renewal_alert{threshold_days}_sent",
        )

    def mark_renewal_due(self, enrolment_id: int) -> bool:
        """Move an ``ACTIVE`` enrolment to ``RENEWAL_DUE``."""

        statement = (
            update(ProgrammeEnrolmentModel)
            .where(ProgrammeEnrolmentModel.id == enrolment_id)
            .where(ProgrammeEnrolmentModel.status == ENROLMENT_STATUS_ACTIVE)
            .values(status=ENROLMENT_STATUS_RENEWAL_DUE)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(statement).rowcount == 1

    @staticmethod
    def _to_entity(model: ProgrammeEnrolmentModel) -> ProgrammeEnrolment:
        return ProgrammeEnrolment(
            id=model.id,
            organization_id=model.organization_id,
            status=model.status,
            anniversary_date=ensure_app_timezone(model.anniversary_date),
            renewal_alert90_sent=model.renewal_alert90_sent,
            renewal_alert60_sent=model.renewal_alert60_sent,
            renewal_alert30_sent=model.renewal_alert30_sent,
        )


__all__ = ["ProgrammeEnrolmentRepository", "RENEWAL_ALERT_THRESHOLDS"]
