"""Persistence layer for corrective actions."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.orm import Session

from compliance_notifier.domain.entities import (
    CAPA_ACTIVE_STATUSES,
    CAPA_STATUS_OVERDUE,
    CapaRecord,
)
from compliance_notifier.infrastructure.models import CapaRecordModel
from compliance_notifier.utils import ensure_app_naive_datetime, ensure_app_timezone


class CapaRecordRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, capa_id: int) -> CapaRecord | None:
        model = self.session.get(CapaRecordModel, capa_id)
        return self._to_entity(model) if model else None

    def list_overdue(self, *, now: datetime) -> Sequence[CapaRecord]:
        query = (
            self.session.query(CapaRecordModel)
            .filter(CapaRecordModel.status.in_(CAPA_ACTIVE_STATUSES))
            .filter(CapaRecordModel.due_date < ensure_app_naive_datetime(now))
            .order_by(CapaRecordModel.due_date.asc(), CapaRecordModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def claim_overdue(self, capa_id: int) -> bool:
        """Move an active CAPA to ``OVERDUE``; ``False`` if it already moved."""

        statement = (
            update(CapaRecordModel)
            .where(CapaRecordModel.id == capa_id)
            .where(CapaRecordModel.status.in_(CAPA_ACTIVE_STATUSES))
            .values(status=CAPA_STATUS_OVERDUE)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(statement).rowcount == 1

    @staticmethod
    def _to_entity(model: CapaRecordModel) -> CapaRecord:
        return CapaRecord(
            id=model.id,
            organization_id=model.organization_id,
            title=model.title,
            status=model.status,
            due_date=ensure_app_timezone(model.due_date),
            assigned_to=model.assigned_to,
        )


__all__ = ["CapaRecordRepository"]
