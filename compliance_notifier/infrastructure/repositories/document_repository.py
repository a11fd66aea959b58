"""Persistence layer for controlled documents with review dates."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta

from sqlalchemy import or_
from sqlalchemy.orm import Session

from compliance_notifier.domain.entities import Document
from compliance_notifier.infrastructure.models import DocumentModel
from compliance_notifier.utils import ensure_app_naive_datetime, ensure_app_timezone

from .alert_flags import claim_alert_flag

DOCUMENT_REVIEW_THRESHOLDS = (30, 7)


class DocumentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, document_id: int) -> Document | None:
        model = self.session.get(DocumentModel, document_id)
        return self._to_entity(model) if model else None

    def list_review_due(self, *, now: datetime, horizon_days: int) -> Sequence[Document]:
        """Return documents reviewed within ``horizon_days`` with an unsent reminder."""

        upper = ensure_app_naive_datetime(now + timedelta(days=horizon_days))
        query = (
            self.session.query(DocumentModel)
            .filter(DocumentModel.review_date.isnot(None))
            .filter(DocumentModel.review_date <= upper)
            .filter(
                or_(
                    DocumentModel.review_alert30_sent.is_(False),
                    DocumentModel.review_alert7_sent.is_(False),
                )
            )
            .order_by(DocumentModel.review_date.asc(), DocumentModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def claim_review_alert(self, document_id: int, threshold_days: int) -> bool:
        if threshold_days not in DOCUMENT_REVIEW_THRESHOLDS:
            msg = f"Unsupported review alert threshold: {threshold_days}"
            raise ValueError(msg)
        return claim_alert_flag(
            self.session, DocumentModel, document_id, f"review_alert{threshold_days}_sent"
        )

    @staticmethod
    def _to_entity(model: DocumentModel) -> Document:
        return Document(
            id=model.id,
            organization_id=model.organization_id,
            title=model.title,
            review_date=ensure_app_timezone(model.review_date),
            owner_user_id=model.owner_user_id,
            review_alert30_sent=model.review_alert30_sent,
            review_alert7_sent=model.review_alert7_sent,
        )


__all__ = ["DocumentRepository", "DOCUMENT_REVIEW_THRESHOLDS"]
