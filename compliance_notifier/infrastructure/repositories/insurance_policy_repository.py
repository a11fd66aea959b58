"""Persistence layer for insurance policies monitored for expiry."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from compliance_notifier.domain.entities import InsurancePolicy
from compliance_notifier.infrastructure.models import InsurancePolicyModel
from compliance_notifier.utils import ensure_app_naive_datetime, ensure_app_timezone

from .alert_flags import claim_alert_flag

INSURANCE_ALERT_THRESHOLDS = (90, 60, 30)


class InsurancePolicyRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, policy_id: int) -> InsurancePolicy | None:
        model = self.session.get(InsurancePolicyModel, policy_id)
        return self._to_entity(model) if model else None

    def list_expiring_around(
        self, *, now: datetime, threshold_days: int, window_days: int = 1
    ) -> Sequence[InsurancePolicy]:
        """Return policies expiring ``threshold_days`` (± ``window_days``) from ``now``.

        Only policies whose alert flag for that threshold is still unset are
        returned.
        """

        if threshold_days not in INSURANCE_ALERT_THRESHOLDS:
            msg = f"Unsupported insurance alert threshold: {threshold_days}"
            raise ValueError(msg)
        flag = getattr(InsurancePolicyModel, f"alert{threshold_days}_sent")
        lower = ensure_app_naive_datetime(now + timedelta(days=threshold_days - window_days))
        upper = ensure_app_naive_datetime(now + timedelta(days=threshold_days + window_days))
        query = (
            self.session.query(InsurancePolicyModel)
            .filter(InsurancePolicyModel.expiry_date >= lower)
            .filter(InsurancePolicyModel.expiry_date <= upper)
            .filter(flag.is_(False))
            .order_by(InsurancePolicyModel.expiry_date.asc(), InsurancePolicyModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def list_expired_unannounced(self, *, now: datetime) -> Sequence[InsurancePolicy]:
        query = (
            self.session.query(InsurancePolicyModel)
            .filter(InsurancePolicyModel.expiry_date < ensure_app_naive_datetime(now))
            .filter(InsurancePolicyModel.expired_alert_sent.is_(False))
            .order_by(InsurancePolicyModel.expiry_date.asc(), InsurancePolicyModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def claim_alert(self, policy_id: int, flag: str) -> bool:
        return claim_alert_flag(self.session, InsurancePolicyModel, policy_id, flag)

    @staticmethod
    def _to_entity(model: InsurancePolicyModel) -> InsurancePolicy:
        return InsurancePolicy(
            id=model.id,
            organization_id=model.organization_id,
            policy_type=model.policy_type,
            policy_number=model.policy_number,
            expiry_date=ensure_app_timezone(model.expiry_date),
            alert90_sent=model.alert90_sent,
            alert60_sent=model.alert60_sent,
            alert30_sent=model.alert30_sent,
            expired_alert_sent=model.expired_alert_sent,
        )


__all__ = ["InsurancePolicyRepository", "INSURANCE_ALERT_THRESHOLDS"]
