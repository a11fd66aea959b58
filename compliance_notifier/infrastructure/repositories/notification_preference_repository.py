"""Persistence helpers for notification preference records."""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Mapping

from sqlalchemy.orm import Session

from compliance_notifier.domain.entities import (
    OrganizationNotificationPreference,
    UserNotificationPreference,
)
from compliance_notifier.infrastructure.models import (
    OrganizationNotificationPreferenceModel,
    UserNotificationPreferenceModel,
)
from compliance_notifier.utils import ensure_app_timezone

_READ_ONLY_FIELDS = {"id", "user_id", "organization_id", "created_at", "updated_at"}


def _editable_fields(entity_cls: type) -> set[str]:
    return {f.name for f in fields(entity_cls)} - _READ_ONLY_FIELDS


class UserNotificationPreferenceRepository:
    """Read and upsert per-user notification preferences."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_user(self, user_id: str) -> UserNotificationPreference | None:
        model = self._get_model(user_id)
        return self._to_entity(model) if model else None

    def create_default(self, user_id: str) -> UserNotificationPreference:
        defaults = UserNotificationPreference(id=None, user_id=user_id)
        model = UserNotificationPreferenceModel(user_id=user_id)
        for name in _editable_fields(UserNotificationPreference):
            setattr(model, name, getattr(defaults, name))
        self.session.add(model)
        self.session.flush()
        return self._to_entity(model)

    def upsert(self, user_id: str, changes: Mapping[str, Any]) -> UserNotificationPreference:
        unknown = set(changes) - _editable_fields(UserNotificationPreference)
        if unknown:
            msg = f"Unknown preference fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)
        model = self._get_model(user_id)
        if model is None:
            self.create_default(user_id)
            model = self._get_model(user_id)
        for name, value in changes.items():
            setattr(model, name, value)
        self.session.flush()
        return self._to_entity(model)

    def _get_model(self, user_id: str) -> UserNotificationPreferenceModel | None:
        return (
            self.session.query(UserNotificationPreferenceModel)
            .filter(UserNotificationPreferenceModel.user_id == user_id)
            .one_or_none()
        )

    @staticmethod
    def _to_entity(model: UserNotificationPreferenceModel) -> UserNotificationPreference:
        return UserNotificationPreference(
            id=model.id,
            user_id=model.user_id,
            email_enabled=model.email_enabled,
            email_insurance=model.email_insurance,
            email_audit=model.email_audit,
            email_compliance=model.email_compliance,
            email_newsletter=model.email_newsletter,
            sms_enabled=model.sms_enabled,
            sms_insurance=model.sms_insurance,
            sms_audit=model.sms_audit,
            sms_critical=model.sms_critical,
            sms_phone_number=model.sms_phone_number,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


class OrganizationNotificationPreferenceRepository:
    """Read and upsert organization notification policy."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_organization(
        self, organization_id: int
    ) -> OrganizationNotificationPreference | None:
        model = self._get_model(organization_id)
        return self._to_entity(model) if model else None

    def create_default(self, organization_id: int) -> OrganizationNotificationPreference:
        defaults = OrganizationNotificationPreference(
            id=None, organization_id=organization_id
        )
        model = OrganizationNotificationPreferenceModel(organization_id=organization_id)
        for name in _editable_fields(OrganizationNotificationPreference):
            setattr(model, name, getattr(defaults, name))
        self.session.add(model)
        self.session.flush()
        return self._to_entity(model)

    def upsert(
        self, organization_id: int, changes: Mapping[str, Any]
    ) -> OrganizationNotificationPreference:
        unknown = set(changes) - _editable_fields(OrganizationNotificationPreference)
        if unknown:
            msg = f"Unknown preference fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)
        model = self._get_model(organization_id)
        if model is None:
            self.create_default(organization_id)
            model = self._get_model(organization_id)
        for name, value in changes.items():
            setattr(model, name, value)
        self.session.flush()
        return self._to_entity(model)

    def _get_model(
        self, organization_id: int
    ) -> OrganizationNotificationPreferenceModel | None:
        return (
            self.session.query(OrganizationNotificationPreferenceModel)
            .filter(
                OrganizationNotificationPreferenceModel.organization_id == organization_id
            )
            .one_or_none()
        )

    @staticmethod
    def _to_entity(
        model: OrganizationNotificationPreferenceModel,
    ) -> OrganizationNotificationPreference:
        return OrganizationNotificationPreference(
            id=model.id,
            organization_id=model.organization_id,
            email_enabled=model.email_enabled,
            email_insurance_alerts=model.email_insurance_alerts,
            email_audit_alerts=model.email_audit_alerts,
            email_compliance_alerts=model.email_compliance_alerts,
            email_system_alerts=model.email_system_alerts,
            sms_enabled=model.sms_enabled,
            sms_insurance_alerts=model.sms_insurance_alerts,
            sms_audit_alerts=model.sms_audit_alerts,
            sms_critical_alerts=model.sms_critical_alerts,
            notification_email=model.notification_email,
            notification_phone=model.notification_phone,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = [
    "UserNotificationPreferenceRepository",
    "OrganizationNotificationPreferenceRepository",
]
