"""Persistence layer for organizations and their members."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.orm import Session, selectinload

from compliance_notifier.domain.entities import Organization, OrganizationMember
from compliance_notifier.infrastructure.models import (
    OrganizationMemberModel,
    OrganizationModel,
)
from compliance_notifier.utils import ensure_app_naive_datetime, ensure_app_timezone


class OrganizationRepository:
    """Read organizations and keep member licence status up to date."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, organization_id: int) -> Organization | None:
        model = (
            self.session.query(OrganizationModel)
            .options(selectinload(OrganizationModel.members))
            .filter(OrganizationModel.id == organization_id)
            .one_or_none()
        )
        return self._to_entity(model) if model else None

    def get_member(self, member_id: int) -> OrganizationMember | None:
        model = self.session.get(OrganizationMemberModel, member_id)
        return self._member_to_entity(model) if model else None

    def list_members_with_lbp(self) -> Sequence[OrganizationMember]:
        query = (
            self.session.query(OrganizationMemberModel)
            .filter(OrganizationMemberModel.lbp_number.isnot(None))
            .filter(OrganizationMemberModel.lbp_number != "")
            .order_by(OrganizationMemberModel.id.asc())
        )
        return [self._member_to_entity(model) for model in query.all()]

    def update_lbp_status(
        self, member_id: int, *, status: str, checked_at: datetime
    ) -> None:
        model = self.session.get(OrganizationMemberModel, member_id)
        if model is None:
            msg = f"Organization member with id {member_id} not found"
            raise ValueError(msg)
        model.lbp_status = status
        model.lbp_last_checked = ensure_app_naive_datetime(checked_at)
        self.session.flush()

    def _to_entity(self, model: OrganizationModel) -> Organization:
        return Organization(
            id=model.id,
            name=model.name,
            email=model.email,
            phone=model.phone,
            members=[self._member_to_entity(member) for member in model.members],
        )

    @staticmethod
    def _member_to_entity(model: OrganizationMemberModel) -> OrganizationMember:
        return OrganizationMember(
            id=model.id,
            organization_id=model.organization_id,
            role=model.role,
            first_name=model.first_name,
            last_name=model.last_name or "",
            email=model.email,
            phone=model.phone,
            user_id=model.user_id,
            lbp_number=model.lbp_number,
            lbp_status=model.lbp_status,
            lbp_last_checked=ensure_app_timezone(model.lbp_last_checked),
        )


__all__ = ["OrganizationRepository"]
