"""Daily verification of practitioners against the public LBP register."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from compliance_notifier.application.use_cases.notifications import messages
from compliance_notifier.application.use_cases.notifications.dispatch import (
    NotificationChannels,
)
from compliance_notifier.domain.entities import OrganizationMember
from compliance_notifier.infrastructure.database import atomic
from compliance_notifier.infrastructure.lbp_register import (
    LBPRegisterClient,
    LBPRegisterError,
)
from compliance_notifier.infrastructure.repositories import OrganizationRepository
from compliance_notifier.utils import now_in_app_timezone

from .result import SweepResult

logger = logging.getLogger(__name__)


def _verify_member(
    session: Session,
    organizations: OrganizationRepository,
    register: LBPRegisterClient,
    member: OrganizationMember,
    channels: NotificationChannels | None,
) -> bool:
    """Refresh one member's status and return whether a change was announced.

    A changed status is stored only after at least one message about it has
    been recorded, so a change nobody heard about is picked up again on the
    next run.
    """

    status = register.lookup_status(member.lbp_number)
    previous = member.lbp_status
    changed = previous is not None and previous != status

    if changed:
        logger.info(
            "LBP status for member %s changed from %s to %s",
            member.id,
            previous,
            status,
        )
        organization = organizations.get(member.organization_id)
        organization_email = organization.email if organization else None
        results = messages.notify_lbp_status_change(
            session,
            organization_id=member.organization_id,
            member_name=member.full_name,
            lbp_number=member.lbp_number,
            old_status=previous,
            new_status=status,
            member_email=member.email,
            member_phone=member.phone,
            member_user_id=member.user_id,
            organization_email=organization_email,
            channels=channels,
        )
        if not results and (member.email or member.phone or organization_email):
            raise RuntimeError(
                f"No LBP status notification could be recorded for member {member.id}"
            )

    with atomic(session):
        organizations.update_lbp_status(
            member.id, status=status, checked_at=now_in_app_timezone()
        )
    return changed


def check_lbp_status_changes(
    session: Session,
    *,
    register: LBPRegisterClient | None = None,
    channels: NotificationChannels | None = None,
) -> SweepResult:
    """Refresh every member's licence status and report changes.

    A member's first recorded status is stored silently. Later changes are
    sent to the member by email and SMS and to the organization by email,
    each message independently of the others. One member failing never stops
    the rest from being checked.
    """

    result = SweepResult()
    owns_register = register is None
    register = register or LBPRegisterClient()
    if not register.is_configured():
        logger.warning("LBP register is not configured; skipping verification")
        if owns_register:
            register.close()
        return result

    organizations = OrganizationRepository(session)
    try:
        for member in organizations.list_members_with_lbp():
            result.checked += 1
            try:
                if _verify_member(session, organizations, register, member, channels):
                    result.alerted += 1
            except LBPRegisterError as exc:
                result.failed += 1
                logger.warning(
                    "LBP lookup failed for member %s (%s): %s",
                    member.id,
                    member.lbp_number,
                    exc,
                )
            except Exception:
                session.rollback()
                result.failed += 1
                logger.exception("Failed to verify LBP status for member %s", member.id)
    finally:
        if owns_register:
            register.close()

    logger.info(
        "LBP verification: checked=%s changed=%s failed=%s",
        result.checked,
        result.alerted,
        result.failed,
    )
    return result


__all__ = ["check_lbp_status_changes"]
