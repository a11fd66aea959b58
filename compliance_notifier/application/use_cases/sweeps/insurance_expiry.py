"""Daily sweep warning organization owners about expiring insurance."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from compliance_notifier.application.use_cases.notifications import messages
from compliance_notifier.application.use_cases.notifications.dispatch import (
    NotificationChannels,
)
from compliance_notifier.domain.entities import InsurancePolicy, Organization
from compliance_notifier.infrastructure.database import atomic
from compliance_notifier.infrastructure.repositories import (
    INSURANCE_ALERT_THRESHOLDS,
    InsurancePolicyRepository,
    OrganizationRepository,
)
from compliance_notifier.utils import days_until, ensure_app_timezone, now_in_app_timezone

from .result import SweepResult

logger = logging.getLogger(__name__)


def _owner_contact(organization: Organization | None):
    owner = organization.owner() if organization else None
    if owner is None or not owner.email:
        return None
    return owner


def check_insurance_expiries(
    session: Session,
    *,
    now: datetime | None = None,
    channels: NotificationChannels | None = None,
) -> SweepResult:
    """Send the 90/60/30 day expiry reminders, then announce lapsed policies.

    Each policy is handled in its own transaction: the alert flag is claimed
    with a conditional update and the notifications are written alongside it,
    so a crash leaves either both or neither.
    """

    now = ensure_app_timezone(now) or now_in_app_timezone()
    result = SweepResult()
    policies = InsurancePolicyRepository(session)
    organizations = OrganizationRepository(session)

    for threshold in INSURANCE_ALERT_THRESHOLDS:
        for policy in policies.list_expiring_around(now=now, threshold_days=threshold):
            result.checked += 1
            organization = organizations.get(policy.organization_id)
            owner = _owner_contact(organization)
            if owner is None:
                logger.warning(
                    "Insurance policy %s has no owner to notify; skipping", policy.id
                )
                continue
            try:
                with atomic(session):
                    if not policies.claim_alert(policy.id, f"alert{threshold}_sent"):
                        logger.debug(
                            "Insurance policy %s %s-day alert already claimed",
                            policy.id,
                            threshold,
                        )
                        continue
                    messages.notify_insurance_expiry(
                        session,
                        organization_id=policy.organization_id,
                        business_name=organization.name,
                        policy_type=policy.policy_type_label,
                        days_until_expiry=days_until(policy.expiry_date, now),
                        owner_email=owner.email,
                        owner_phone=owner.phone,
                        owner_user_id=owner.user_id,
                        channels=channels,
                        commit=False,
                    )
                result.alerted += 1
            except Exception:
                result.failed += 1
                logger.exception(
                    "Failed to send %s-day insurance alert for policy %s",
                    threshold,
                    policy.id,
                )

    for policy in policies.list_expired_unannounced(now=now):
        result.checked += 1
        _announce_expired(session, policy, organizations, policies, result, channels)

    logger.info(
        "Insurance expiry sweep: checked=%s alerted=%s failed=%s",
        result.checked,
        result.alerted,
        result.failed,
    )
    return result


def _announce_expired(
    session: Session,
    policy: InsurancePolicy,
    organizations: OrganizationRepository,
    policies: InsurancePolicyRepository,
    result: SweepResult,
    channels: NotificationChannels | None,
) -> None:
    organization = organizations.get(policy.organization_id)
    owner = _owner_contact(organization)
    if owner is None:
        logger.warning("Expired insurance policy %s has no owner to notify", policy.id)
        return
    try:
        with atomic(session):
            if not policies.claim_alert(policy.id, "expired_alert_sent"):
                return
            messages.notify_insurance_expired(
                session,
                organization_id=policy.organization_id,
                business_name=organization.name,
                policy_type=policy.policy_type_label,
                owner_email=owner.email,
                owner_phone=owner.phone,
                owner_user_id=owner.user_id,
                channels=channels,
                commit=False,
            )
        result.alerted += 1
    except Exception:
        result.failed += 1
        logger.exception("Failed to announce expired insurance policy %s", policy.id)


__all__ = ["check_insurance_expiries"]
