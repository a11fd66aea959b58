"""Sweep reminding organizations that their programme enrolment renews soon."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from compliance_notifier.application.use_cases.notifications.dispatch import (
    NotificationChannels,
    NotificationRequest,
    create_notification,
)
from compliance_notifier.config import get_settings
from compliance_notifier.domain.entities import (
    NOTIFICATION_CHANNEL_EMAIL,
    NOTIFICATION_CHANNEL_SMS,
    NOTIFICATION_PRIORITY_HIGH,
    NOTIFICATION_PRIORITY_NORMAL,
    PROGRAMME_RENEWAL,
)
from compliance_notifier.infrastructure.database import atomic
from compliance_notifier.infrastructure.repositories import (
    RENEWAL_ALERT_THRESHOLDS,
    OrganizationRepository,
    ProgrammeEnrolmentRepository,
)
from compliance_notifier.utils import days_until, ensure_app_timezone, now_in_app_timezone

from .recipients import responsible_member
from .result import SweepResult

logger = logging.getLogger(__name__)

URGENT_RENEWAL_DAYS = min(RENEWAL_ALERT_THRESHOLDS)


def _renewal_message(business_name: str, threshold: int, days_left: int) -> str:
    if days_left <= 0:
        return (
            f"The RANZ programme enrolment for {business_name} was due for renewal. "
            "Please complete your renewal to keep your certification active."
        )
    return (
        f"The RANZ programme enrolment for {business_name} renews in {days_left} days "
        f"({threshold}-day reminder). Please review your compliance records and "
        "complete the renewal before the anniversary date."
    )


def check_programme_renewals(
    session: Session,
    *,
    now: datetime | None = None,
    channels: NotificationChannels | None = None,
) -> SweepResult:
    """Send every newly crossed 90/60/30 day renewal reminder.

    ``ACTIVE`` enrolments move to ``RENEWAL_DUE`` in the same transaction as
    their reminders.
    """

    now = ensure_app_timezone(now) or now_in_app_timezone()
    result = SweepResult()
    enrolments = ProgrammeEnrolmentRepository(session)
    organizations = OrganizationRepository(session)
    action_url = f"{get_settings().app_base_url.rstrip('/')}/programme"

    for enrolment in enrolments.list_renewal_candidates(now=now):
        result.checked += 1
        days_left = days_until(enrolment.anniversary_date, now)
        crossed = [
            threshold
            for threshold in RENEWAL_ALERT_THRESHOLDS
            if days_left <= threshold and not enrolment.renewal_alert_sent(threshold)
        ]
        organization = organizations.get(enrolment.organization_id)
        recipient = responsible_member(organization) if organization else None

        try:
            with atomic(session):
                enrolments.mark_renewal_due(enrolment.id)
                if recipient is None:
                    if crossed:
                        logger.warning(
                            "Programme enrolment %s has nobody to remind about renewal",
                            enrolment.id,
                        )
                    continue
                sent = 0
                for threshold in crossed:
                    if not enrolments.claim_renewal_alert(enrolment.id, threshold):
                        continue
                    priority = (
                        NOTIFICATION_PRIORITY_HIGH
                        if threshold <= URGENT_RENEWAL_DAYS
                        else NOTIFICATION_PRIORITY_NORMAL
                    )
                    create_notification(
                        session,
                        NotificationRequest(
                            organization_id=enrolment.organization_id,
                            user_id=recipient.user_id,
                            type=PROGRAMME_RENEWAL,
                            channel=NOTIFICATION_CHANNEL_EMAIL,
                            priority=priority,
                            title=f"Programme Renewal Reminder - {threshold} days",
                            message=_renewal_message(organization.name, threshold, days_left),
                            action_url=action_url,
                            recipient=recipient.email,
                        ),
                        channels=channels,
                        commit=False,
                    )
                    if recipient.phone and threshold <= URGENT_RENEWAL_DAYS:
                        create_notification(
                            session,
                            NotificationRequest(
                                organization_id=enrolment.organization_id,
                                user_id=recipient.user_id,
                                type=PROGRAMME_RENEWAL,
                                channel=NOTIFICATION_CHANNEL_SMS,
                                priority=priority,
                                title="Programme Renewal",
                                message=(
                                    f"RANZ: {organization.name} - programme renewal is due "
                                    f"in {max(days_left, 0)} days. Check your dashboard."
                                ),
                                recipient=recipient.phone,
                            ),
                            channels=channels,
                            commit=False,
                        )
                    sent += 1
            if sent:
                result.alerted += 1
        except Exception:
            result.failed += 1
            logger.exception("Failed to process renewal for enrolment %s", enrolment.id)

    logger.info(
        "Programme renewal sweep: checked=%s alerted=%s failed=%s",
        result.checked,
        result.alerted,
        result.failed,
    )
    return result


__all__ = ["check_programme_renewals"]
