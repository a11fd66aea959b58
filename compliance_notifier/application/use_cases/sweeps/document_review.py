"""Sweep reminding document owners that a review date is approaching."""

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
    DOCUMENT_REVIEW_DUE,
    NOTIFICATION_CHANNEL_EMAIL,
    NOTIFICATION_PRIORITY_HIGH,
    NOTIFICATION_PRIORITY_NORMAL,
    Document,
)
from compliance_notifier.infrastructure.database import atomic
from compliance_notifier.infrastructure.repositories import (
    DOCUMENT_REVIEW_THRESHOLDS,
    DocumentRepository,
    OrganizationRepository,
)
from compliance_notifier.utils import days_until, ensure_app_timezone, now_in_app_timezone

from .recipients import responsible_member
from .result import SweepResult

logger = logging.getLogger(__name__)


def _crossed_thresholds(document: Document, days_left: int) -> list[int]:
    return [
        threshold
        for threshold in DOCUMENT_REVIEW_THRESHOLDS
        if days_left <= threshold
        and not getattr(document, f"review_alert{threshold}_sent")
    ]


def _review_message(title: str, days_left: int) -> str:
    if days_left <= 0:
        return (
            f'The document "{title}" is past its review date. Please review and '
            "re-approve it to keep your quality system current."
        )
    return (
        f'The document "{title}" is due for review in {days_left} days. Please '
        "review and re-approve it to keep your quality system current."
    )


def check_document_reviews(
    session: Session,
    *,
    now: datetime | None = None,
    channels: NotificationChannels | None = None,
) -> SweepResult:
    """Send 30 and 7 day review reminders.

    A document first seen inside both windows gets a single reminder; every
    crossed flag is claimed so later runs stay quiet.
    """

    now = ensure_app_timezone(now) or now_in_app_timezone()
    result = SweepResult()
    documents = DocumentRepository(session)
    organizations = OrganizationRepository(session)
    action_url = f"{get_settings().app_base_url.rstrip('/')}/documents"

    for document in documents.list_review_due(
        now=now, horizon_days=max(DOCUMENT_REVIEW_THRESHOLDS)
    ):
        result.checked += 1
        days_left = days_until(document.review_date, now)
        crossed = _crossed_thresholds(document, days_left)
        if not crossed:
            continue
        organization = organizations.get(document.organization_id)
        recipient = (
            responsible_member(organization, document.owner_user_id) if organization else None
        )
        if recipient is None:
            logger.warning("Document %s has nobody to remind about its review", document.id)
            continue
        try:
            with atomic(session):
                claimed = [
                    threshold
                    for threshold in crossed
                    if documents.claim_review_alert(document.id, threshold)
                ]
                if not claimed:
                    continue
                create_notification(
                    session,
                    NotificationRequest(
                        organization_id=document.organization_id,
                        user_id=recipient.user_id,
                        type=DOCUMENT_REVIEW_DUE,
                        channel=NOTIFICATION_CHANNEL_EMAIL,
                        priority=NOTIFICATION_PRIORITY_HIGH
                        if days_left <= min(DOCUMENT_REVIEW_THRESHOLDS)
                        else NOTIFICATION_PRIORITY_NORMAL,
                        title=f"Document Review Due - {document.title}",
                        message=_review_message(document.title, days_left),
                        action_url=action_url,
                        recipient=recipient.email,
                    ),
                    channels=channels,
                    commit=False,
                )
            result.alerted += 1
        except Exception:
            result.failed += 1
            logger.exception("Failed to send review reminder for document %s", document.id)

    logger.info(
        "Document review sweep: checked=%s alerted=%s failed=%s",
        result.checked,
        result.alerted,
        result.failed,
    )
    return result


__all__ = ["check_document_reviews"]
