"""Decide whether a notification may be sent and manage opt-in settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from sqlalchemy.orm import Session

from compliance_notifier.domain.entities import (
    NOTIFICATION_CHANNEL_EMAIL,
    NOTIFICATION_CHANNEL_IN_APP,
    NOTIFICATION_CHANNEL_PUSH,
    NOTIFICATION_CHANNEL_SMS,
    NOTIFICATION_CHANNELS,
    NOTIFICATION_PRIORITY_CRITICAL,
    NOTIFICATION_PRIORITY_NORMAL,
    OrganizationNotificationPreference,
    UserNotificationPreference,
)
from compliance_notifier.infrastructure.repositories import (
    OrganizationNotificationPreferenceRepository,
    OrganizationRepository,
    UserNotificationPreferenceRepository,
)

from .rules import get_notification_rule

logger = logging.getLogger(__name__)

_CHANNEL_LABELS = {
    NOTIFICATION_CHANNEL_EMAIL: "email",
    NOTIFICATION_CHANNEL_SMS: "SMS",
}


@dataclass(frozen=True)
class PreferenceDecision:
    send: bool
    reason: str | None = None


_ALLOW = PreferenceDecision(send=True)


class OrganizationNotFoundError(ValueError):
    """Raised when preferences are requested for an unknown organization."""


def _require_organization(session: Session, organization_id: int) -> None:
    if OrganizationRepository(session).get(organization_id) is None:
        raise OrganizationNotFoundError(f"Organization {organization_id} not found")


def _master_switch(channel: str) -> str:
    return "email_enabled" if channel == NOTIFICATION_CHANNEL_EMAIL else "sms_enabled"


def _check_record(
    record: Any, *, channel: str, field_name: str | None, scope: str, notification_type: str
) -> PreferenceDecision | None:
    label = _CHANNEL_LABELS[channel]
    if not getattr(record, _master_switch(channel)):
        return PreferenceDecision(send=False, reason=f"{scope} has disabled {label} notifications")
    if field_name and not getattr(record, field_name):
        return PreferenceDecision(
            send=False,
            reason=f"{scope} has disabled {label} notifications for {notification_type}",
        )
    return None


def should_send(
    session: Session,
    *,
    organization_id: int | None = None,
    user_id: str | None = None,
    type: str,
    channel: str,
    priority: str = NOTIFICATION_PRIORITY_NORMAL,
) -> PreferenceDecision:
    """Return whether ``type`` may be delivered over ``channel``.

    Organization policy is consulted before the user's own settings, and the
    first level that says no wins. Missing preference records allow the
    send; they are never created here.
    """

    if channel not in NOTIFICATION_CHANNELS:
        msg = f"Unknown notification channel: {channel}"
        raise ValueError(msg)
    rule = get_notification_rule(type)

    if channel in (NOTIFICATION_CHANNEL_IN_APP, NOTIFICATION_CHANNEL_PUSH):
        return _ALLOW
    if priority == NOTIFICATION_PRIORITY_CRITICAL:
        return _ALLOW
    if rule.always_send(channel):
        return _ALLOW
    if channel == NOTIFICATION_CHANNEL_SMS and rule.critical_sms:
        return _ALLOW

    if organization_id is not None:
        org_preferences = OrganizationNotificationPreferenceRepository(
            session
        ).get_by_organization(organization_id)
        if org_preferences is not None:
            decision = _check_record(
                org_preferences,
                channel=channel,
                field_name=rule.organization_field(channel),
                scope="Organization",
                notification_type=type,
            )
            if decision is not None:
                return decision

    if user_id:
        user_preferences = UserNotificationPreferenceRepository(session).get_by_user(user_id)
        if user_preferences is not None:
            decision = _check_record(
                user_preferences,
                channel=channel,
                field_name=rule.user_field(channel),
                scope="User",
                notification_type=type,
            )
            if decision is not None:
                return decision

    return _ALLOW


def get_user_preferences(session: Session, *, user_id: str) -> UserNotificationPreference:
    """Return the user's settings, creating the default row on first read."""

    repository = UserNotificationPreferenceRepository(session)
    preferences = repository.get_by_user(user_id)
    if preferences is None:
        preferences = repository.create_default(user_id)
        session.commit()
        logger.info("Created default notification preferences for user %s", user_id)
    return preferences


def update_user_preferences(
    session: Session, *, user_id: str, changes: Mapping[str, Any]
) -> UserNotificationPreference:
    repository = UserNotificationPreferenceRepository(session)
    try:
        preferences = repository.upsert(user_id, changes)
        session.commit()
    except Exception:
        session.rollback()
        raise
    return preferences


def get_organization_preferences(
    session: Session, *, organization_id: int
) -> OrganizationNotificationPreference:
    """Return the organization's policy, creating the default row on first read."""

    _require_organization(session, organization_id)
    repository = OrganizationNotificationPreferenceRepository(session)
    preferences = repository.get_by_organization(organization_id)
    if preferences is None:
        preferences = repository.create_default(organization_id)
        session.commit()
        logger.info(
            "Created default notification preferences for organization %s",
            organization_id,
        )
    return preferences


def update_organization_preferences(
    session: Session, *, organization_id: int, changes: Mapping[str, Any]
) -> OrganizationNotificationPreference:
    _require_organization(session, organization_id)
    repository = OrganizationNotificationPreferenceRepository(session)
    try:
        preferences = repository.upsert(organization_id, changes)
        session.commit()
    except Exception:
        session.rollback()
        raise
    return preferences


__all__ = [
    "OrganizationNotFoundError",
    "PreferenceDecision",
    "should_send",
    "get_user_preferences",
    "update_user_preferences",
    "get_organization_preferences",
    "update_organization_preferences",
]
