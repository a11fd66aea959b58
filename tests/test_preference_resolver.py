"""Tests for the notification preference resolver."""

from __future__ import annotations

import pytest

from compliance_notifier.application.use_cases.notifications import (
    NOTIFICATION_RULES,
    should_send,
)
from compliance_notifier.domain.entities import (
    CAPA_OVERDUE,
    INSURANCE_EXPIRY,
    LBP_STATUS_CHANGE,
    NOTIFICATION_CHANNEL_EMAIL,
    NOTIFICATION_CHANNEL_IN_APP,
    NOTIFICATION_CHANNEL_PUSH,
    NOTIFICATION_CHANNEL_SMS,
    NOTIFICATION_PRIORITY_CRITICAL,
    NOTIFICATION_PRIORITY_HIGH,
    TESTIMONIAL_REQUEST,
    WELCOME,
)
from compliance_notifier.infrastructure.models import (
    OrganizationNotificationPreferenceModel,
    UserNotificationPreferenceModel,
)


def test_every_notification_type_has_a_rule():
    from compliance_notifier.domain.entities import notification as notification_module

    declared = {
        value
        for name, value in vars(notification_module).items()
        if name.isupper()
        and isinstance(value, str)
        and not name.startswith("NOTIFICATION_")
    }
    assert declared == set(NOTIFICATION_RULES)


def test_missing_records_allow_and_are_not_created(session):
    decision = should_send(
        session,
        organization_id=42,
        user_id="user-9",
        type=INSURANCE_EXPIRY,
        channel=NOTIFICATION_CHANNEL_EMAIL,
    )

    assert decision.send is True
    assert decision.reason is None
    assert session.query(UserNotificationPreferenceModel).count() == 0
    assert session.query(OrganizationNotificationPreferenceModel).count() == 0


@pytest.mark.parametrize("channel", [NOTIFICATION_CHANNEL_IN_APP, NOTIFICATION_CHANNEL_PUSH])
def test_in_app_and_push_ignore_preferences(session, seed, channel):
    organization = seed.organization()
    seed.organization_preferences(organization, email_enabled=False, sms_enabled=False)
    seed.user_preferences("user-1", email_enabled=False, sms_enabled=False)

    decision = should_send(
        session,
        organization_id=organization.id,
        user_id="user-1",
        type=INSURANCE_EXPIRY,
        channel=channel,
    )

    assert decision.send is True


def test_critical_priority_bypasses_opt_outs(session, seed):
    organization = seed.organization()
    seed.organization_preferences(organization, email_enabled=False)

    decision = should_send(
        session,
        organization_id=organization.id,
        type=INSURANCE_EXPIRY,
        channel=NOTIFICATION_CHANNEL_EMAIL,
        priority=NOTIFICATION_PRIORITY_CRITICAL,
    )

    assert decision.send is True


def test_organization_veto_is_reported_before_user(session, seed):
    organization = seed.organization()
    seed.organization_preferences(organization, email_insurance_alerts=False)
    seed.user_preferences("user-1", email_insurance=False)

    decision = should_send(
        session,
        organization_id=organization.id,
        user_id="user-1",
        type=INSURANCE_EXPIRY,
        channel=NOTIFICATION_CHANNEL_EMAIL,
        priority=NOTIFICATION_PRIORITY_HIGH,
    )

    assert decision.send is False
    assert decision.reason.startswith("Organization")


def test_organization_master_switch_vetoes_every_topic(session, seed):
    organization = seed.organization()
    seed.organization_preferences(organization, sms_enabled=False)

    decision = should_send(
        session,
        organization_id=organization.id,
        type=INSURANCE_EXPIRY,
        channel=NOTIFICATION_CHANNEL_SMS,
    )

    assert decision.send is False
    assert decision.reason == "Organization has disabled SMS notifications"


def test_user_topic_opt_out(session, seed):
    organization = seed.organization()
    seed.organization_preferences(organization)
    seed.user_preferences("user-1", email_insurance=False)

    decision = should_send(
        session,
        organization_id=organization.id,
        user_id="user-1",
        type=INSURANCE_EXPIRY,
        channel=NOTIFICATION_CHANNEL_EMAIL,
    )

    assert decision.send is False
    assert decision.reason.startswith("User")


def test_always_send_email_types_ignore_opt_outs(session, seed):
    seed.user_preferences("user-1", email_enabled=False)

    for notification_type in (LBP_STATUS_CHANGE, WELCOME):
        decision = should_send(
            session,
            user_id="user-1",
            type=notification_type,
            channel=NOTIFICATION_CHANNEL_EMAIL,
        )
        assert decision.send is True


def test_critical_sms_bucket_is_always_sent(session, seed):
    organization = seed.organization()
    seed.organization_preferences(organization, sms_enabled=False)
    seed.user_preferences("user-1", sms_enabled=False, sms_critical=False)

    decision = should_send(
        session,
        organization_id=organization.id,
        user_id="user-1",
        type=CAPA_OVERDUE,
        channel=NOTIFICATION_CHANNEL_SMS,
    )

    assert decision.send is True


@pytest.mark.parametrize("notification_type", [TESTIMONIAL_REQUEST, WELCOME])
def test_sms_without_an_opt_out_field_is_always_sent(session, seed, notification_type):
    organization = seed.organization()
    seed.organization_preferences(organization, sms_enabled=False)
    seed.user_preferences("user-1", sms_enabled=False)

    decision = should_send(
        session,
        organization_id=organization.id,
        user_id="user-1",
        type=notification_type,
        channel=NOTIFICATION_CHANNEL_SMS,
    )

    assert decision.send is True


def test_sms_defaults_to_disabled_for_users_with_a_record(session, seed):
    seed.user_preferences("user-1")

    decision = should_send(
        session,
        user_id="user-1",
        type=INSURANCE_EXPIRY,
        channel=NOTIFICATION_CHANNEL_SMS,
    )

    assert decision.send is False
    assert decision.reason == "User has disabled SMS notifications"


def test_unknown_type_or_channel_raises(session):
    with pytest.raises(ValueError):
        should_send(session, type="NOT_A_TYPE", channel=NOTIFICATION_CHANNEL_EMAIL)
    with pytest.raises(ValueError):
        should_send(session, type=INSURANCE_EXPIRY, channel="FAX")
