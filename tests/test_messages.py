"""Tests for the ready-made compliance notifiers."""

from __future__ import annotations

from datetime import datetime

from compliance_notifier.application.use_cases.notifications import (
    notify_audit_scheduled,
    notify_compliance_alert,
)
from compliance_notifier.application.use_cases.notifications.messages import (
    format_long_date,
)
from compliance_notifier.domain.entities import (
    NOTIFICATION_CHANNEL_EMAIL,
    NOTIFICATION_PRIORITY_CRITICAL,
    NOTIFICATION_PRIORITY_HIGH,
)
from compliance_notifier.infrastructure.models import NotificationModel


def test_format_long_date():
    assert format_long_date(datetime(2025, 3, 3, 10, 30)) == "Monday, 3 March 2025"


def test_compliance_alert_below_threshold_is_critical_and_texted(
    session, seed, channels
):
    organization = seed.organization()
    seed.organization_preferences(organization, sms_enabled=False)

    results = notify_compliance_alert(
        session,
        organization_id=organization.id,
        business_name="Summit Roofing",
        compliance_score=65,
        owner_email="aroha@summit.test",
        owner_phone="021 555 0100",
        channels=channels.bundle,
    )

    assert [result.success for result in results] == [True, True]
    assert channels.emails[0]["subject"] == "Compliance Score Alert"
    assert "dropped to 65%" in channels.sms[0]["message"]
    stored = session.query(NotificationModel).all()
    assert {n.priority for n in stored} == {NOTIFICATION_PRIORITY_CRITICAL}


def test_compliance_alert_above_threshold_is_email_only(session, seed, channels):
    organization = seed.organization()

    results = notify_compliance_alert(
        session,
        organization_id=organization.id,
        business_name="Summit Roofing",
        compliance_score=80,
        owner_email="aroha@summit.test",
        owner_phone="021 555 0100",
        channels=channels.bundle,
    )

    assert len(results) == 1
    assert channels.sms == []
    notification = session.query(NotificationModel).one()
    assert notification.channel == NOTIFICATION_CHANNEL_EMAIL
    assert notification.priority == NOTIFICATION_PRIORITY_HIGH


def test_audit_scheduled_mentions_the_long_date(session, seed, channels):
    organization = seed.organization()

    notify_audit_scheduled(
        session,
        organization_id=organization.id,
        business_name="Summit Roofing",
        audit_date=datetime(2025, 3, 3, 9, 0),
        owner_email="aroha@summit.test",
        owner_phone="021 555 0100",
        channels=channels.bundle,
    )

    assert "Monday, 3 March 2025" in channels.emails[0]["html"]
    assert channels.sms[0]["message"].startswith(
        "RANZ: An audit has been scheduled for Summit Roofing on Monday, 3 March 2025."
    )


def test_audit_scheduled_sms_follows_organization_switch(session, seed, channels):
    organization = seed.organization()
    seed.organization_preferences(organization, sms_enabled=False)

    results = notify_audit_scheduled(
        session,
        organization_id=organization.id,
        business_name="Summit Roofing",
        audit_date=datetime(2025, 3, 3, 9, 0),
        owner_email="aroha@summit.test",
        owner_phone="021 555 0100",
        channels=channels.bundle,
    )

    assert results[1].skipped is True
    assert len(channels.emails) == 1
    assert channels.sms == []
