"""Tests for creating and delivering notifications."""

from __future__ import annotations

from datetime import timedelta

import pytest

from compliance_notifier.application.use_cases.notifications import (
    NotificationChannels,
    NotificationRequest,
    create_notification,
    process_scheduled_notifications,
    send_notification,
)
from compliance_notifier.domain.entities import (
    AUDIT_SCHEDULED,
    INSURANCE_EXPIRY,
    NOTIFICATION_CHANNEL_EMAIL,
    NOTIFICATION_CHANNEL_IN_APP,
    NOTIFICATION_CHANNEL_PUSH,
    NOTIFICATION_CHANNEL_SMS,
    NOTIFICATION_STATUS_FAILED,
    NOTIFICATION_STATUS_PENDING,
    NOTIFICATION_STATUS_SENT,
)
from compliance_notifier.infrastructure.models import NotificationModel
from compliance_notifier.infrastructure.repositories import NotificationRepository


def _email_request(**overrides) -> NotificationRequest:
    values = {
        "type": INSURANCE_EXPIRY,
        "channel": NOTIFICATION_CHANNEL_EMAIL,
        "title": "Insurance Expiry Warning - Public Liability",
        "message": "Your Public Liability insurance expires in 30 days.",
        "user_id": "user-1",
        "recipient": "aroha@summit.test",
    }
    values.update(overrides)
    return NotificationRequest(**values)


def test_email_is_persisted_and_sent(session, channels):
    result = create_notification(session, _email_request(), channels=channels.bundle)

    assert result.success is True
    assert result.skipped is False
    assert result.external_id == "email-1"
    stored = NotificationRepository(session).get(result.notification_id)
    assert stored.status == NOTIFICATION_STATUS_SENT
    assert stored.sent_at is not None
    assert stored.external_id == "email-1"
    assert channels.emails[0]["recipient"] == "aroha@summit.test"
    assert channels.emails[0]["subject"] == "Insurance Expiry Warning - Public Liability"
    assert "View Details" not in channels.emails[0]["html"]


def test_vetoed_notification_is_skipped_without_a_record(session, seed, channels, caplog):
    seed.user_preferences("user-1", email_insurance=False)

    with caplog.at_level("INFO"):
        result = create_notification(session, _email_request(), channels=channels.bundle)

    assert result.success is True
    assert result.skipped is True
    assert result.reason.startswith("User")
    assert session.query(NotificationModel).count() == 0
    assert channels.emails == []
    assert "Skipped INSURANCE_EXPIRY EMAIL notification" in caplog.text


def test_future_schedule_is_stored_pending_until_due(session, channels, now):
    result = create_notification(
        session,
        _email_request(scheduled_for=now + timedelta(hours=2)),
        channels=channels.bundle,
    )

    assert result.success is True
    stored = NotificationRepository(session).get(result.notification_id)
    assert stored.status == NOTIFICATION_STATUS_PENDING
    assert channels.emails == []

    assert process_scheduled_notifications(session, channels=channels.bundle) == 0

    model = session.get(NotificationModel, result.notification_id)
    model.scheduled_for = model.scheduled_for - timedelta(hours=3)
    session.commit()

    assert process_scheduled_notifications(session, channels=channels.bundle) == 1
    assert NotificationRepository(session).get(result.notification_id).status == (
        NOTIFICATION_STATUS_SENT
    )
    assert len(channels.emails) == 1


def test_channel_failure_marks_record_failed(session, channels):
    channels.sms_error = "Invalid phone number"

    result = create_notification(
        session,
        _email_request(
            type=AUDIT_SCHEDULED,
            channel=NOTIFICATION_CHANNEL_SMS,
            recipient="021 555 0100",
            user_id=None,
        ),
        channels=channels.bundle,
    )

    assert result.success is False
    assert result.error == "Invalid phone number"
    stored = NotificationRepository(session).get(result.notification_id)
    assert stored.status == NOTIFICATION_STATUS_FAILED
    assert stored.retry_count == 1
    assert stored.failure_reason == "Invalid phone number"
    assert stored.next_retry_at is None


def test_raising_adapter_marks_record_failed(session, channels):
    def unreachable_provider(subject, html_content, recipient):
        raise ConnectionError("provider timed out")

    bundle = NotificationChannels(email=unreachable_provider, sms=channels.send_sms)

    result = create_notification(session, _email_request(), channels=bundle)

    assert result.success is False
    assert result.error == "provider timed out"
    stored = NotificationRepository(session).get(result.notification_id)
    assert stored.status == NOTIFICATION_STATUS_FAILED
    assert stored.retry_count == 1
    assert stored.failure_reason == "provider timed out"


def test_scheduled_send_that_raises_leaves_the_pending_queue(session, channels, now):
    calls = []

    def unreachable_provider(subject, html_content, recipient):
        calls.append(recipient)
        raise ConnectionError("provider timed out")

    bundle = NotificationChannels(email=unreachable_provider, sms=channels.send_sms)
    result = create_notification(
        session,
        _email_request(scheduled_for=now + timedelta(hours=2)),
        channels=bundle,
    )
    model = session.get(NotificationModel, result.notification_id)
    model.scheduled_for = model.scheduled_for - timedelta(hours=3)
    session.commit()

    for _ in range(5):
        assert process_scheduled_notifications(session, channels=bundle) == 0

    assert calls == ["aroha@summit.test"]
    stored = NotificationRepository(session).get(result.notification_id)
    assert stored.status == NOTIFICATION_STATUS_FAILED
    assert stored.retry_count == 1


def test_missing_recipient_is_recorded_as_failed(session, channels):
    result = create_notification(
        session, _email_request(recipient=None), channels=channels.bundle
    )

    assert result.success is False
    assert result.error == "Email recipient is missing"
    stored = NotificationRepository(session).get(result.notification_id)
    assert stored.status == NOTIFICATION_STATUS_FAILED
    assert stored.retry_count == 1
    assert channels.emails == []


def test_vetoed_email_without_recipient_is_skipped(session, seed, channels):
    seed.user_preferences("user-1", email_insurance=False)

    result = create_notification(
        session, _email_request(recipient=None), channels=channels.bundle
    )

    assert result.skipped is True
    assert session.query(NotificationModel).count() == 0


def test_in_app_uses_row_id_as_external_id(session, channels):
    result = create_notification(
        session,
        _email_request(channel=NOTIFICATION_CHANNEL_IN_APP, recipient=None),
        channels=channels.bundle,
    )

    assert result.success is True
    assert result.external_id == str(result.notification_id)
    assert channels.emails == [] and channels.sms == []


def test_push_is_marked_sent_without_provider(session, channels):
    result = create_notification(
        session,
        _email_request(channel=NOTIFICATION_CHANNEL_PUSH, recipient=None),
        channels=channels.bundle,
    )

    stored = NotificationRepository(session).get(result.notification_id)
    assert stored.status == NOTIFICATION_STATUS_SENT
    assert stored.external_id is None


def test_send_unknown_notification(session, channels):
    result = send_notification(session, 999, channels=channels.bundle)

    assert result.success is False
    assert result.error == "Notification not found"


def test_sending_twice_does_not_resend(session, channels):
    result = create_notification(session, _email_request(), channels=channels.bundle)

    again = send_notification(session, result.notification_id, channels=channels.bundle)

    assert again.success is True
    assert again.external_id == "email-1"
    assert len(channels.emails) == 1


@pytest.mark.parametrize(
    "overrides",
    [
        {"title": "   "},
        {"message": ""},
        {"priority": "URGENT"},
        {"channel": "FAX"},
        {"type": "UNKNOWN"},
    ],
)
def test_invalid_requests_are_rejected(session, channels, overrides):
    with pytest.raises(ValueError):
        create_notification(session, _email_request(**overrides), channels=channels.bundle)
    assert session.query(NotificationModel).count() == 0
