"""Tests for the periodic compliance sweeps."""

from __future__ import annotations

from datetime import timedelta

from compliance_notifier.application.use_cases.notifications import messages
from compliance_notifier.application.use_cases.notifications.dispatch import (
    create_notification,
)
from compliance_notifier.application.use_cases.sweeps import (
    check_document_reviews,
    check_insurance_expiries,
    check_lbp_status_changes,
    check_overdue_capas,
    check_programme_renewals,
    run_notification_cron,
    runner,
)
from compliance_notifier.domain.entities import (
    CAPA_STATUS_CLOSED,
    CAPA_STATUS_OVERDUE,
    ENROLMENT_STATUS_RENEWAL_DUE,
    LBP_STATUS_CURRENT,
    LBP_STATUS_SUSPENDED,
    NOTIFICATION_CHANNEL_SMS,
    NOTIFICATION_PRIORITY_HIGH,
)
from compliance_notifier.infrastructure.lbp_register import LBPRegisterError
from compliance_notifier.infrastructure.models import (
    CapaRecordModel,
    DocumentModel,
    InsurancePolicyModel,
    NotificationModel,
    OrganizationMemberModel,
    ProgrammeEnrolmentModel,
)


class FakeRegister:
    def __init__(self, statuses):
        self.statuses = statuses
        self.closed = False

    def is_configured(self):
        return True

    def lookup_status(self, lbp_number):
        status = self.statuses[lbp_number]
        if isinstance(status, Exception):
            raise status
        return status

    def close(self):
        self.closed = True


def test_insurance_reminder_is_sent_once(session, seed, channels, now):
    organization = seed.organization()
    seed.member(organization, phone="021 555 0100")
    policy = seed.insurance_policy(organization, expiry_date=now + timedelta(days=30))

    result = check_insurance_expiries(session, now=now, channels=channels.bundle)

    assert result.as_dict() == {"checked": 1, "alerted": 1, "failed": 0}
    assert [email["subject"] for email in channels.emails] == [
        "Insurance Expiry Warning - Public Liability"
    ]
    assert channels.sms[0]["phone"] == "021 555 0100"
    assert "expires in 30 days" in channels.sms[0]["message"]
    stored = session.get(InsurancePolicyModel, policy.id)
    assert stored.alert30_sent is True
    assert stored.alert60_sent is False
    stored_notifications = session.query(NotificationModel).order_by(NotificationModel.id).all()
    assert "expires in 30 days" in stored_notifications[0].message
    assert {n.priority for n in stored_notifications} == {NOTIFICATION_PRIORITY_HIGH}

    again = check_insurance_expiries(session, now=now, channels=channels.bundle)

    assert again.alerted == 0
    assert len(channels.emails) == 1
    assert len(channels.sms) == 1


def test_insurance_reminder_respects_email_opt_out(session, seed, channels, now):
    organization = seed.organization()
    seed.member(organization, phone="021 555 0100")
    seed.user_preferences(
        "user-1", email_insurance=False, sms_enabled=True, sms_insurance=True
    )
    seed.insurance_policy(organization, expiry_date=now + timedelta(days=30))

    check_insurance_expiries(session, now=now, channels=channels.bundle)

    assert channels.emails == []
    assert len(channels.sms) == 1
    stored = session.query(NotificationModel).all()
    assert [n.channel for n in stored] == [NOTIFICATION_CHANNEL_SMS]


def test_insurance_claim_is_rolled_back_with_failed_notification(
    session, seed, channels, now, monkeypatch
):
    organization = seed.organization()
    seed.member(organization)
    policy = seed.insurance_policy(organization, expiry_date=now + timedelta(days=60))

    def create_then_crash(session, params, *, channels=None, commit=True):
        create_notification(session, params, channels=channels, commit=commit)
        raise RuntimeError("worker died")

    monkeypatch.setattr(messages, "create_notification", create_then_crash)

    result = check_insurance_expiries(session, now=now, channels=channels.bundle)

    assert result.failed == 1
    assert result.alerted == 0
    assert session.get(InsurancePolicyModel, policy.id).alert60_sent is False
    assert session.query(NotificationModel).count() == 0


def test_owner_without_email_is_skipped_without_claiming(session, seed, channels, now):
    organization = seed.organization()
    seed.member(organization, email=None)
    policy = seed.insurance_policy(organization, expiry_date=now + timedelta(days=90))

    result = check_insurance_expiries(session, now=now, channels=channels.bundle)

    assert result.checked == 1
    assert result.alerted == 0
    assert session.get(InsurancePolicyModel, policy.id).alert90_sent is False


def test_expired_policy_is_announced_once(session, seed, channels, now):
    organization = seed.organization()
    seed.member(organization)
    policy = seed.insurance_policy(organization, expiry_date=now - timedelta(days=2))

    first = check_insurance_expiries(session, now=now, channels=channels.bundle)
    second = check_insurance_expiries(session, now=now, channels=channels.bundle)

    assert first.alerted == 1
    assert second.checked == 0
    assert [email["subject"] for email in channels.emails] == [
        "Insurance Expired - Public Liability"
    ]
    assert session.get(InsurancePolicyModel, policy.id).expired_alert_sent is True


def test_overdue_capa_is_flagged_and_assignee_alerted(session, seed, channels, now):
    organization = seed.organization()
    seed.member(organization, role="STAFF", email="tane@summit.test", user_id="user-2")
    seed.member(organization, user_id="user-1")
    overdue = seed.capa(organization, due_date=now - timedelta(days=1), assigned_to="user-2")
    closed = seed.capa(
        organization, due_date=now - timedelta(days=5), status=CAPA_STATUS_CLOSED
    )

    result = check_overdue_capas(session, now=now, channels=channels.bundle)

    assert result.as_dict() == {"checked": 1, "alerted": 1, "failed": 0}
    assert channels.emails[0]["recipient"] == "tane@summit.test"
    assert channels.emails[0]["subject"] == "CAPA Overdue - Immediate Action Required"
    assert session.get(CapaRecordModel, overdue.id).status == CAPA_STATUS_OVERDUE
    assert session.get(CapaRecordModel, closed.id).status == CAPA_STATUS_CLOSED

    assert check_overdue_capas(session, now=now, channels=channels.bundle).checked == 0
    assert len(channels.emails) == 1


def test_document_inside_both_windows_gets_one_reminder(session, seed, channels, now):
    organization = seed.organization()
    seed.member(organization)
    document = seed.document(organization, review_date=now + timedelta(days=5))

    result = check_document_reviews(session, now=now, channels=channels.bundle)

    assert result.alerted == 1
    assert [email["subject"] for email in channels.emails] == [
        "Document Review Due - Site Safety Plan"
    ]
    assert "due for review in 5 days" in channels.emails[0]["html"]
    stored = session.get(DocumentModel, document.id)
    assert stored.review_alert30_sent is True
    assert stored.review_alert7_sent is True
    notification = session.query(NotificationModel).one()
    assert notification.priority == NOTIFICATION_PRIORITY_HIGH

    assert check_document_reviews(session, now=now, channels=channels.bundle).checked == 0


def test_programme_renewal_sends_every_crossed_reminder(session, seed, channels, now):
    organization = seed.organization()
    seed.member(organization)
    enrolment = seed.enrolment(organization, anniversary_date=now + timedelta(days=25))

    result = check_programme_renewals(session, now=now, channels=channels.bundle)

    assert result.as_dict() == {"checked": 1, "alerted": 1, "failed": 0}
    assert [email["subject"] for email in channels.emails] == [
        "Programme Renewal Reminder - 90 days",
        "Programme Renewal Reminder - 60 days",
        "Programme Renewal Reminder - 30 days",
    ]
    stored = session.get(ProgrammeEnrolmentModel, enrolment.id)
    assert stored.status == ENROLMENT_STATUS_RENEWAL_DUE
    assert stored.renewal_alert90_sent is True
    assert stored.renewal_alert60_sent is True
    assert stored.renewal_alert30_sent is True

    again = check_programme_renewals(session, now=now, channels=channels.bundle)
    assert again.alerted == 0
    assert len(channels.emails) == 3


def test_lbp_status_changes_are_reported(session, seed, channels):
    organization = seed.organization()
    changed = seed.member(
        organization,
        phone="021 555 0100",
        lbp_number="BP100",
        lbp_status=LBP_STATUS_CURRENT,
    )
    baseline = seed.member(
        organization,
        role="STAFF",
        first_name="Mere",
        email="mere@summit.test",
        user_id="user-2",
        lbp_number="BP200",
    )
    seed.member(
        organization,
        role="STAFF",
        first_name="Hemi",
        email="hemi@summit.test",
        user_id="user-3",
        lbp_number="BP300",
        lbp_status=LBP_STATUS_CURRENT,
    )
    register = FakeRegister(
        {
            "BP100": LBP_STATUS_SUSPENDED,
            "BP200": LBP_STATUS_CURRENT,
            "BP300": LBPRegisterError("LBP register error: 503 Service Unavailable"),
        }
    )

    result = check_lbp_status_changes(session, register=register, channels=channels.bundle)

    assert result.as_dict() == {"checked": 3, "alerted": 1, "failed": 1}
    assert sorted(email["recipient"] for email in channels.emails) == [
        "aroha@summit.test",
        "office@summit.test",
    ]
    assert len(channels.sms) == 1
    assert "SUSPENDED" in channels.sms[0]["message"]
    assert session.get(OrganizationMemberModel, changed.id).lbp_status == LBP_STATUS_SUSPENDED
    assert session.get(OrganizationMemberModel, baseline.id).lbp_status == LBP_STATUS_CURRENT
    assert register.closed is False


def test_cron_reports_every_stage(session, seed, channels, now):
    organization = seed.organization()
    seed.member(organization)
    seed.capa(organization, due_date=now - timedelta(days=3))

    summary = run_notification_cron(session, now=now, channels=channels.bundle)

    assert summary == {
        "scheduled": 0,
        "retried": 0,
        "insurance": {"checked": 0, "alerted": 0, "failed": 0},
        "capa": {"checked": 1, "alerted": 1, "failed": 0},
    }


def test_cron_stage_failure_does_not_stop_later_stages(session, channels, now, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("database went away")

    monkeypatch.setattr(runner, "check_insurance_expiries", broken)

    summary = run_notification_cron(session, now=now, channels=channels.bundle)

    assert summary["insurance"] == {"error": "insurance failed"}
    assert summary["capa"] == {"checked": 0, "alerted": 0, "failed": 0}


def test_lbp_member_failure_does_not_stop_the_sweep(session, seed, channels):
    organization = seed.organization()
    seed.member(organization, lbp_number="BP1", lbp_status=LBP_STATUS_CURRENT)
    later = seed.member(
        organization,
        role="STAFF",
        email="mere@summit.test",
        user_id="user-2",
        lbp_number="BP2",
        lbp_status=LBP_STATUS_CURRENT,
    )
    register = FakeRegister(
        {
            "BP1": AttributeError("'list' object has no attribute 'get'"),
            "BP2": LBP_STATUS_SUSPENDED,
        }
    )

    result = check_lbp_status_changes(session, register=register, channels=channels.bundle)

    assert result.as_dict() == {"checked": 2, "alerted": 1, "failed": 1}
    assert session.get(OrganizationMemberModel, later.id).lbp_status == LBP_STATUS_SUSPENDED


def test_lbp_change_is_kept_until_it_has_been_announced(
    session, seed, channels, monkeypatch
):
    organization = seed.organization()
    member = seed.member(organization, lbp_number="BP1", lbp_status=LBP_STATUS_CURRENT)
    register = FakeRegister({"BP1": LBP_STATUS_SUSPENDED})

    def unavailable(*args, **kwargs):
        raise RuntimeError("database went away")

    monkeypatch.setattr(messages, "create_notification", unavailable)

    first = check_lbp_status_changes(session, register=register, channels=channels.bundle)

    assert first.as_dict() == {"checked": 1, "alerted": 0, "failed": 1}
    assert session.get(OrganizationMemberModel, member.id).lbp_status == LBP_STATUS_CURRENT

    monkeypatch.undo()
    second = check_lbp_status_changes(session, register=register, channels=channels.bundle)

    assert second.alerted == 1
    assert session.get(OrganizationMemberModel, member.id).lbp_status == LBP_STATUS_SUSPENDED
    assert sorted(email["recipient"] for email in channels.emails) == [
        "aroha@summit.test",
        "office@summit.test",
    ]
