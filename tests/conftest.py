"""Shared fixtures: an in-memory database and recording channel adapters."""

from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["APP_TIMEZONE"] = "Pacific/Auckland"
os.environ["CRON_SECRET"] = "test-cron-secret"
for _name in (
    "SENDGRID_API_KEY",
    "SENDGRID_SENDER",
    "TWILIO_ACCOUNT_SID",
    "TWILIO_AUTH_TOKEN",
    "TWILIO_PHONE_NUMBER",
    "LBP_API_KEY",
):
    os.environ.pop(_name, None)

from datetime import datetime

import pytest

from compliance_notifier.application.use_cases.notifications import NotificationChannels
from compliance_notifier.infrastructure.database import (
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from compliance_notifier.infrastructure.email import EmailSendResult
from compliance_notifier.infrastructure.models import (
    CapaRecordModel,
    DocumentModel,
    InsurancePolicyModel,
    OrganizationMemberModel,
    OrganizationModel,
    OrganizationNotificationPreferenceModel,
    ProgrammeEnrolmentModel,
    UserNotificationPreferenceModel,
)
from compliance_notifier.infrastructure.sms import SmsSendResult
from compliance_notifier.utils import ensure_app_naive_datetime, now_in_app_timezone


class RecordingChannels:
    """Channel adapters that remember every message instead of sending it."""

    def __init__(self) -> None:
        self.emails: list[dict[str, str]] = []
        self.sms: list[dict[str, str]] = []
        self.email_error: str | None = None
        self.sms_error: str | None = None

    def send_email(self, subject: str, html_content: str, recipient: str) -> EmailSendResult:
        self.emails.append({"subject": subject, "html": html_content, "recipient": recipient})
        if self.email_error:
            return EmailSendResult(error=self.email_error)
        return EmailSendResult(id=f"email-{len(self.emails)}")

    def send_sms(self, phone_number: str, message: str) -> SmsSendResult:
        self.sms.append({"phone": phone_number, "message": message})
        if self.sms_error:
            return SmsSendResult(success=False, error=self.sms_error)
        return SmsSendResult(success=True, message_id=f"sms-{len(self.sms)}")

    @property
    def bundle(self) -> NotificationChannels:
        return NotificationChannels(email=self.send_email, sms=self.send_sms)


class Seeder:
    """Insert monitored records directly through the ORM."""

    def __init__(self, session) -> None:
        self.session = session

    def _add(self, model):
        self.session.add(model)
        self.session.commit()
        return model

    def organization(self, *, name: str = "Summit Roofing", email: str | None = "office@summit.test"):
        return self._add(OrganizationModel(name=name, email=email))

    def member(
        self,
        organization,
        *,
        role: str = "OWNER",
        first_name: str = "Aroha",
        last_name: str = "Ngata",
        email: str | None = "aroha@summit.test",
        phone: str | None = None,
        user_id: str | None = "user-1",
        lbp_number: str | None = None,
        lbp_status: str | None = None,
    ):
        return self._add(
            OrganizationMemberModel(
                organization_id=organization.id,
                role=role,
                first_name=first_name,
                last_name=last_name,
                email=email,
                phone=phone,
                user_id=user_id,
                lbp_number=lbp_number,
                lbp_status=lbp_status,
            )
        )

    def insurance_policy(self, organization, *, expiry_date: datetime, policy_type: str = "PUBLIC_LIABILITY"):
        return self._add(
            InsurancePolicyModel(
                organization_id=organization.id,
                policy_type=policy_type,
                expiry_date=ensure_app_naive_datetime(expiry_date),
            )
        )

    def capa(self, organization, *, due_date: datetime, status: str = "OPEN", assigned_to: str | None = None, title: str = "Replace ridge flashing"):
        return self._add(
            CapaRecordModel(
                organization_id=organization.id,
                title=title,
                status=status,
                due_date=ensure_app_naive_datetime(due_date),
                assigned_to=assigned_to,
            )
        )

    def document(self, organization, *, review_date: datetime, owner_user_id: str | None = None, title: str = "Site Safety Plan"):
        return self._add(
            DocumentModel(
                organization_id=organization.id,
                title=title,
                review_date=ensure_app_naive_datetime(review_date),
                owner_user_id=owner_user_id,
            )
        )

    def enrolment(self, organization, *, anniversary_date: datetime, status: str = "ACTIVE"):
        return self._add(
            ProgrammeEnrolmentModel(
                organization_id=organization.id,
                status=status,
                anniversary_date=ensure_app_naive_datetime(anniversary_date),
            )
        )

    def user_preferences(self, user_id: str, **flags):
        return self._add(UserNotificationPreferenceModel(user_id=user_id, **flags))

    def organization_preferences(self, organization, **flags):
        return self._add(
            OrganizationNotificationPreferenceModel(organization_id=organization.id, **flags)
        )


@pytest.fixture
def session():
    initialize_database()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def channels() -> RecordingChannels:
    return RecordingChannels()


@pytest.fixture
def seed(session) -> Seeder:
    return Seeder(session)


@pytest.fixture
def now() -> datetime:
    return now_in_app_timezone().replace(microsecond=0)
