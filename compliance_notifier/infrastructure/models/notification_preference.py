"""SQLAlchemy models for user and organization notification preferences."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.sql import expression

from compliance_notifier.infrastructure.database import Base


def _flag(default: bool) -> Column:
    return Column(
        Boolean,
        nullable=False,
        default=default,
        server_default=expression.true() if default else expression.false(),
    )


class UserNotificationPreferenceModel(Base):
    """Opt-in switches owned by an individual user."""

    __tablename__ = "notification_preference"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, unique=True, index=True)
    email_enabled = _flag(True)
    email_insurance = _flag(True)
    email_audit = _flag(True)
    email_compliance = _flag(True)
    email_newsletter = _flag(True)
    sms_enabled = _flag(False)
    sms_insurance = _flag(True)
    sms_audit = _flag(False)
    sms_critical = _flag(True)
    sms_phone_number = Column(String(20), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=True, onupdate=func.now())


class OrganizationNotificationPreferenceModel(Base):
    """Organization policy evaluated before user preferences."""

    __tablename__ = "organization_notification_preference"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(
        Integer,
        ForeignKey("organization.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    email_enabled = _flag(True)
    email_insurance_alerts = _flag(True)
    email_audit_alerts = _flag(True)
    email_compliance_alerts = _flag(True)
    email_system_alerts = _flag(True)
    sms_enabled = _flag(False)
    sms_insurance_alerts = _flag(True)
    sms_audit_alerts = _flag(False)
    sms_critical_alerts = _flag(True)
    notification_email = Column(String(120), nullable=True)
    notification_phone = Column(String(20), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=True, onupdate=func.now())


__all__ = [
    "UserNotificationPreferenceModel",
    "OrganizationNotificationPreferenceModel",
]
