"""SQLAlchemy models for the compliance records monitored by sweep jobs."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import expression

from compliance_notifier.infrastructure.database import Base


def _alert_flag() -> Column:
    return Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )


class InsurancePolicyModel(Base):
    __tablename__ = "insurance_policy"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(
        Integer,
        ForeignKey("organization.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    policy_type = Column(String(40), nullable=False)
    policy_number = Column(String(80), nullable=True)
    expiry_date = Column(DateTime, nullable=False, index=True)
    alert90_sent = _alert_flag()
    alert60_sent = _alert_flag()
    alert30_sent = _alert_flag()
    expired_alert_sent = _alert_flag()


class CapaRecordModel(Base):
    __tablename__ = "capa_record"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(
        Integer,
        ForeignKey("organization.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(200), nullable=False)
    status = Column(String(30), nullable=False, default="OPEN")
    due_date = Column(DateTime, nullable=True, index=True)
    assigned_to = Column(String(64), nullable=True)


class DocumentModel(Base):
    __tablename__ = "document"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(
        Integer,
        ForeignKey("organization.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(200), nullable=False)
    review_date = Column(DateTime, nullable=True, index=True)
    owner_user_id = Column(String(64), nullable=True)
    review_alert30_sent = _alert_flag()
    review_alert7_sent = _alert_flag()


class ProgrammeEnrolmentModel(Base):
    __tablename__ = "programme_enrolment"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(
        Integer,
        ForeignKey("organization.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status = Column(String(20), nullable=False, default="PENDING")
    anniversary_date = Column(DateTime, nullable=False, index=True)
    renewal_alert90_sent = _alert_flag()
    renewal_alert60_sent = _alert_flag()
    renewal_alert30_sent = _alert_flag()


__all__ = [
    "InsurancePolicyModel",
    "CapaRecordModel",
    "DocumentModel",
    "ProgrammeEnrolmentModel",
]
