"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text

from compliance_notifier.infrastructure.database import Base
from compliance_notifier.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation of a notification and its delivery state."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_status_scheduled_for", "status", "scheduled_for"),
        Index("ix_notification_status_next_retry_at", "status", "next_retry_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(
        Integer, ForeignKey("organization.id"), nullable=True, index=True
    )
    user_id = Column(String(64), nullable=True, index=True)
    type = Column(String(50), nullable=False)
    channel = Column(String(20), nullable=False)
    priority = Column(String(20), nullable=False, default="NORMAL")
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    action_url = Column(String(500), nullable=True)
    recipient = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default="QUEUED")
    scheduled_for = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    sent_at = Column(DateTime(), nullable=True)
    read_at = Column(DateTime(), nullable=True)
    last_retry_at = Column(DateTime(), nullable=True)
    next_retry_at = Column(DateTime(), nullable=True)
    retry_count = Column(Integer, nullable=False, default=0)
    external_id = Column(String(255), nullable=True)
    failure_reason = Column(Text, nullable=True)


__all__ = ["NotificationModel"]
