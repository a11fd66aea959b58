"""SQLAlchemy models for organizations and their members."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from compliance_notifier.infrastructure.database import Base


class OrganizationModel(Base):
    """Database representation of a certified business."""

    __tablename__ = "organization"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(120), nullable=True)
    phone = Column(String(20), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    members = relationship(
        "OrganizationMemberModel",
        back_populates="organization",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrganizationMemberModel.id",
    )


class OrganizationMemberModel(Base):
    """Staff member of an organization."""

    __tablename__ = "organization_member"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(
        Integer,
        ForeignKey("organization.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(String(64), nullable=True, index=True)
    role = Column(String(20), nullable=False, default="STAFF")
    first_name = Column(String(80), nullable=False)
    last_name = Column(String(80), nullable=False, default="")
    email = Column(String(120), nullable=True)
    phone = Column(String(20), nullable=True)
    lbp_number = Column(String(20), nullable=True, index=True)
    lbp_status = Column(String(20), nullable=True)
    lbp_last_checked = Column(DateTime, nullable=True)

    organization = relationship("OrganizationModel", back_populates="members")


__all__ = ["OrganizationModel", "OrganizationMemberModel"]
