"""Domain entities for certified organizations and their staff."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

MEMBER_ROLE_OWNER = "OWNER"
MEMBER_ROLE_ADMIN = "ADMIN"
MEMBER_ROLE_STAFF = "STAFF"

LBP_STATUS_CURRENT = "CURRENT"
LBP_STATUS_SUSPENDED = "SUSPENDED"
LBP_STATUS_CANCELLED = "CANCELLED"
LBP_STATUS_EXPIRED = "EXPIRED"
LBP_STATUS_NOT_FOUND = "NOT_FOUND"


@dataclass
class OrganizationMember:
    """Person attached to an organization, optionally holding an LBP licence."""

    id: int | None
    organization_id: int
    role: str
    first_name: str
    last_name: str
    email: str | None
    phone: str | None = None
    user_id: str | None = None
    lbp_number: str | None = None
    lbp_status: str | None = None
    lbp_last_checked: datetime | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class Organization:
    """Business enrolled with the association."""

    id: int | None
    name: str
    email: str | None = None
    phone: str | None = None
    members: list[OrganizationMember] = field(default_factory=list)

    def owner(self) -> OrganizationMember | None:
        """Return the first member holding the ``OWNER`` role."""

        for member in self.members:
            if member.role == MEMBER_ROLE_OWNER:
                return member
        return None

    def administrators(self) -> list[OrganizationMember]:
        """Return owners and admins, owners first."""

        owners = [m for m in self.members if m.role == MEMBER_ROLE_OWNER]
        admins = [m for m in self.members if m.role == MEMBER_ROLE_ADMIN]
        return owners + admins


__all__ = [
    "Organization",
    "OrganizationMember",
    "MEMBER_ROLE_OWNER",
    "MEMBER_ROLE_ADMIN",
    "MEMBER_ROLE_STAFF",
    "LBP_STATUS_CURRENT",
    "LBP_STATUS_SUSPENDED",
    "LBP_STATUS_CANCELLED",
    "LBP_STATUS_EXPIRED",
    "LBP_STATUS_NOT_FOUND",
]
