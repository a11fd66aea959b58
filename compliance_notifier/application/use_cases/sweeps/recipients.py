"""Resolve which organization member should hear about a compliance event."""

from __future__ import annotations

from compliance_notifier.domain.entities import Organization, OrganizationMember


def find_member_by_user(
    organization: Organization, user_id: str | None
) -> OrganizationMember | None:
    if not user_id:
        return None
    for member in organization.members:
        if member.user_id == user_id:
            return member
    return None


def responsible_member(
    organization: Organization, user_id: str | None = None
) -> OrganizationMember | None:
    """Return the member linked to ``user_id``, else the first owner or admin."""

    member = find_member_by_user(organization, user_id)
    if member is not None and member.email:
        return member
    for candidate in organization.administrators():
        if candidate.email:
            return candidate
    return None


__all__ = ["find_member_by_user", "responsible_member"]
