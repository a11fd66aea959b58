"""Endpoints for reading and changing notification preferences."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from compliance_notifier.application.use_cases.notifications import (
    OrganizationNotFoundError,
    get_organization_preferences,
    get_user_preferences,
    update_organization_preferences,
    update_user_preferences,
)
from compliance_notifier.infrastructure.database import get_db
from compliance_notifier.interfaces.api.dependencies import get_current_user_id
from compliance_notifier.interfaces.api.schemas import (
    OrganizationNotificationPreferenceRead,
    OrganizationNotificationPreferenceUpdate,
    UserNotificationPreferenceRead,
    UserNotificationPreferenceUpdate,
)

router = APIRouter(tags=["preferences"])


@router.get(
    "/notifications/preferences", response_model=UserNotificationPreferenceRead
)
def read_user_preferences(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> UserNotificationPreferenceRead:
    """Return the caller's preferences, creating defaults on first access."""

    preferences = get_user_preferences(db, user_id=user_id)
    return UserNotificationPreferenceRead.model_validate(preferences)


@router.patch(
    "/notifications/preferences", response_model=UserNotificationPreferenceRead
)
def patch_user_preferences(
    payload: UserNotificationPreferenceUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> UserNotificationPreferenceRead:
    try:
        preferences = update_user_preferences(db, user_id=user_id, changes=payload.changes())
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return UserNotificationPreferenceRead.model_validate(preferences)


@router.get(
    "/organizations/{organization_id}/notification-preferences",
    response_model=OrganizationNotificationPreferenceRead,
)
def read_organization_preferences(
    organization_id: int,
    db: Session = Depends(get_db),
    _: str = Depends(get_current_user_id),
) -> OrganizationNotificationPreferenceRead:
    try:
        preferences = get_organization_preferences(db, organization_id=organization_id)
    except OrganizationNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return OrganizationNotificationPreferenceRead.model_validate(preferences)


@router.patch(
    "/organizations/{organization_id}/notification-preferences",
    response_model=OrganizationNotificationPreferenceRead,
)
def patch_organization_preferences(
    organization_id: int,
    payload: OrganizationNotificationPreferenceUpdate,
    db: Session = Depends(get_db),
    _: str = Depends(get_current_user_id),
) -> OrganizationNotificationPreferenceRead:
    try:
        preferences = update_organization_preferences(
            db, organization_id=organization_id, changes=payload.changes()
        )
    except OrganizationNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return OrganizationNotificationPreferenceRead.model_validate(preferences)
