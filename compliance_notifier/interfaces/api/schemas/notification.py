"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, model_validator


class NotificationMarkReadRequest(BaseModel):
    """Mark one notification, or every notification, as read."""

    notification_id: int | None = Field(default=None, ge=1)
    mark_all: bool = False

    @model_validator(mode="after")
    def _require_target(self) -> "NotificationMarkReadRequest":
        if not self.mark_all and self.notification_id is None:
            raise ValueError("Provide notification_id or set mark_all")
        return self


class NotificationMarkReadResponse(BaseModel):
    updated: int


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    organization_id: int | None = None
    user_id: str | None = None
    type: str
    channel: str
    priority: str
    title: str
    message: str
    action_url: str | None = None
    status: str
    created_at: datetime | None = None
    sent_at: datetime | None = None
    read_at: datetime | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationRead]
    unread_count: int


__all__ = [
    "NotificationListResponse",
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
]
