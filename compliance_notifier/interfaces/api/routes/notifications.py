"""Endpoints and websocket handler for the in-app notification inbox."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from compliance_notifier.application.use_cases.notifications import (
    count_unread,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)
from compliance_notifier.domain.entities import Notification
from compliance_notifier.infrastructure.database import SessionLocal, get_db
from compliance_notifier.infrastructure.notifications import (
    notification_manager,
    serialize_notification,
)
from compliance_notifier.infrastructure.repositories import NotificationRepository
from compliance_notifier.interfaces.api.dependencies import get_current_user_id
from compliance_notifier.interfaces.api.schemas import (
    NotificationListResponse,
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or 0,
        organization_id=notification.organization_id,
        user_id=notification.user_id,
        type=notification.type,
        channel=notification.channel,
        priority=notification.priority,
        title=notification.title,
        message=notification.message,
        action_url=notification.action_url,
        status=notification.status,
        created_at=notification.created_at,
        sent_at=notification.sent_at,
        read_at=notification.read_at,
    )


@router.get("", response_model=NotificationListResponse)
def read_notifications(
    unread: bool = Query(default=False),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> NotificationListResponse:
    """Return the caller's most recent notifications and their unread count."""

    notifications = list_notifications(db, user_id=user_id, unread_only=unread, limit=limit)
    return NotificationListResponse(
        notifications=[_notification_to_schema(n) for n in notifications],
        unread_count=count_unread(db, user_id=user_id),
    )


@router.post("/read", response_model=NotificationMarkReadResponse)
def mark_read(
    payload: NotificationMarkReadRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> NotificationMarkReadResponse:
    if payload.mark_all:
        return NotificationMarkReadResponse(
            updated=mark_all_notifications_read(db, user_id=user_id)
        )
    try:
        mark_notification_read(
            db, user_id=user_id, notification_id=payload.notification_id
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return NotificationMarkReadResponse(updated=1)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Stream new in-app notifications to the connected user."""

    user_id = (
        websocket.headers.get("x-user-id") or websocket.query_params.get("user_id") or ""
    ).strip()
    if not user_id:
        await websocket.close(code=1008)
        return

    session = SessionLocal()
    try:
        pending_notifications = NotificationRepository(session).list_for_user(
            user_id, unread_only=True, limit=50
        )
    finally:
        session.close()

    await notification_manager.connect(user_id, websocket)
    try:
        if pending_notifications:
            await websocket.send_json(
                {
                    "type": "init",
                    "data": [serialize_notification(n) for n in pending_notifications],
                }
            )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    ack_session = SessionLocal()
                    try:
                        NotificationRepository(ack_session).mark_as_read(ids, user_id=user_id)
                        ack_session.commit()
                    finally:
                        ack_session.close()
    except WebSocketDisconnect:
        notification_manager.disconnect(user_id, websocket)
    except Exception:
        notification_manager.disconnect(user_id, websocket)
        logger.exception("Notification websocket for user %s closed unexpectedly", user_id)
        raise
