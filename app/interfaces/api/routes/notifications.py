"""Endpoints and websocket handler for realtime notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, WebSocket, status
from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.entities import Notification, User
from app.infrastructure.database import get_db
from app.infrastructure.notifications import RealtimeChannel, serialize_notification
from app.infrastructure.repositories import NotificationRepository
from app.interfaces.api.dependencies import get_current_active_user, verify_channel_token
from app.interfaces.api.schemas import NotificationBulkResult, NotificationRead

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(serialize_notification(notification))


@router.get("", response_model=list[NotificationRead])
def list_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[NotificationRead]:
    """Return the notifications of the authenticated user, newest first."""

    try:
        notifications = NotificationRepository(db).list_for_user(current_user.id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return [_notification_to_schema(notification) for notification in notifications]


@router.put("/mark-all-read", response_model=NotificationBulkResult)
def mark_all_notifications_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationBulkResult:
    """Mark every unread notification of the authenticated user as read."""

    count = NotificationRepository(db).mark_all_read(current_user.id)
    return NotificationBulkResult(message="All notifications marked as read.", count=count)


@router.delete("", response_model=NotificationBulkResult)
def clear_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationBulkResult:
    """Delete every notification of the authenticated user."""

    count = NotificationRepository(db).clear_all(current_user.id)
    return NotificationBulkResult(message="All notifications cleared.", count=count)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications to the authenticated user.

    The first frame must carry the bearer token; see :class:`RealtimeChannel`.
    """

    channel = RealtimeChannel(
        websocket,
        websocket.app.state.notification_manager,
        verify_channel_token,
        handshake_timeout=get_settings().websocket_handshake_timeout_seconds,
    )
    await channel.run()
