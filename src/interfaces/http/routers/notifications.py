from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from src.application.errors import NotFound
from src.infrastructure.db.session import SQLAlchemyUnitOfWork
from src.interfaces.http.deps import get_current_user_id, get_uow
from src.interfaces.http.schemas.notifications import (
    MarkAsReadRequest,
    MarkAsReadResponse,
    NotificationListResponse,
    NotificationSchema,
    SetReadRequest,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread_only: bool = False,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    user_id: UUID = Depends(get_current_user_id),
    uow: SQLAlchemyUnitOfWork = Depends(get_uow),
) -> NotificationListResponse:
    """Get user's notifications, newest due date first."""
    notifications = await uow.notifications.list_by_user(
        user_id, unread_only=unread_only, limit=limit, offset=offset
    )
    unread_count = await uow.notifications.count_unread(user_id)

    return NotificationListResponse(
        notifications=[NotificationSchema.model_validate(n) for n in notifications],
        total=len(notifications),
        unread_count=unread_count,
        limit=limit,
        offset=offset,
    )


@router.patch("/mark-read", response_model=MarkAsReadResponse)
async def mark_notifications_as_read(
    payload: MarkAsReadRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: SQLAlchemyUnitOfWork = Depends(get_uow),
) -> MarkAsReadResponse:
    """Mark specific notifications as read."""
    marked_count = await uow.notifications.mark_as_read(user_id, payload.notification_ids)
    await uow.commit()
    return MarkAsReadResponse(marked_count=marked_count)


@router.post("/mark-all-read", response_model=MarkAsReadResponse)
async def mark_all_notifications_as_read(
    user_id: UUID = Depends(get_current_user_id),
    uow: SQLAlchemyUnitOfWork = Depends(get_uow),
) -> MarkAsReadResponse:
    """Mark all user's notifications as read."""
    marked_count = await uow.notifications.mark_all_as_read(user_id)
    await uow.commit()
    logger.info("Marked %d notifications read for user %s", marked_count, user_id)
    return MarkAsReadResponse(marked_count=marked_count)


@router.patch("/{notification_id}", response_model=NotificationSchema)
async def set_notification_read(
    notification_id: UUID,
    payload: SetReadRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: SQLAlchemyUnitOfWork = Depends(get_uow),
) -> NotificationSchema:
    if not await uow.notifications.set_read(user_id, notification_id, payload.read):
        raise NotFound(f"Notification {notification_id} not found")
    await uow.commit()
    notification = await uow.notifications.get(user_id, notification_id)
    return NotificationSchema.model_validate(notification)
