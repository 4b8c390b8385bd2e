from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class NotificationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    animal_id: UUID | None = None
    channel: str
    type: str
    title: str
    body: str
    scheduled_for: date
    metadata: dict | None = None
    read: bool
    created_at: datetime
    read_at: datetime | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationSchema]
    total: int
    unread_count: int
    limit: int
    offset: int


class SetReadRequest(BaseModel):
    read: bool = True


class MarkAsReadRequest(BaseModel):
    notification_ids: list[UUID]


class MarkAsReadResponse(BaseModel):
    marked_count: int
