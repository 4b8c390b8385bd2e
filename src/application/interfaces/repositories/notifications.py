from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.models.notification import Notification, NotificationUpsert


class NotificationsRepository(Protocol):
    async def upsert(self, upsert: NotificationUpsert) -> bool:
        """Insert if the dedup key is new, update if unread and changed. True when a row changed."""
        ...

    async def get(self, user_id: UUID, notification_id: UUID) -> Notification | None: ...

    async def list_by_user(
        self,
        user_id: UUID,
        *,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Notification]: ...

    async def list_by_types(self, user_id: UUID, types: set[str]) -> list[Notification]: ...

    async def count_unread(self, user_id: UUID) -> int: ...

    async def set_read(self, user_id: UUID, notification_id: UUID, read: bool) -> bool: ...

    async def mark_as_read(self, user_id: UUID, notification_ids: list[UUID]) -> int: ...

    async def mark_all_as_read(self, user_id: UUID) -> int: ...
