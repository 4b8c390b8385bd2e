from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any
from uuid import UUID, uuid4

IN_APP_CHANNEL = "in_app"


def build_dedup_key(type: str, source_id: UUID, scheduled_for: date) -> str:
    return f"{type}:{source_id}:{scheduled_for.isoformat()}"


@dataclass(frozen=True, slots=True)
class NotificationUpsert:
    """Desired state of one notification, keyed by `dedup_key`."""

    dedup_key: str
    user_id: UUID
    animal_id: UUID | None
    type: str
    scheduled_for: date
    title: str
    body: str
    metadata: dict[str, Any]


@dataclass(slots=True)
class Notification:
    id: UUID
    user_id: UUID
    type: str
    title: str
    body: str
    scheduled_for: date
    dedup_key: str
    animal_id: UUID | None = None
    channel: str = IN_APP_CHANNEL
    metadata: dict | None = None
    read: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    read_at: datetime | None = None

    @classmethod
    def from_upsert(cls, upsert: NotificationUpsert) -> Notification:
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid4(),
            user_id=upsert.user_id,
            type=upsert.type,
            title=upsert.title,
            body=upsert.body,
            scheduled_for=upsert.scheduled_for,
            dedup_key=upsert.dedup_key,
            animal_id=upsert.animal_id,
            metadata=dict(upsert.metadata),
            read=False,
            created_at=now,
            updated_at=now,
            read_at=None,
        )

    def differs_from(self, upsert: NotificationUpsert) -> bool:
        return (
            self.scheduled_for != upsert.scheduled_for
            or self.title != upsert.title
            or self.body != upsert.body
            or self.animal_id != upsert.animal_id
            or (self.metadata or {}) != upsert.metadata
        )

    def mark_as_read(self) -> None:
        if not self.read:
            self.read = True
            self.read_at = datetime.now(timezone.utc)
