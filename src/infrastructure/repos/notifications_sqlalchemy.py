from __future__ import annotations

import json
from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.models.notification import Notification, NotificationUpsert
from src.infrastructure.db.orm.notification import NotificationORM


def _dump(metadata: dict | None) -> str | None:
    return json.dumps(metadata, sort_keys=True) if metadata else None


class NotificationsSQLAlchemyRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: NotificationORM) -> Notification:
        metadata = json.loads(orm.data) if orm.data else None
        return Notification(
            id=orm.id,
            user_id=orm.user_id,
            type=orm.type,
            title=orm.title,
            body=orm.body,
            scheduled_for=orm.scheduled_for,
            dedup_key=orm.dedup_key,
            animal_id=orm.animal_id,
            channel=orm.channel,
            metadata=metadata,
            read=orm.read,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
            read_at=orm.read_at,
        )

    def _insert(self):
        dialect = self.session.bind.dialect.name if self.session.bind is not None else ""
        if dialect == "postgresql":
            return pg_insert
        if dialect == "sqlite":
            return sqlite_insert
        raise NotImplementedError(f"Atomic notification upsert not supported on {dialect!r}")

    async def upsert(self, upsert: NotificationUpsert) -> bool:
        """Single-statement insert-if-absent / update-if-unread-and-changed."""
        now = datetime.now(timezone.utc)
        insert = self._insert()
        table = NotificationORM.__table__
        stmt = insert(table).values(
            id=uuid4(),
            user_id=upsert.user_id,
            animal_id=upsert.animal_id,
            type=upsert.type,
            dedup_key=upsert.dedup_key,
            scheduled_for=upsert.scheduled_for,
            title=upsert.title,
            body=upsert.body,
            data=_dump(upsert.metadata),
            read=False,
            created_at=now,
            updated_at=now,
        )
        excluded = stmt.excluded
        changed = or_(
            table.c.scheduled_for != excluded.scheduled_for,
            table.c.title != excluded.title,
            table.c.body != excluded.body,
            table.c.data.is_distinct_from(excluded.data),
            table.c.animal_id.is_distinct_from(excluded.animal_id),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.dedup_key],
            set_={
                "scheduled_for": excluded.scheduled_for,
                "title": excluded.title,
                "body": excluded.body,
                "data": excluded.data,
                "animal_id": excluded.animal_id,
                "updated_at": now,
            },
            where=and_(
                table.c.read == False,  # noqa: E712
                table.c.user_id == excluded.user_id,
                changed,
            ),
        )
        result = await self.session.execute(stmt)
        return (result.rowcount or 0) > 0

    async def get(self, user_id: UUID, notification_id: UUID) -> Notification | None:
        stmt = select(NotificationORM).where(
            NotificationORM.id == notification_id, NotificationORM.user_id == user_id
        )
        result = await self.session.execute(stmt)
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def list_by_user(
        self,
        user_id: UUID,
        *,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Notification]:
        stmt = (
            select(NotificationORM)
            .where(NotificationORM.user_id == user_id)
            .order_by(NotificationORM.scheduled_for.desc(), NotificationORM.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        if unread_only:
            stmt = stmt.where(NotificationORM.read == False)  # noqa: E712

        result = await self.session.execute(stmt)
        return [self._to_domain(orm) for orm in result.scalars().all()]

    async def list_by_types(self, user_id: UUID, types: set[str]) -> list[Notification]:
        stmt = select(NotificationORM).where(
            NotificationORM.user_id == user_id, NotificationORM.type.in_(sorted(types))
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(orm) for orm in result.scalars().all()]

    async def count_unread(self, user_id: UUID) -> int:
        stmt = select(func.count()).where(
            NotificationORM.user_id == user_id,
            NotificationORM.read == False,  # noqa: E712
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def set_read(self, user_id: UUID, notification_id: UUID, read: bool) -> bool:
        stmt = (
            update(NotificationORM)
            .where(NotificationORM.id == notification_id, NotificationORM.user_id == user_id)
            .values(read=read, read_at=datetime.now(timezone.utc) if read else None)
        )
        result = await self.session.execute(stmt)
        return (result.rowcount or 0) > 0

    async def mark_as_read(self, user_id: UUID, notification_ids: list[UUID]) -> int:
        if not notification_ids:
            return 0
        stmt = (
            update(NotificationORM)
            .where(
                NotificationORM.id.in_(notification_ids),
                NotificationORM.user_id == user_id,
                NotificationORM.read == False,  # noqa: E712
            )
            .values(read=True, read_at=datetime.now(timezone.utc))
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def mark_all_as_read(self, user_id: UUID) -> int:
        stmt = (
            update(NotificationORM)
            .where(
                NotificationORM.user_id == user_id,
                NotificationORM.read == False,  # noqa: E712
            )
            .values(read=True, read_at=datetime.now(timezone.utc))
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0
