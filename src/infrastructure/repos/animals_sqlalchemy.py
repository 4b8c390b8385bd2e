from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.models.animal import Animal
from src.domain.value_objects.animal_status import AnimalLifecycle
from src.domain.value_objects.reproductive_status import ManualOverride
from src.infrastructure.db.orm.animal import AnimalORM


class AnimalsSQLAlchemyRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: AnimalORM) -> Animal:
        return Animal(
            id=orm.id,
            user_id=orm.user_id,
            ear_tag=orm.ear_tag,
            sex=orm.sex,
            name=orm.name,
            birth_date=orm.birth_date,
            lifecycle_status=orm.lifecycle_status,
            reproductive_override=ManualOverride.parse(orm.reproductive_override),
            dam_id=orm.dam_id,
            sire_id=orm.sire_id,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
            version=orm.version,
        )

    async def add(self, animal: Animal) -> Animal:
        orm = AnimalORM(
            id=animal.id,
            user_id=animal.user_id,
            ear_tag=animal.ear_tag,
            sex=animal.sex,
            name=animal.name,
            birth_date=animal.birth_date,
            lifecycle_status=animal.lifecycle_status,
            reproductive_override=animal.reproductive_override.value,
            dam_id=animal.dam_id,
            sire_id=animal.sire_id,
            created_at=animal.created_at,
            updated_at=animal.updated_at,
            version=animal.version,
        )
        self.session.add(orm)
        await self.session.flush()
        return self._to_domain(orm)

    async def get(self, user_id: UUID, animal_id: UUID) -> Animal | None:
        stmt = select(AnimalORM).where(AnimalORM.user_id == user_id, AnimalORM.id == animal_id)
        result = await self.session.execute(stmt)
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def get_by_ear_tag(self, user_id: UUID, ear_tag: str) -> Animal | None:
        stmt = select(AnimalORM).where(AnimalORM.user_id == user_id, AnimalORM.ear_tag == ear_tag)
        result = await self.session.execute(stmt)
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def list(self, user_id: UUID, *, active_only: bool = False) -> list[Animal]:
        stmt = select(AnimalORM).where(AnimalORM.user_id == user_id).order_by(AnimalORM.ear_tag)
        if active_only:
            stmt = stmt.where(AnimalORM.lifecycle_status == AnimalLifecycle.ACTIVE.value)
        result = await self.session.execute(stmt)
        return [self._to_domain(orm) for orm in result.scalars().all()]

    async def update(self, animal: Animal) -> Animal:
        orm = await self.session.get(AnimalORM, animal.id)
        if not orm or orm.user_id != animal.user_id:
            raise ValueError(f"Animal {animal.id} not found")
        orm.name = animal.name
        orm.sex = animal.sex
        orm.birth_date = animal.birth_date
        orm.lifecycle_status = animal.lifecycle_status
        orm.reproductive_override = animal.reproductive_override.value
        orm.dam_id = animal.dam_id
        orm.sire_id = animal.sire_id
        orm.updated_at = animal.updated_at
        orm.version = animal.version
        await self.session.flush()
        return self._to_domain(orm)
