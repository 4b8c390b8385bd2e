from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import asc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.models.breeding_record import BreedingRecord
from src.infrastructure.db.orm.breeding_record import BreedingRecordORM


class BreedingRecordsSQLAlchemyRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: BreedingRecordORM) -> BreedingRecord:
        return BreedingRecord(
            id=orm.id,
            user_id=orm.user_id,
            animal_id=orm.animal_id,
            breeding_date=orm.breeding_date,
            method=orm.method,
            sire_id=orm.sire_id,
            pd_result=orm.pd_result,
            pregnancy_check_date=orm.pregnancy_check_date,
            confirmed_pregnant=orm.confirmed_pregnant,
            post_pd_treatment_due_date=orm.post_pd_treatment_due_date,
            keep_in_breeding_until=orm.keep_in_breeding_until,
            reopen_date=orm.reopen_date,
            reopen_flagged_at=orm.reopen_flagged_at,
            notes=orm.notes,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
            version=orm.version,
        )

    async def add(self, record: BreedingRecord) -> BreedingRecord:
        orm = BreedingRecordORM(
            id=record.id,
            user_id=record.user_id,
            animal_id=record.animal_id,
            sire_id=record.sire_id,
            breeding_date=record.breeding_date,
            method=record.method,
            pd_result=record.pd_result,
            pregnancy_check_date=record.pregnancy_check_date,
            confirmed_pregnant=record.confirmed_pregnant,
            post_pd_treatment_due_date=record.post_pd_treatment_due_date,
            keep_in_breeding_until=record.keep_in_breeding_until,
            reopen_date=record.reopen_date,
            notes=record.notes,
            created_at=record.created_at,
            updated_at=record.updated_at,
            version=record.version,
        )
        self.session.add(orm)
        await self.session.flush()
        return self._to_domain(orm)

    async def update(self, record: BreedingRecord) -> BreedingRecord:
        orm = await self.session.get(BreedingRecordORM, record.id)
        if not orm or orm.user_id != record.user_id:
            raise ValueError(f"Breeding record {record.id} not found")
        orm.sire_id = record.sire_id
        orm.method = record.method
        orm.pd_result = record.pd_result
        orm.pregnancy_check_date = record.pregnancy_check_date
        orm.confirmed_pregnant = record.confirmed_pregnant
        orm.post_pd_treatment_due_date = record.post_pd_treatment_due_date
        orm.keep_in_breeding_until = record.keep_in_breeding_until
        orm.reopen_date = record.reopen_date
        orm.notes = record.notes
        orm.updated_at = record.updated_at
        orm.version = record.version
        await self.session.flush()
        return self._to_domain(orm)

    async def get(self, user_id: UUID, record_id: UUID) -> BreedingRecord | None:
        stmt = (
            select(BreedingRecordORM)
            .where(BreedingRecordORM.user_id == user_id)
            .where(BreedingRecordORM.id == record_id)
        )
        result = await self.session.execute(stmt)
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def list(
        self,
        user_id: UUID,
        animal_id: UUID | None = None,
    ) -> list[BreedingRecord]:
        stmt = select(BreedingRecordORM).where(BreedingRecordORM.user_id == user_id)
        if animal_id:
            stmt = stmt.where(BreedingRecordORM.animal_id == animal_id)
        stmt = stmt.order_by(asc(BreedingRecordORM.breeding_date), asc(BreedingRecordORM.created_at))
        result = await self.session.execute(stmt)
        return [self._to_domain(orm) for orm in result.scalars().all()]

    async def list_user_ids(self) -> list[UUID]:
        stmt = select(BreedingRecordORM.user_id).distinct()
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def flag_reopen(self, user_id: UUID, record_id: UUID, at: datetime) -> bool:
        # Only the first reopen decision is stamped; history stays untouched
        stmt = (
            update(BreedingRecordORM)
            .where(
                BreedingRecordORM.id == record_id,
                BreedingRecordORM.user_id == user_id,
                BreedingRecordORM.reopen_flagged_at.is_(None),
            )
            .values(reopen_flagged_at=at)
        )
        result = await self.session.execute(stmt)
        return (result.rowcount or 0) > 0
