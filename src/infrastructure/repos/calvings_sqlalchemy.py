from __future__ import annotations

from uuid import UUID

from sqlalchemy import asc, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.models.calving import Calving
from src.infrastructure.db.orm.calving import CalvingORM


class CalvingsSQLAlchemyRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: CalvingORM) -> Calving:
        return Calving(
            id=orm.id,
            user_id=orm.user_id,
            animal_id=orm.animal_id,
            calving_date=orm.calving_date,
            breeding_record_id=orm.breeding_record_id,
            calf_ear_tag=orm.calf_ear_tag,
            calf_sex=orm.calf_sex,
            birth_weight=orm.birth_weight,
            complications=orm.complications,
            assistance_required=orm.assistance_required,
            calf_id=orm.calf_id,
            notes=orm.notes,
            created_at=orm.created_at,
        )

    async def add(self, calving: Calving) -> Calving:
        orm = CalvingORM(
            id=calving.id,
            user_id=calving.user_id,
            animal_id=calving.animal_id,
            breeding_record_id=calving.breeding_record_id,
            calving_date=calving.calving_date,
            calf_ear_tag=calving.calf_ear_tag,
            calf_sex=calving.calf_sex,
            calf_id=calving.calf_id,
            birth_weight=calving.birth_weight,
            complications=calving.complications,
            assistance_required=calving.assistance_required,
            notes=calving.notes,
            created_at=calving.created_at,
        )
        self.session.add(orm)
        await self.session.flush()
        return self._to_domain(orm)

    async def list(
        self,
        user_id: UUID,
        animal_id: UUID | None = None,
    ) -> list[Calving]:
        stmt = select(CalvingORM).where(CalvingORM.user_id == user_id)
        if animal_id:
            stmt = stmt.where(CalvingORM.animal_id == animal_id)
        stmt = stmt.order_by(asc(CalvingORM.calving_date))
        result = await self.session.execute(stmt)
        return [self._to_domain(orm) for orm in result.scalars().all()]
