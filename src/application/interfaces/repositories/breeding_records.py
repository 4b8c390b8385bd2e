from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.models.breeding_record import BreedingRecord


class BreedingRecordsRepository(Protocol):
    async def add(self, record: BreedingRecord) -> BreedingRecord: ...

    async def update(self, record: BreedingRecord) -> BreedingRecord: ...

    async def get(self, user_id: UUID, record_id: UUID) -> BreedingRecord | None: ...

    async def list(
        self,
        user_id: UUID,
        animal_id: UUID | None = None,
    ) -> list[BreedingRecord]: ...

    async def list_user_ids(self) -> list[UUID]: ...

    async def flag_reopen(self, user_id: UUID, record_id: UUID, at: datetime) -> bool: ...
