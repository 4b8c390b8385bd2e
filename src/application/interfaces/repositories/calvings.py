from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.models.calving import Calving


class CalvingsRepository(Protocol):
    async def add(self, calving: Calving) -> Calving: ...

    async def list(
        self,
        user_id: UUID,
        animal_id: UUID | None = None,
    ) -> list[Calving]: ...
