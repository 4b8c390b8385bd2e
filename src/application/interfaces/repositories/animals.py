from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.models.animal import Animal


class AnimalRepository(Protocol):
    async def add(self, animal: Animal) -> Animal: ...

    async def get(self, user_id: UUID, animal_id: UUID) -> Animal | None: ...

    async def get_by_ear_tag(self, user_id: UUID, ear_tag: str) -> Animal | None: ...

    async def list(self, user_id: UUID, *, active_only: bool = False) -> list[Animal]: ...

    async def update(self, animal: Animal) -> Animal: ...
