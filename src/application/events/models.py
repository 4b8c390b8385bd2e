from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class BreedingCycleChangedEvent:
    """A breeding/calving mutation that may change due dates or close a cycle."""

    user_id: UUID
    animal_id: UUID
    breeding_record_id: UUID | None = None
    reason: str = "breeding_recorded"
