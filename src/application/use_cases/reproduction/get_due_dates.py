from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from src.application.errors import NotFound
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.reproduction.constants import ReproductionConstants
from src.application.reproduction.due_dates import DueDates, compute_due_dates
from src.domain.models.breeding_record import BreedingRecord


@dataclass(slots=True)
class DueDatesView:
    record: BreedingRecord
    # None for a negative PD; its follow-up dates live on the record
    due: DueDates | None


async def execute(
    uow: UnitOfWork,
    user_id: UUID,
    breeding_record_id: UUID,
    *,
    constants: ReproductionConstants,
) -> DueDatesView:
    record = await uow.breeding_records.get(user_id, breeding_record_id)
    if not record:
        raise NotFound(f"Breeding record {breeding_record_id} not found")
    return DueDatesView(record=record, due=compute_due_dates(record, constants))
