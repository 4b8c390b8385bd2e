from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from src.application.errors import AmbiguousState, NotFound, ValidationError
from src.application.events.models import BreedingCycleChangedEvent
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.reproduction.due_dates import find_terminating_calving
from src.domain.models.breeding_record import BreedingMethod, BreedingRecord


@dataclass(slots=True)
class RecordBreedingInput:
    animal_id: UUID
    breeding_date: date
    method: str
    sire_id: UUID | None = None
    notes: str | None = None


async def execute(
    uow: UnitOfWork,
    user_id: UUID,
    payload: RecordBreedingInput,
) -> BreedingRecord:
    valid_methods = {m.value for m in BreedingMethod}
    if payload.method not in valid_methods:
        raise ValidationError(f"Invalid method. Must be one of: {', '.join(sorted(valid_methods))}")

    # Validate dam exists, is female and still in the herd
    animal = await uow.animals.get(user_id, payload.animal_id)
    if not animal:
        raise NotFound(f"Animal {payload.animal_id} not found")
    if not animal.is_female:
        raise ValidationError("Only female animals can be bred")
    if not animal.is_active:
        raise ValidationError("Cannot breed an inactive animal")

    if payload.sire_id:
        sire = await uow.animals.get(user_id, payload.sire_id)
        if not sire:
            raise NotFound(f"Sire {payload.sire_id} not found")
        if sire.is_female:
            raise ValidationError("Sire must be a male animal")

    # At most one open cycle per dam
    existing = await uow.breeding_records.list(user_id, animal_id=animal.id)
    calvings = await uow.calvings.list(user_id, animal_id=animal.id)
    for record in existing:
        if record.is_unchecked and find_terminating_calving(record, calvings) is None:
            raise AmbiguousState(
                "Animal already has an open breeding record awaiting PD",
                details={"breeding_record_id": str(record.id)},
            )

    record = BreedingRecord.create(
        user_id=user_id,
        animal_id=animal.id,
        breeding_date=payload.breeding_date,
        method=payload.method,
        sire_id=payload.sire_id,
        notes=payload.notes,
    )
    created = await uow.breeding_records.add(record)
    uow.add_event(
        BreedingCycleChangedEvent(
            user_id=user_id,
            animal_id=animal.id,
            breeding_record_id=created.id,
            reason="breeding_recorded",
        )
    )
    return created
