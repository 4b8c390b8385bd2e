from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from src.application.errors import ConflictError, InvalidDate, NotFound, ValidationError
from src.application.events.models import BreedingCycleChangedEvent
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.reproduction.due_dates import find_terminating_calving
from src.domain.models.animal import Animal
from src.domain.models.breeding_record import BreedingRecord
from src.domain.models.calving import Calving
from src.domain.value_objects.animal_status import Sex
from src.utils.dates import to_day


@dataclass(slots=True)
class RecordCalvingInput:
    animal_id: UUID
    calving_date: date
    calf_ear_tag: str | None = None
    calf_sex: str | None = None
    birth_weight: Decimal | None = None
    complications: str | None = None
    assistance_required: bool = False
    notes: str | None = None


@dataclass(slots=True)
class RecordCalvingOutput:
    calving: Calving
    calf: Animal | None = None
    breeding_record: BreedingRecord | None = None


def _cycle_for(
    records: list[BreedingRecord], calvings: list[Calving], calving_date: date
) -> BreedingRecord | None:
    """Most recent running cycle bred on or before the calving date."""
    candidates: list[tuple[date, BreedingRecord]] = []
    for record in records:
        try:
            if record.is_negative or find_terminating_calving(record, calvings) is not None:
                continue
            bred_on = to_day(record.breeding_date)
        except (InvalidDate, ValueError):
            continue
        if bred_on <= calving_date:
            candidates.append((bred_on, record))
    if not candidates:
        return None
    return max(candidates, key=lambda pair: (pair[0], pair[1].id))[1]


async def execute(
    uow: UnitOfWork,
    user_id: UUID,
    payload: RecordCalvingInput,
) -> RecordCalvingOutput:
    dam = await uow.animals.get(user_id, payload.animal_id)
    if not dam:
        raise NotFound(f"Animal {payload.animal_id} not found")
    if not dam.is_female:
        raise ValidationError("Only female animals can calve")

    calf_tag = (payload.calf_ear_tag or "").strip() or None
    if calf_tag:
        valid_sexes = {s.value for s in Sex}
        if payload.calf_sex not in valid_sexes:
            raise ValidationError(
                f"calf_sex is required to register a calf. Must be one of: {', '.join(sorted(valid_sexes))}"
            )
        if await uow.animals.get_by_ear_tag(user_id, calf_tag):
            raise ConflictError(f"Ear tag {calf_tag} is already used in this herd")

    records = await uow.breeding_records.list(user_id, animal_id=dam.id)
    previous = await uow.calvings.list(user_id, animal_id=dam.id)
    cycle = _cycle_for(records, previous, payload.calving_date)

    calf = None
    if calf_tag:
        sire_id = None
        if cycle and cycle.sire_id and await uow.animals.get(user_id, cycle.sire_id):
            sire_id = cycle.sire_id
        calf = await uow.animals.add(
            Animal.create(
                user_id=user_id,
                ear_tag=calf_tag,
                sex=payload.calf_sex,
                birth_date=payload.calving_date,
                dam_id=dam.id,
                sire_id=sire_id,
            )
        )

    calving = Calving.create(
        user_id=user_id,
        animal_id=dam.id,
        calving_date=payload.calving_date,
        breeding_record_id=cycle.id if cycle else None,
        calf_ear_tag=calf_tag,
        calf_sex=payload.calf_sex,
        birth_weight=payload.birth_weight,
        complications=payload.complications,
        assistance_required=payload.assistance_required,
        notes=payload.notes,
    )
    calving.calf_id = calf.id if calf else None
    saved = await uow.calvings.add(calving)

    uow.add_event(
        BreedingCycleChangedEvent(
            user_id=user_id,
            animal_id=dam.id,
            breeding_record_id=cycle.id if cycle else None,
            reason="calving_recorded",
        )
    )
    return RecordCalvingOutput(calving=saved, calf=calf, breeding_record=cycle)
