from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from src.application.errors import NotFound, ValidationError
from src.application.events.models import BreedingCycleChangedEvent
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.reproduction.constants import ReproductionConstants
from src.domain.models.breeding_record import BreedingRecord, PdResult


@dataclass(slots=True)
class RecordPregnancyCheckInput:
    breeding_record_id: UUID
    result: str  # Pregnant, Not Pregnant
    check_date: date


async def execute(
    uow: UnitOfWork,
    user_id: UUID,
    payload: RecordPregnancyCheckInput,
    *,
    constants: ReproductionConstants,
) -> BreedingRecord:
    try:
        result = PdResult(payload.result)
    except ValueError:
        result = None
    if result not in (PdResult.PREGNANT, PdResult.NOT_PREGNANT):
        raise ValidationError(
            f"Invalid result. Must be one of: {PdResult.PREGNANT.value}, "
            f"{PdResult.NOT_PREGNANT.value}"
        )

    record = await uow.breeding_records.get(user_id, payload.breeding_record_id)
    if not record:
        raise NotFound(f"Breeding record {payload.breeding_record_id} not found")

    if result is PdResult.PREGNANT:
        record.confirm_pregnancy(payload.check_date)
    else:
        record.mark_not_pregnant(
            payload.check_date,
            treatment_days=constants.post_pd_treatment_days,
            reopen_days=constants.reopen_after_negative_pd_days,
        )

    updated = await uow.breeding_records.update(record)
    uow.add_event(
        BreedingCycleChangedEvent(
            user_id=user_id,
            animal_id=updated.animal_id,
            breeding_record_id=updated.id,
            reason="pregnancy_check_recorded",
        )
    )
    return updated
