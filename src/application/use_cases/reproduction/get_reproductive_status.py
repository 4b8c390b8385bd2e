from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from src.application.errors import AppError, NotFound
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.reproduction import status
from src.application.reproduction.constants import ReproductionConstants
from src.domain.models.animal import Animal
from src.domain.value_objects.reproductive_status import CyclePhase, ReproductiveStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AnimalStatusView:
    animal: Animal
    status: ReproductiveStatus | None
    cycle_phase: CyclePhase | None
    error: AppError | None = None


async def execute_for_herd(
    uow: UnitOfWork,
    user_id: UUID,
    *,
    constants: ReproductionConstants,
    today: date | None = None,
    active_only: bool = True,
) -> list[AnimalStatusView]:
    today = today or date.today()
    animals = await uow.animals.list(user_id, active_only=active_only)
    records = await uow.breeding_records.list(user_id)
    calvings = await uow.calvings.list(user_id)

    results = status.derive_herd(animals, calvings, records, today=today, constants=constants)
    views: list[AnimalStatusView] = []
    for animal, result in zip(animals, results):
        if not result.ok:
            views.append(AnimalStatusView(animal, None, None, error=result.error))
            continue
        try:
            phase = status.describe_cycle(
                animal, records, calvings, today=today, constants=constants
            )
        except AppError as exc:
            logger.warning("Cycle phase failed for animal %s: %s", animal.id, exc.message)
            views.append(AnimalStatusView(animal, None, None, error=exc))
            continue
        views.append(AnimalStatusView(animal, result.value, phase))
    return views


async def execute(
    uow: UnitOfWork,
    user_id: UUID,
    animal_id: UUID,
    *,
    constants: ReproductionConstants,
    today: date | None = None,
) -> AnimalStatusView:
    animal = await uow.animals.get(user_id, animal_id)
    if not animal:
        raise NotFound(f"Animal {animal_id} not found")
    records = await uow.breeding_records.list(user_id, animal_id=animal_id)
    calvings = await uow.calvings.list(user_id, animal_id=animal_id)
    today = today or date.today()
    derived = status.derive(
        animal,
        calvings,
        records,
        animal.reproductive_override,
        today=today,
        constants=constants,
    )
    phase = status.describe_cycle(animal, records, calvings, today=today, constants=constants)
    return AnimalStatusView(animal, derived, phase)
