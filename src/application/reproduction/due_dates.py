from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from src.application.errors import InvalidDate
from src.application.reproduction.constants import DEFAULT_CONSTANTS, ReproductionConstants
from src.domain.models.breeding_record import BreedingRecord
from src.domain.models.calving import Calving
from src.utils.dates import add_days, to_day


@dataclass(frozen=True, slots=True)
class DueDates:
    pregnancy_check_due: date
    expected_calving_due: date
    heat_check_due: date


def compute_due_dates(
    record: BreedingRecord,
    constants: ReproductionConstants = DEFAULT_CONSTANTS,
) -> DueDates | None:
    """Forward-looking dates of a breeding cycle.

    Returns None when the record has no breeding date or a negative PD. A
    malformed breeding date raises InvalidDate; batch callers isolate it.
    """
    if record.breeding_date is None or record.breeding_date == "":
        return None
    if record.is_negative:
        return None
    bred_on = to_day(record.breeding_date)
    return DueDates(
        pregnancy_check_due=add_days(bred_on, constants.pd_check_offset_days),
        expected_calving_due=add_days(bred_on, constants.gestation_days),
        heat_check_due=add_days(bred_on, constants.heat_check_offset_days),
    )


def find_terminating_calving(
    record: BreedingRecord, calvings: Iterable[Calving]
) -> Calving | None:
    """Calving that closed this breeding cycle, if one was recorded.

    A calving linked to the record closes it. An unlinked calving of the same dam
    on or after the breeding date closes it too. Calvings with unreadable dates
    cannot be placed and are ignored.
    """
    bred_on: date | None = None
    for calving in calvings:
        if calving.breeding_record_id is not None:
            if calving.breeding_record_id == record.id:
                return calving
            continue
        if calving.animal_id != record.animal_id:
            continue
        try:
            if bred_on is None:
                bred_on = to_day(record.breeding_date)
            if to_day(calving.calving_date) >= bred_on:
                return calving
        except InvalidDate:
            continue
    return None
