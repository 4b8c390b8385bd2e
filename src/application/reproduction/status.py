from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from src.application.errors import AppError, InvalidDate, ValidationError
from src.application.reproduction.constants import DEFAULT_CONSTANTS, ReproductionConstants
from src.application.reproduction.due_dates import compute_due_dates, find_terminating_calving
from src.application.reproduction.results import ItemResult
from src.domain.models.animal import Animal
from src.domain.models.breeding_record import BreedingRecord
from src.domain.models.calving import Calving
from src.domain.value_objects.reproductive_status import (
    CyclePhase,
    ManualOverride,
    ReproductiveStatus,
    StatusLabel,
    StatusOrigin,
)
from src.utils.dates import days_between, to_day

logger = logging.getLogger(__name__)

_OVERRIDE_LABELS = {
    ManualOverride.PREGNANT: StatusLabel.PREGNANT,
    ManualOverride.EMPTY: StatusLabel.EMPTY,
    ManualOverride.OPEN: StatusLabel.OPEN,
}


def _parse_override(value: ManualOverride | str | None) -> ManualOverride:
    try:
        return ManualOverride.parse(value)
    except ValueError as exc:
        raise ValidationError(
            f"Unknown manual reproductive status: {value!r}", details={"value": value}
        ) from exc


def derive(
    animal: Animal,
    calvings: Iterable[Calving],
    breeding_records: Iterable[BreedingRecord] = (),
    manual_override: ManualOverride | str | None = None,
    *,
    today: date | None = None,
    constants: ReproductionConstants = DEFAULT_CONSTANTS,
) -> ReproductiveStatus:
    """Current reproductive status of one animal.

    First match wins: manual override, non-female, no calvings, then the window
    the latest calving falls in (Fresh, Heat-Detection-Due, otherwise Open).
    Breeding records are accepted for signature symmetry with describe_cycle()
    but do not affect the label.
    """
    override = _parse_override(manual_override)
    if override is not ManualOverride.NONE:
        return ReproductiveStatus.of(_OVERRIDE_LABELS[override], origin=StatusOrigin.OVERRIDE)

    if not animal.is_female:
        return ReproductiveStatus.of(StatusLabel.NOT_APPLICABLE)

    dated: list[tuple[date, Calving]] = []
    for calving in calvings:
        if calving.animal_id != animal.id:
            continue
        try:
            dated.append((to_day(calving.calving_date), calving))
        except InvalidDate as exc:
            logger.warning(
                "Unreadable calving date for animal %s (%s); skipping calving %s",
                animal.ear_tag,
                exc.message,
                calving.id,
            )
    if not dated:
        return ReproductiveStatus.of(StatusLabel.OPEN)

    latest_day, _ = max(dated, key=lambda pair: (pair[0], pair[1].id))
    days_since = days_between(today or date.today(), latest_day)

    if 0 <= days_since <= constants.fresh_window_days:
        return ReproductiveStatus.of(StatusLabel.FRESH, days_since_calving=days_since)
    if constants.fresh_window_days < days_since <= constants.heat_detection_window_days:
        return ReproductiveStatus.of(StatusLabel.HEAT_DETECTION_DUE, days_since_calving=days_since)
    return ReproductiveStatus.of(StatusLabel.OPEN, days_since_calving=days_since)


def derive_herd(
    animals: Iterable[Animal],
    calvings: Iterable[Calving],
    breeding_records: Iterable[BreedingRecord] = (),
    *,
    today: date | None = None,
    constants: ReproductionConstants = DEFAULT_CONSTANTS,
) -> list[ItemResult[ReproductiveStatus]]:
    """derive() for every animal; a failing animal yields an error entry, not an exception."""
    today = today or date.today()
    calvings = list(calvings)
    breeding_records = list(breeding_records)
    results: list[ItemResult[ReproductiveStatus]] = []
    for animal in animals:
        try:
            status = derive(
                animal,
                calvings,
                breeding_records,
                animal.reproductive_override,
                today=today,
                constants=constants,
            )
        except AppError as exc:
            logger.warning("Status derivation failed for animal %s: %s", animal.id, exc.message)
            results.append(ItemResult.failure(animal.id, exc))
            continue
        results.append(ItemResult.success(animal.id, status))
    return results


def describe_cycle(
    animal: Animal,
    breeding_records: Iterable[BreedingRecord],
    calvings: Iterable[Calving] = (),
    *,
    today: date | None = None,
    constants: ReproductionConstants = DEFAULT_CONSTANTS,
) -> CyclePhase:
    """Phase of the animal's most recent breeding cycle."""
    if not animal.is_female:
        return CyclePhase.NONE
    dated: list[tuple[date, BreedingRecord]] = []
    for record in breeding_records:
        if record.animal_id != animal.id:
            continue
        try:
            dated.append((to_day(record.breeding_date), record))
        except InvalidDate:
            logger.warning("Skipping breeding record %s with unreadable date", record.id)
    if not dated:
        return CyclePhase.NONE

    _, latest = max(dated, key=lambda pair: (pair[0], pair[1].id))
    if find_terminating_calving(latest, calvings) is not None:
        return CyclePhase.NONE
    try:
        negative, pregnant = latest.is_negative, latest.is_pregnant
    except ValueError as exc:
        raise ValidationError(
            f"Unknown PD result on breeding record {latest.id}: {latest.pd_result!r}",
            details={"breeding_record_id": str(latest.id), "pd_result": latest.pd_result},
        ) from exc
    if negative:
        return CyclePhase.NOT_PREGNANT
    if pregnant:
        return CyclePhase.PREGNANT

    due = compute_due_dates(latest, constants)
    if due is not None and days_between(today or date.today(), due.pregnancy_check_due) >= 0:
        return CyclePhase.PD_DUE
    return CyclePhase.BRED_UNCONFIRMED
