from __future__ import annotations

from datetime import date, timedelta
from uuid import uuid4

import pytest

from src.application.errors import InvalidDate, ValidationError
from src.application.reproduction import status
from src.application.reproduction.constants import ReproductionConstants
from src.application.reproduction.due_dates import compute_due_dates
from src.domain.models.animal import Animal
from src.domain.models.breeding_record import BreedingRecord, PdResult
from src.domain.models.calving import Calving
from src.domain.value_objects.reproductive_status import (
    CyclePhase,
    ManualOverride,
    StatusCategory,
    StatusLabel,
    StatusOrigin,
)

TODAY = date(2024, 6, 1)
USER = uuid4()


def make_cow(**kw) -> Animal:
    return Animal.create(user_id=USER, ear_tag=kw.pop("ear_tag", "A-1"), sex="Female", **kw)


def calved(animal: Animal, days_ago: int) -> Calving:
    return Calving.create(
        user_id=USER, animal_id=animal.id, calving_date=TODAY - timedelta(days=days_ago)
    )


def test_no_calvings_is_open():
    cow = make_cow()
    result = status.derive(cow, [], today=TODAY)
    assert result.label is StatusLabel.OPEN
    assert result.category is StatusCategory.OUTLINE
    assert result.origin is StatusOrigin.COMPUTED
    assert result.days_since_calving is None


def test_calvings_of_other_animals_are_ignored():
    cow = make_cow()
    other = make_cow(ear_tag="A-2")
    result = status.derive(cow, [calved(other, 10)], today=TODAY)
    assert result.label is StatusLabel.OPEN


@pytest.mark.parametrize(
    "days_ago,label",
    [
        (0, StatusLabel.FRESH),
        (48, StatusLabel.FRESH),
        (49, StatusLabel.HEAT_DETECTION_DUE),
        (365, StatusLabel.HEAT_DETECTION_DUE),
        (366, StatusLabel.OPEN),
    ],
)
def test_window_boundaries(days_ago, label):
    cow = make_cow()
    result = status.derive(cow, [calved(cow, days_ago)], today=TODAY)
    assert result.label is label
    assert result.days_since_calving == days_ago


def test_future_calving_date_is_open():
    cow = make_cow()
    result = status.derive(cow, [calved(cow, -3)], today=TODAY)
    assert result.label is StatusLabel.OPEN


def test_latest_calving_wins():
    cow = make_cow()
    result = status.derive(cow, [calved(cow, 400), calved(cow, 20)], today=TODAY)
    assert result.label is StatusLabel.FRESH
    assert result.days_since_calving == 20


def test_male_is_not_applicable():
    bull = Animal.create(user_id=USER, ear_tag="B-1", sex="Male")
    result = status.derive(bull, [calved(bull, 10)], today=TODAY)
    assert result.label is StatusLabel.NOT_APPLICABLE


@pytest.mark.parametrize(
    "override,label",
    [
        (ManualOverride.PREGNANT, StatusLabel.PREGNANT),
        ("Empty", StatusLabel.EMPTY),
        ("Open", StatusLabel.OPEN),
    ],
)
def test_manual_override_always_wins(override, label):
    cow = make_cow()
    record = BreedingRecord.create(
        user_id=USER, animal_id=cow.id, breeding_date=TODAY - timedelta(days=10), method="AI"
    )
    result = status.derive(cow, [calved(cow, 5)], [record], override, today=TODAY)
    assert result.label is label
    assert result.origin is StatusOrigin.OVERRIDE


def test_override_applies_to_males_too():
    bull = Animal.create(user_id=USER, ear_tag="B-1", sex="Male")
    result = status.derive(bull, [], manual_override="Pregnant", today=TODAY)
    assert result.label is StatusLabel.PREGNANT


def test_unknown_override_is_rejected():
    with pytest.raises(ValidationError):
        status.derive(make_cow(), [], manual_override="Maybe", today=TODAY)


def test_unreadable_calving_date_alone_falls_back_to_open(caplog):
    cow = make_cow()
    broken = Calving.create(user_id=USER, animal_id=cow.id, calving_date=TODAY)
    broken.calving_date = "31/12/2023"
    result = status.derive(cow, [broken], today=TODAY)
    assert result.label is StatusLabel.OPEN
    assert result.days_since_calving is None
    assert "Unreadable calving date" in caplog.text


def test_corrupt_older_calving_does_not_hide_recent_one(caplog):
    cow = make_cow()
    broken = Calving.create(user_id=USER, animal_id=cow.id, calving_date=TODAY)
    broken.calving_date = "2023-02-31"
    result = status.derive(cow, [calved(cow, 10), broken], today=TODAY)
    assert result.label is StatusLabel.FRESH
    assert result.days_since_calving == 10
    assert "Unreadable calving date" in caplog.text


def test_custom_windows_are_honoured():
    constants = ReproductionConstants(fresh_window_days=30, heat_detection_window_days=200)
    cow = make_cow()
    assert status.derive(cow, [calved(cow, 31)], today=TODAY, constants=constants).label is (
        StatusLabel.HEAT_DETECTION_DUE
    )
    assert status.derive(cow, [calved(cow, 201)], today=TODAY, constants=constants).label is (
        StatusLabel.OPEN
    )


def test_derive_herd_isolates_failures():
    good = make_cow(ear_tag="A-1")
    bad = make_cow(ear_tag="A-2")
    bad.reproductive_override = "Bogus"
    results = status.derive_herd([good, bad], [calved(good, 10)], today=TODAY)

    assert [r.subject_id for r in results] == [good.id, bad.id]
    assert results[0].ok and results[0].value.label is StatusLabel.FRESH
    assert not results[1].ok
    assert results[1].error.code == "validation_error"


def test_describe_cycle_phases():
    cow = make_cow()
    record = BreedingRecord.create(
        user_id=USER, animal_id=cow.id, breeding_date=TODAY - timedelta(days=20), method="AI"
    )
    assert status.describe_cycle(cow, [record], today=TODAY) is CyclePhase.BRED_UNCONFIRMED

    record.breeding_date = TODAY - timedelta(days=55)
    assert status.describe_cycle(cow, [record], today=TODAY) is CyclePhase.PD_DUE

    record.confirm_pregnancy(TODAY)
    assert status.describe_cycle(cow, [record], today=TODAY) is CyclePhase.PREGNANT

    calving = Calving.create(
        user_id=USER, animal_id=cow.id, calving_date=TODAY, breeding_record_id=record.id
    )
    assert status.describe_cycle(cow, [record], [calving], today=TODAY) is CyclePhase.NONE


def test_describe_cycle_legacy_empty_result():
    cow = make_cow()
    record = BreedingRecord.create(
        user_id=USER, animal_id=cow.id, breeding_date=TODAY - timedelta(days=60), method="AI"
    )
    record.pd_result = "Empty"
    assert record.pd is PdResult.NOT_PREGNANT
    assert status.describe_cycle(cow, [record], today=TODAY) is CyclePhase.NOT_PREGNANT


def test_describe_cycle_skips_unreadable_records():
    cow = make_cow()
    record = BreedingRecord.create(
        user_id=USER, animal_id=cow.id, breeding_date=TODAY, method="AI"
    )
    record.breeding_date = "soon"
    assert status.describe_cycle(cow, [record], today=TODAY) is CyclePhase.NONE
    with pytest.raises(InvalidDate):
        compute_due_dates(record)


def test_describe_cycle_unknown_pd_result_is_a_validation_error():
    cow = make_cow()
    record = BreedingRecord.create(
        user_id=USER, animal_id=cow.id, breeding_date=TODAY - timedelta(days=60), method="AI"
    )
    record.pd_result = "Maybe"
    with pytest.raises(ValidationError) as exc_info:
        status.describe_cycle(cow, [record], today=TODAY)
    assert exc_info.value.details["pd_result"] == "Maybe"
