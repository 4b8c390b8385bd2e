from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable
from uuid import UUID

from src.application.errors import AmbiguousState, AppError, ValidationError
from src.application.notifications.factory import build_notification
from src.application.notifications.types import NotificationType
from src.application.reproduction.constants import DEFAULT_CONSTANTS, ReproductionConstants
from src.application.reproduction.due_dates import (
    DueDates,
    compute_due_dates,
    find_terminating_calving,
)
from src.application.reproduction.results import Issue
from src.domain.models.animal import Animal
from src.domain.models.breeding_record import BreedingRecord
from src.domain.models.calving import Calving
from src.domain.models.notification import Notification, NotificationUpsert, build_dedup_key
from src.utils.dates import add_days, days_between, is_within, to_day

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReconciliationPlan:
    upserts: list[NotificationUpsert] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)

    @property
    def reopen_record_ids(self) -> list[UUID]:
        return [
            UUID(u.metadata["breeding_record_id"])
            for u in self.upserts
            if u.type == NotificationType.REOPEN_BREEDING
        ]


def _active_cycles(
    records: list[BreedingRecord],
    calvings: list[Calving],
    constants: ReproductionConstants,
    issues: list[Issue],
) -> list[tuple[BreedingRecord, DueDates]]:
    """Records whose cycle is still running, with their due dates."""
    active: list[tuple[BreedingRecord, DueDates]] = []
    for record in records:
        try:
            if record.is_negative:
                continue
            if find_terminating_calving(record, calvings) is not None:
                continue
            due = compute_due_dates(record, constants)
        except AppError as exc:
            logger.warning("Skipping breeding record %s: %s", record.id, exc.message)
            issues.append(Issue.from_error(record.id, exc))
            continue
        except ValueError:
            error = ValidationError(f"Unknown PD result {record.pd_result!r}")
            logger.warning("Skipping breeding record %s: %s", record.id, error.message)
            issues.append(Issue.from_error(record.id, error))
            continue
        if due is not None:
            active.append((record, due))
    return active


def _ambiguous_animals(
    active: list[tuple[BreedingRecord, DueDates]], issues: list[Issue]
) -> set[UUID]:
    open_counts = Counter(record.animal_id for record, _ in active if record.is_unchecked)
    ambiguous = {animal_id for animal_id, count in open_counts.items() if count > 1}
    for animal_id in sorted(ambiguous, key=str):
        error = AmbiguousState(
            f"{open_counts[animal_id]} open breeding records for one animal; "
            "PD and reopen reminders withheld until resolved",
            details={"animal_id": str(animal_id)},
        )
        logger.warning("Animal %s: %s", animal_id, error.message)
        issues.append(Issue.from_error(animal_id, error))
    return ambiguous


def _desired(
    user_id: UUID,
    ntype: str,
    record: BreedingRecord,
    scheduled_for: date,
    animal: Animal | None,
    **extra,
) -> NotificationUpsert:
    built = build_notification(
        ntype,
        breeding_record_id=record.id,
        animal_id=record.animal_id,
        tag=animal.ear_tag if animal else None,
        name=animal.name if animal else None,
        breeding_date=to_day(record.breeding_date),
        due_date=scheduled_for,
        **extra,
    )
    return NotificationUpsert(
        dedup_key=build_dedup_key(ntype, record.id, scheduled_for),
        user_id=user_id,
        animal_id=record.animal_id,
        type=built.type,
        scheduled_for=scheduled_for,
        title=built.title,
        body=built.body,
        metadata=built.metadata,
    )


def plan_reconciliation(
    user_id: UUID,
    breeding_records: Iterable[BreedingRecord],
    calvings: Iterable[Calving],
    existing_notifications: Iterable[Notification],
    lookahead_days: int,
    *,
    animals: Iterable[Animal] = (),
    today: date | None = None,
    constants: ReproductionConstants = DEFAULT_CONSTANTS,
) -> ReconciliationPlan:
    """Compute the notification upserts that bring one user's store in sync.

    Only records owned by `user_id` are considered. A desired notification is
    emitted when its dedup key is unknown, or when the stored row is still
    unread and its content drifted. Read rows are never touched and nothing is
    ever deleted: closed cycles simply stop producing candidates.
    """
    today = today or date.today()
    horizon = add_days(today, lookahead_days)
    records = [r for r in breeding_records if r.user_id == user_id]
    own_calvings = [c for c in calvings if c.user_id == user_id]
    herd = {a.id: a for a in animals if a.user_id == user_id}
    stored = {n.dedup_key: n for n in existing_notifications if n.user_id == user_id}

    issues: list[Issue] = []
    active = _active_cycles(records, own_calvings, constants, issues)
    ambiguous = _ambiguous_animals(active, issues)

    desired: list[NotificationUpsert] = []
    for record, due in active:
        animal = herd.get(record.animal_id)
        unchecked = record.is_unchecked and record.animal_id not in ambiguous
        if unchecked and is_within(due.pregnancy_check_due, today, horizon):
            desired.append(
                _desired(user_id, NotificationType.PD_CHECK, record, due.pregnancy_check_due, animal)
            )
        if record.is_pregnant and is_within(due.expected_calving_due, today, horizon):
            desired.append(
                _desired(
                    user_id,
                    NotificationType.EXPECTED_CALVING,
                    record,
                    due.expected_calving_due,
                    animal,
                )
            )
        overdue = days_between(today, due.expected_calving_due)
        if (unchecked or record.is_pregnant) and overdue > constants.calving_grace_days:
            desired.append(
                _desired(
                    user_id,
                    NotificationType.REOPEN_BREEDING,
                    record,
                    add_days(due.expected_calving_due, constants.calving_grace_days + 1),
                    animal,
                    expected_calving_date=due.expected_calving_due,
                    grace_days=constants.calving_grace_days,
                )
            )

    upserts: list[NotificationUpsert] = []
    for candidate in desired:
        current = stored.get(candidate.dedup_key)
        if current is None or (not current.read and current.differs_from(candidate)):
            upserts.append(candidate)
    upserts.sort(key=lambda u: (u.scheduled_for, u.dedup_key))
    return ReconciliationPlan(upserts=upserts, issues=issues)


def reconcile(
    user_id: UUID,
    breeding_records: Iterable[BreedingRecord],
    calvings: Iterable[Calving],
    existing_notifications: Iterable[Notification],
    lookahead_days: int,
    *,
    animals: Iterable[Animal] = (),
    today: date | None = None,
    constants: ReproductionConstants = DEFAULT_CONSTANTS,
) -> list[NotificationUpsert]:
    return plan_reconciliation(
        user_id,
        breeding_records,
        calvings,
        existing_notifications,
        lookahead_days,
        animals=animals,
        today=today,
        constants=constants,
    ).upserts
