from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from uuid import UUID

from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.notifications.types import ALL_TYPES
from src.application.reproduction.constants import ReproductionConstants
from src.application.reproduction.reconciler import plan_reconciliation
from src.application.reproduction.results import Issue
from src.domain.models.notification import NotificationUpsert

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ReconciliationReport:
    user_id: UUID
    upserts: list[NotificationUpsert] = field(default_factory=list)
    written: int = 0
    flagged_records: list[UUID] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)


async def execute(
    uow: UnitOfWork,
    user_id: UUID,
    *,
    constants: ReproductionConstants,
    lookahead_days: int,
    today: date | None = None,
) -> ReconciliationReport:
    """One reconciliation pass for a single user's herd.

    Reads are scoped to `user_id`; writes go through the store's atomic upsert,
    so replaying the same pass is harmless. The caller commits.
    """
    animals = await uow.animals.list(user_id)
    records = await uow.breeding_records.list(user_id)
    calvings = await uow.calvings.list(user_id)
    existing = await uow.notifications.list_by_types(user_id, ALL_TYPES)

    plan = plan_reconciliation(
        user_id,
        records,
        calvings,
        existing,
        lookahead_days,
        animals=animals,
        today=today,
        constants=constants,
    )

    report = ReconciliationReport(user_id=user_id, upserts=plan.upserts, issues=plan.issues)
    for upsert in plan.upserts:
        if await uow.notifications.upsert(upsert):
            report.written += 1

    flagged_at = datetime.now(timezone.utc)
    for record_id in plan.reopen_record_ids:
        if await uow.breeding_records.flag_reopen(user_id, record_id, flagged_at):
            report.flagged_records.append(record_id)

    logger.info(
        "Reconciled user %s: %d upserts (%d written), %d flagged, %d issues",
        user_id,
        len(plan.upserts),
        report.written,
        len(report.flagged_records),
        len(plan.issues),
    )
    return report
