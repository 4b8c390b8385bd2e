from __future__ import annotations

import asyncio
import logging
import weakref
from datetime import date
from uuid import UUID

from src.application.reproduction.constants import ReproductionConstants
from src.application.use_cases.reproduction import reconcile_notifications
from src.application.use_cases.reproduction.reconcile_notifications import ReconciliationReport
from src.infrastructure.db.session import SQLAlchemyUnitOfWork

logger = logging.getLogger(__name__)

# One lock per user: the periodic job and on-write hooks never overlap for the same herd.
# Entries disappear once no pass holds the lock.
_user_locks: weakref.WeakValueDictionary[UUID, asyncio.Lock] = weakref.WeakValueDictionary()


def _lock_for(user_id: UUID) -> asyncio.Lock:
    lock = _user_locks.get(user_id)
    if lock is None:
        lock = asyncio.Lock()
        _user_locks[user_id] = lock
    return lock


async def reconcile_user(
    session_factory,
    user_id: UUID,
    *,
    constants: ReproductionConstants,
    lookahead_days: int,
    today: date | None = None,
) -> ReconciliationReport:
    async with _lock_for(user_id):
        uow = SQLAlchemyUnitOfWork(session_factory)
        async with uow:
            report = await reconcile_notifications.execute(
                uow,
                user_id,
                constants=constants,
                lookahead_days=lookahead_days,
                today=today,
            )
            await uow.commit()
        return report


async def reconcile_all_users(
    session_factory,
    *,
    constants: ReproductionConstants,
    lookahead_days: int,
    today: date | None = None,
) -> list[ReconciliationReport]:
    """Run one pass per user owning breeding records; a failing user does not stop the rest."""
    uow = SQLAlchemyUnitOfWork(session_factory)
    async with uow:
        user_ids = await uow.breeding_records.list_user_ids()

    reports: list[ReconciliationReport] = []
    for user_id in user_ids:
        try:
            reports.append(
                await reconcile_user(
                    session_factory,
                    user_id,
                    constants=constants,
                    lookahead_days=lookahead_days,
                    today=today,
                )
            )
        except Exception as exc:
            logger.error("Reconciliation failed for user %s: %s", user_id, exc, exc_info=True)

    logger.info(
        "Reconciliation pass: %d users, %d notifications written",
        len(reports),
        sum(r.written for r in reports),
    )
    return reports


async def run_periodic(
    session_factory,
    *,
    constants: ReproductionConstants,
    lookahead_days: int,
    interval_minutes: int,
) -> None:
    logger.info("Reproduction scheduler started (every %d min)", interval_minutes)
    while True:
        try:
            await reconcile_all_users(
                session_factory, constants=constants, lookahead_days=lookahead_days
            )
        except Exception as exc:
            logger.error("Periodic reconciliation failed: %s", exc, exc_info=True)
        await asyncio.sleep(interval_minutes * 60)
