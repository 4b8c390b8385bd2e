from __future__ import annotations

import logging
from typing import Iterable

from src.application.events.models import BreedingCycleChangedEvent
from src.application.reproduction.constants import ReproductionConstants
from src.infrastructure.scheduler.reproduction_tasks import reconcile_user

logger = logging.getLogger(__name__)


async def dispatch_events(
    session_factory,
    events: Iterable[object],
    *,
    constants: ReproductionConstants,
    lookahead_days: int,
) -> None:
    """
    Dispatch events post-commit: every user touched by a breeding-cycle change gets
    one reconciliation pass. Safe to call in a background task.
    """
    users = []
    for event in events:
        if isinstance(event, BreedingCycleChangedEvent) and event.user_id not in users:
            users.append(event.user_id)

    for user_id in users:
        try:
            await reconcile_user(
                session_factory,
                user_id,
                constants=constants,
                lookahead_days=lookahead_days,
            )
        except Exception as e:
            logger.error("Error reconciling user %s after record change: %s", user_id, e, exc_info=True)
