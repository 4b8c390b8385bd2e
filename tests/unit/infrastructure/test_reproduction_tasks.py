from __future__ import annotations

import asyncio
import gc
import logging
from types import SimpleNamespace
from uuid import uuid4

import pytest

from src.application.reproduction.constants import DEFAULT_CONSTANTS
from src.infrastructure.scheduler import reproduction_tasks


class FakeUnitOfWork:
    user_ids: list = []

    def __init__(self, session_factory) -> None:
        self.breeding_records = SimpleNamespace(list_user_ids=self._list_user_ids)

    async def _list_user_ids(self):
        return list(self.user_ids)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None


def test_user_lock_is_shared_while_held_then_dropped():
    user = uuid4()
    lock = reproduction_tasks._lock_for(user)
    shared = reproduction_tasks._lock_for(user) is lock
    distinct = reproduction_tasks._lock_for(uuid4()) is not lock
    assert shared and distinct

    del lock
    gc.collect()
    assert user not in reproduction_tasks._user_locks


@pytest.mark.asyncio
async def test_failing_user_does_not_stop_the_pass(monkeypatch, caplog):
    good_a, broken, good_b = uuid4(), uuid4(), uuid4()
    monkeypatch.setattr(FakeUnitOfWork, "user_ids", [good_a, broken, good_b])
    monkeypatch.setattr(reproduction_tasks, "SQLAlchemyUnitOfWork", FakeUnitOfWork)
    seen: list = []

    async def fake_reconcile_user(session_factory, user_id, **kw):
        seen.append(user_id)
        if user_id == broken:
            raise RuntimeError("database went away")
        return SimpleNamespace(user_id=user_id, written=2)

    monkeypatch.setattr(reproduction_tasks, "reconcile_user", fake_reconcile_user)

    with caplog.at_level(logging.INFO, logger=reproduction_tasks.__name__):
        reports = await reproduction_tasks.reconcile_all_users(
            object(), constants=DEFAULT_CONSTANTS, lookahead_days=7
        )

    assert seen == [good_a, broken, good_b]
    assert [r.user_id for r in reports] == [good_a, good_b]
    assert f"Reconciliation failed for user {broken}" in caplog.text
    assert "2 users, 4 notifications written" in caplog.text


@pytest.mark.asyncio
async def test_periodic_loop_survives_a_failed_pass(monkeypatch, caplog):
    passes: list = []
    sleeps: list = []

    async def fake_reconcile_all_users(session_factory, **kw):
        passes.append(kw)
        if len(passes) == 1:
            raise RuntimeError("boom")
        return []

    async def fake_sleep(seconds):
        sleeps.append(seconds)
        if len(sleeps) == 2:
            raise asyncio.CancelledError

    monkeypatch.setattr(reproduction_tasks, "reconcile_all_users", fake_reconcile_all_users)
    monkeypatch.setattr(reproduction_tasks.asyncio, "sleep", fake_sleep)

    with pytest.raises(asyncio.CancelledError):
        await reproduction_tasks.run_periodic(
            object(), constants=DEFAULT_CONSTANTS, lookahead_days=7, interval_minutes=5
        )

    assert len(passes) == 2
    assert passes[0]["lookahead_days"] == 7
    assert sleeps == [300, 300]
    assert "Periodic reconciliation failed: boom" in caplog.text
