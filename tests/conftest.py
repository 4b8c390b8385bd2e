from __future__ import annotations

import os
import sys
from collections.abc import AsyncIterator
from datetime import date
from pathlib import Path
from uuid import UUID, uuid4

import pytest
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///default.db")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

# ruff: noqa: E402
from src.config.settings import Settings
from src.infrastructure.db.base import Base
from src.infrastructure.db.orm import animal, breeding_record, calving, notification  # noqa: F401
from src.infrastructure.db.orm.animal import AnimalORM
from src.infrastructure.db.orm.breeding_record import BreedingRecordORM
from src.infrastructure.db.orm.calving import CalvingORM
from src.interfaces.http.main import create_app


@pytest.fixture()
def user_id() -> UUID:
    return uuid4()


@pytest.fixture()
def auth_headers(user_id: UUID) -> dict[str, str]:
    return {"X-User-ID": str(user_id)}


@pytest.fixture()
def test_settings(tmp_path) -> Settings:
    db_path = tmp_path / "test.db"
    return Settings.model_validate(
        {
            "database_url": f"sqlite+aiosqlite:///{db_path}",
            "log_level": "INFO",
            "environment": "test",
            "scheduler_enabled": False,
        }
    )


@pytest.fixture()
def app(test_settings: Settings):
    return create_app(settings=test_settings)


@pytest.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        engine = app.state.engine
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        yield client
        await engine.dispose()


@pytest.fixture()
def seed(app):
    """Insert rows directly, bypassing the API (there is no animal endpoint)."""

    class Seeder:
        async def animal(self, user_id: UUID, ear_tag: str, *, sex: str = "Female", **kw) -> UUID:
            animal_id = uuid4()
            async with app.state.session_factory() as session:
                session.add(
                    AnimalORM(
                        id=animal_id,
                        user_id=user_id,
                        ear_tag=ear_tag,
                        sex=sex,
                        lifecycle_status=kw.pop("lifecycle_status", "Active"),
                        reproductive_override=kw.pop("reproductive_override", "None"),
                        version=1,
                        **kw,
                    )
                )
                await session.commit()
            return animal_id

        async def breeding(
            self,
            user_id: UUID,
            animal_id: UUID,
            breeding_date: date,
            *,
            pd_result: str = "Unchecked",
            confirmed_pregnant: bool = False,
        ) -> UUID:
            record_id = uuid4()
            async with app.state.session_factory() as session:
                session.add(
                    BreedingRecordORM(
                        id=record_id,
                        user_id=user_id,
                        animal_id=animal_id,
                        breeding_date=breeding_date,
                        method="AI",
                        pd_result=pd_result,
                        confirmed_pregnant=confirmed_pregnant,
                        version=1,
                    )
                )
                await session.commit()
            return record_id

        async def calving(
            self,
            user_id: UUID,
            animal_id: UUID,
            calving_date: date,
            *,
            breeding_record_id: UUID | None = None,
        ) -> UUID:
            calving_id = uuid4()
            async with app.state.session_factory() as session:
                session.add(
                    CalvingORM(
                        id=calving_id,
                        user_id=user_id,
                        animal_id=animal_id,
                        calving_date=calving_date,
                        breeding_record_id=breeding_record_id,
                        assistance_required=False,
                    )
                )
                await session.commit()
            return calving_id

    return Seeder()
