from __future__ import annotations

from typing import Protocol

from src.application.interfaces.repositories.animals import AnimalRepository
from src.application.interfaces.repositories.breeding_records import BreedingRecordsRepository
from src.application.interfaces.repositories.calvings import CalvingsRepository
from src.application.interfaces.repositories.notifications import NotificationsRepository


class UnitOfWork(Protocol):
    animals: AnimalRepository
    breeding_records: BreedingRecordsRepository
    calvings: CalvingsRepository
    notifications: NotificationsRepository
    # Domain events collected during the transaction
    events: list

    async def __aenter__(self) -> UnitOfWork: ...

    async def __aexit__(self, exc_type, exc, tb) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    # Record a domain event during the transaction
    def add_event(self, event: object) -> None: ...

    # Drain collected events (used for post-commit dispatch)
    def drain_events(self) -> list: ...
