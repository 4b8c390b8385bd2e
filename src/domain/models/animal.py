from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from uuid import UUID, uuid4

from src.domain.value_objects.animal_status import AnimalLifecycle, Sex
from src.domain.value_objects.reproductive_status import ManualOverride


@dataclass(slots=True)
class Animal:
    id: UUID
    user_id: UUID
    ear_tag: str
    sex: str
    name: str | None = None
    birth_date: date | None = None
    lifecycle_status: str = AnimalLifecycle.ACTIVE.value
    reproductive_override: ManualOverride = ManualOverride.NONE

    # Genealogy
    dam_id: UUID | None = None
    sire_id: UUID | None = None

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 1

    @classmethod
    def create(
        cls,
        user_id: UUID,
        ear_tag: str,
        sex: str,
        name: str | None = None,
        birth_date: date | None = None,
        dam_id: UUID | None = None,
        sire_id: UUID | None = None,
    ) -> Animal:
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid4(),
            user_id=user_id,
            ear_tag=ear_tag,
            sex=sex,
            name=name,
            birth_date=birth_date,
            dam_id=dam_id,
            sire_id=sire_id,
            created_at=now,
            updated_at=now,
            version=1,
        )

    @property
    def is_female(self) -> bool:
        return self.sex == Sex.FEMALE.value

    @property
    def is_active(self) -> bool:
        return self.lifecycle_status == AnimalLifecycle.ACTIVE.value

    def set_override(self, override: ManualOverride | str | None) -> None:
        self.reproductive_override = ManualOverride.parse(override)
        self.bump_version()

    def mark_inactive(self, status: AnimalLifecycle) -> None:
        if status is AnimalLifecycle.ACTIVE:
            raise ValueError("mark_inactive expects Sold or Deceased")
        self.lifecycle_status = status.value
        self.bump_version()

    def bump_version(self) -> None:
        self.version += 1
        self.updated_at = datetime.now(timezone.utc)
