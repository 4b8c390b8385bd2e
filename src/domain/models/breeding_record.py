from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from uuid import UUID, uuid4


class BreedingMethod(str, Enum):
    NATURAL = "Natural"
    AI = "AI"


class PdResult(str, Enum):
    UNCHECKED = "Unchecked"
    PREGNANT = "Pregnant"
    NOT_PREGNANT = "Not Pregnant"

    @classmethod
    def _missing_(cls, value):
        # Older records store a negative diagnosis as "Empty"
        if value == "Empty":
            return cls.NOT_PREGNANT
        return None


@dataclass(slots=True)
class BreedingRecord:
    id: UUID
    user_id: UUID
    animal_id: UUID
    # Raw value as supplied by the record store; parsed through src.utils.dates
    breeding_date: date | datetime | str
    method: str = BreedingMethod.AI.value

    sire_id: UUID | None = None
    pd_result: str = PdResult.UNCHECKED.value
    pregnancy_check_date: date | None = None
    confirmed_pregnant: bool = False
    # Follow-up dates set by a negative pregnancy check
    post_pd_treatment_due_date: date | None = None
    keep_in_breeding_until: date | None = None
    reopen_date: date | None = None
    reopen_flagged_at: datetime | None = None
    notes: str | None = None

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 1

    @classmethod
    def create(
        cls,
        user_id: UUID,
        animal_id: UUID,
        breeding_date: date,
        method: str,
        sire_id: UUID | None = None,
        notes: str | None = None,
    ) -> BreedingRecord:
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid4(),
            user_id=user_id,
            animal_id=animal_id,
            breeding_date=breeding_date,
            method=method,
            sire_id=sire_id,
            notes=notes,
            created_at=now,
            updated_at=now,
            version=1,
        )

    @property
    def pd(self) -> PdResult:
        return PdResult(self.pd_result)

    @property
    def is_unchecked(self) -> bool:
        return self.pd is PdResult.UNCHECKED and not self.confirmed_pregnant

    @property
    def is_pregnant(self) -> bool:
        return self.confirmed_pregnant or self.pd is PdResult.PREGNANT

    @property
    def is_negative(self) -> bool:
        return self.pd is PdResult.NOT_PREGNANT

    def confirm_pregnancy(self, check_date: date) -> None:
        self.pd_result = PdResult.PREGNANT.value
        self.pregnancy_check_date = check_date
        self.confirmed_pregnant = True
        self.post_pd_treatment_due_date = None
        self.keep_in_breeding_until = None
        self.reopen_date = None
        self.bump_version()

    def mark_not_pregnant(self, check_date: date, *, treatment_days: int, reopen_days: int) -> None:
        """Record a negative PD and schedule the follow-up.

        Treatment is due and the cow stays in the breeding group until
        check_date + treatment_days; she is reopened at check_date + reopen_days.
        """
        self.pd_result = PdResult.NOT_PREGNANT.value
        self.pregnancy_check_date = check_date
        self.confirmed_pregnant = False
        self.post_pd_treatment_due_date = check_date + timedelta(days=treatment_days)
        self.keep_in_breeding_until = self.post_pd_treatment_due_date
        self.reopen_date = check_date + timedelta(days=reopen_days)
        self.bump_version()

    def bump_version(self) -> None:
        self.version += 1
        self.updated_at = datetime.now(timezone.utc)
