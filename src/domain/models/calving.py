from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4


@dataclass(slots=True)
class Calving:
    id: UUID
    user_id: UUID
    animal_id: UUID
    calving_date: date | datetime | str
    breeding_record_id: UUID | None = None
    calf_ear_tag: str | None = None
    calf_sex: str | None = None
    birth_weight: Decimal | None = None
    complications: str | None = None
    assistance_required: bool = False
    calf_id: UUID | None = None
    notes: str | None = None

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(
        cls,
        user_id: UUID,
        animal_id: UUID,
        calving_date: date,
        breeding_record_id: UUID | None = None,
        calf_ear_tag: str | None = None,
        calf_sex: str | None = None,
        birth_weight: Decimal | None = None,
        complications: str | None = None,
        assistance_required: bool = False,
        notes: str | None = None,
    ) -> Calving:
        return cls(
            id=uuid4(),
            user_id=user_id,
            animal_id=animal_id,
            calving_date=calving_date,
            breeding_record_id=breeding_record_id,
            calf_ear_tag=(calf_ear_tag or "").strip() or None,
            calf_sex=calf_sex,
            birth_weight=birth_weight,
            complications=complications,
            assistance_required=assistance_required,
            notes=notes,
            created_at=datetime.now(timezone.utc),
        )
