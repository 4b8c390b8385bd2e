from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BreedingRecordCreate(BaseModel):
    animal_id: UUID
    breeding_date: date
    method: str  # Natural, AI
    sire_id: UUID | None = None
    notes: str | None = None


class PregnancyCheckInput(BaseModel):
    result: str  # Pregnant, Not Pregnant
    check_date: date


class CalvingCreate(BaseModel):
    animal_id: UUID
    calving_date: date
    calf_ear_tag: str | None = Field(default=None, max_length=64)
    calf_sex: str | None = None  # Female, Male
    birth_weight: Decimal | None = None
    complications: str | None = None
    assistance_required: bool = False
    notes: str | None = None

    @field_validator("calf_ear_tag")
    def strip_tag(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class BreedingRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    animal_id: UUID
    breeding_date: date
    method: str
    sire_id: UUID | None = None
    pd_result: str
    pregnancy_check_date: date | None = None
    confirmed_pregnant: bool
    post_pd_treatment_due_date: date | None = None
    keep_in_breeding_until: date | None = None
    reopen_date: date | None = None
    notes: str | None = None
    version: int


class CalfResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    ear_tag: str
    sex: str
    birth_date: date | None = None
    dam_id: UUID | None = None
    sire_id: UUID | None = None


class CalvingResponse(BaseModel):
    id: UUID
    animal_id: UUID
    calving_date: date
    breeding_record_id: UUID | None = None
    calf: CalfResponse | None = None


class DueDatesResponse(BaseModel):
    breeding_record_id: UUID
    pregnancy_check_due: date | None = None
    expected_calving_due: date | None = None
    heat_check_due: date | None = None
    # Set after a negative pregnancy check
    post_pd_treatment_due: date | None = None
    keep_in_breeding_until: date | None = None
    reopen_date: date | None = None


class ErrorEntry(BaseModel):
    code: str
    message: str


class AnimalStatusResponse(BaseModel):
    animal_id: UUID
    ear_tag: str
    name: str | None = None
    label: str | None = None
    category: str | None = None
    origin: str | None = None
    days_since_calving: int | None = None
    cycle_phase: str | None = None
    error: ErrorEntry | None = None


class HerdStatusResponse(BaseModel):
    items: list[AnimalStatusResponse]
    total: int
    errors: int


class UpsertEntry(BaseModel):
    dedup_key: str
    type: str
    animal_id: UUID | None = None
    scheduled_for: date
    title: str


class IssueEntry(BaseModel):
    subject_id: UUID
    code: str
    message: str


class ReconcileResponse(BaseModel):
    upserts: list[UpsertEntry]
    written: int
    flagged_records: list[UUID]
    issues: list[IssueEntry]
