from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar
from uuid import UUID

from src.application.errors import AppError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ItemResult(Generic[T]):
    """Outcome for one item of a batch: either a value or the error that stopped it."""

    subject_id: UUID
    value: T | None = None
    error: AppError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, subject_id: UUID, value: T) -> ItemResult[T]:
        return cls(subject_id=subject_id, value=value)

    @classmethod
    def failure(cls, subject_id: UUID, error: AppError) -> ItemResult[T]:
        return cls(subject_id=subject_id, error=error)


@dataclass(frozen=True, slots=True)
class Issue:
    """Data-quality warning raised while processing one record."""

    subject_id: UUID
    code: str
    message: str

    @classmethod
    def from_error(cls, subject_id: UUID, error: AppError) -> Issue:
        return cls(subject_id=subject_id, code=error.code, message=error.message)
