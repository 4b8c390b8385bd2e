from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    false,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.db.base import Base


class BreedingRecordORM(Base):
    __tablename__ = "breeding_records"
    __table_args__ = (
        Index(
            "ix_breeding_records_user_animal_date",
            "user_id",
            "animal_id",
            "breeding_date",
        ),
        Index(
            "ix_breeding_records_unchecked",
            "user_id",
            "pd_result",
            "breeding_date",
            postgresql_where="pd_result = 'Unchecked'",
        ),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    user_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    animal_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("animals.id"),
        nullable=False,
    )
    sire_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("animals.id"),
        nullable=True,
    )
    breeding_date: Mapped[date] = mapped_column(Date, nullable=False)
    method: Mapped[str] = mapped_column(String(16), nullable=False)
    pd_result: Mapped[str] = mapped_column(String(16), server_default="Unchecked", nullable=False)
    pregnancy_check_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    confirmed_pregnant: Mapped[bool] = mapped_column(
        Boolean, server_default=false(), nullable=False
    )
    post_pd_treatment_due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    keep_in_breeding_until: Mapped[date | None] = mapped_column(Date, nullable=True)
    reopen_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    reopen_flagged_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
