from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    Uuid,
    false,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.db.base import Base


class CalvingORM(Base):
    __tablename__ = "calvings"
    __table_args__ = (
        Index("ix_calvings_user_animal_date", "user_id", "animal_id", "calving_date"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    user_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    animal_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("animals.id"), nullable=False
    )
    breeding_record_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("breeding_records.id"), nullable=True
    )
    calving_date: Mapped[date] = mapped_column(Date, nullable=False)
    calf_ear_tag: Mapped[str | None] = mapped_column(String(128), nullable=True)
    calf_sex: Mapped[str | None] = mapped_column(String(8), nullable=True)
    calf_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("animals.id"), nullable=True
    )
    birth_weight: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)
    complications: Mapped[str | None] = mapped_column(Text, nullable=True)
    assistance_required: Mapped[bool] = mapped_column(
        Boolean, server_default=false(), nullable=False
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
