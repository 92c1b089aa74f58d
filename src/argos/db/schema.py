# src/argos/db/schema.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Inference(Base):
    """
    One row per monitoring run on a machine.

    Timestamps are ISO-8601 strings kept exactly as the caller sent them.
    """
    __tablename__ = "inferences"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    machine_id: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False)  # running/completed
    started_at: Mapped[str] = mapped_column(String, nullable=False)
    ended_at: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    species: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    batch_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    operator_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    target_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    target_biomass_kg: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    end_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    final_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    final_biomass_kg: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    created_at: Mapped[str] = mapped_column(String, nullable=False)
    updated_at: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        Index("idx_inferences_machine", "machine_id"),
        Index("idx_inferences_started", "started_at"),
    )


class Count(Base):
    """
    One fish-count / biomass measurement inside an inference.
    """
    __tablename__ = "counts"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    inference_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("inferences.id", ondelete="CASCADE"),
        nullable=False,
    )
    machine_id: Mapped[str] = mapped_column(String, nullable=False)
    counted_at: Mapped[str] = mapped_column(String, nullable=False)
    fish_count: Mapped[int] = mapped_column(Integer, nullable=False)
    biomass_kg: Mapped[float] = mapped_column(Float, nullable=False)

    avg_weight_g: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    confidence: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    frame_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        Index("idx_counts_inference", "inference_id"),
        Index("idx_counts_machine", "machine_id"),
    )


class DataRecord(Base):
    """
    Auxiliary generic record. The integer id doubles as the pagination cursor.
    """
    __tablename__ = "data_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[str] = mapped_column(String, nullable=False)

    # AUTOINCREMENT: ids are never reused, so a cursor never skips a new row.
    __table_args__ = (
        Index("idx_data_records_date", "date"),
        {"sqlite_autoincrement": True},
    )
