"""SQLAlchemy models (2.x style) for the journal catalog."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Journal(Base):
    """Journal reference data. Written at seed time, read-only afterwards."""
    __tablename__ = "journals"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)  # seed order
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    abbreviation: Mapped[str | None] = mapped_column(String(100))
    publisher: Mapped[str | None] = mapped_column(String(255))
    impact_factor: Mapped[float | None] = mapped_column(Float)
    scope: Mapped[str] = mapped_column(Text, nullable=False)
    subjects: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    open_access: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    review_time: Mapped[str | None] = mapped_column(String(100))
    acceptance_rate: Mapped[float | None] = mapped_column(Float)
    website: Mapped[str | None] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
