from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base


class ExecutionRecord(Base):
    """One hit/miss count captured for an athlete during a training."""

    __tablename__ = "execution_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    athlete_id: Mapped[int] = mapped_column(ForeignKey("athletes.id", ondelete="CASCADE"), index=True)
    training_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    fundamento: Mapped[str] = mapped_column(String(40), index=True, nullable=False)
    hits: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    misses: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)


class QualitativeEventRecord(Base):
    __tablename__ = "qualitative_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    athlete_id: Mapped[int] = mapped_column(ForeignKey("athletes.id", ondelete="CASCADE"), index=True)
    training_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    fundamento: Mapped[str] = mapped_column(String(40), index=True, nullable=False)
    event_type: Mapped[str] = mapped_column(String(60), nullable=False)
    weight: Mapped[float] = mapped_column(Float, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
