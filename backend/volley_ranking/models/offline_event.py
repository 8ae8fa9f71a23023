from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class OfflineBase(DeclarativeBase):
    """Declarative base for the client-local offline queue database."""


class OfflineEvent(OfflineBase):
    __tablename__ = "offline_events"

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    local_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    athlete_id: Mapped[int] = mapped_column(Integer, nullable=False)
    training_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    fundamento: Mapped[str] = mapped_column(String(40), nullable=False)
    event_type: Mapped[str] = mapped_column(String(60), nullable=False)
    weight: Mapped[float] = mapped_column(Float, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
