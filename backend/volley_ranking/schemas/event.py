from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..core.enums import SyncState


class QualitativeEventCreate(BaseModel):
    athlete_id: int
    training_id: Optional[int] = None
    fundamento: str
    event_type: str
    timestamp: Optional[datetime] = None
    notes: Optional[str] = None


class QualitativeEvent(BaseModel):
    id: Optional[str] = None
    athlete_id: int
    training_id: Optional[int] = None
    fundamento: str
    event_type: str
    weight: float
    timestamp: datetime
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class EventFilters(BaseModel):
    athlete_id: Optional[int] = None
    training_id: Optional[int] = None
    fundamento: Optional[str] = None
    event_type: Optional[str] = None
    date_start: Optional[date] = None
    date_end: Optional[date] = None


class RecordedEvent(BaseModel):
    event: QualitativeEvent
    state: SyncState


class PendingEvent(BaseModel):
    event: QualitativeEvent
    attempts: int = 0
    state: SyncState = SyncState.PENDING_SYNC


class ReconciliationReport(BaseModel):
    synced_count: int
    failed_ids: list[str] = Field(default_factory=list)


class EventStatistics(BaseModel):
    total_events: int
    total_score: float
    mean_by_fundamento: dict[str, float]
    positive_events: int
    negative_events: int
