from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..dependencies import get_event_repository
from ..schemas.event import (
    EventFilters,
    EventStatistics,
    PendingEvent,
    QualitativeEvent,
    QualitativeEventCreate,
    ReconciliationReport,
    RecordedEvent,
)
from ..services.event_repository import EventRepository
from ..services.qualitative import event_statistics

router = APIRouter(prefix="/events", tags=["events"])


def _filters(
    athlete_id: int | None = Query(default=None),
    training_id: int | None = Query(default=None),
    fundamento: str | None = Query(default=None),
    event_type: str | None = Query(default=None),
    date_start: date | None = Query(default=None),
    date_end: date | None = Query(default=None),
) -> EventFilters:
    return EventFilters(
        athlete_id=athlete_id,
        training_id=training_id,
        fundamento=fundamento,
        event_type=event_type,
        date_start=date_start,
        date_end=date_end,
    )


@router.post("", response_model=RecordedEvent, status_code=status.HTTP_201_CREATED)
async def record_event(
    payload: QualitativeEventCreate,
    repository: EventRepository = Depends(get_event_repository),
) -> RecordedEvent:
    return await repository.record_event(payload)


@router.get("", response_model=list[QualitativeEvent])
async def list_events(
    filters: EventFilters = Depends(_filters),
    repository: EventRepository = Depends(get_event_repository),
) -> list[QualitativeEvent]:
    return await repository.list_events(filters)


@router.get("/stats", response_model=EventStatistics)
async def event_stats(
    filters: EventFilters = Depends(_filters),
    repository: EventRepository = Depends(get_event_repository),
) -> EventStatistics:
    return event_statistics(await repository.list_events(filters))


@router.get("/pending", response_model=list[PendingEvent])
def pending_events(
    repository: EventRepository = Depends(get_event_repository),
) -> list[PendingEvent]:
    return repository.pending_events()


@router.post("/sync", response_model=ReconciliationReport)
async def sync_events(
    repository: EventRepository = Depends(get_event_repository),
) -> ReconciliationReport:
    return await repository.reconcile()


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: str,
    repository: EventRepository = Depends(get_event_repository),
) -> None:
    if not await repository.delete_event(event_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found.")
