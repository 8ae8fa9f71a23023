import threading
from typing import Sequence

from sqlalchemy import update
from sqlalchemy.orm import sessionmaker

from ..database import build_engine
from ..models.offline_event import OfflineBase, OfflineEvent
from ..schemas.event import PendingEvent, QualitativeEvent


class InMemoryEventQueue:
    """Process-local queue; a lock serializes writers."""

    def __init__(self):
        self._items: list[PendingEvent] = []
        self._lock = threading.Lock()

    def append(self, event: QualitativeEvent) -> None:
        if not event.id:
            raise ValueError("Queued events need a local id.")
        with self._lock:
            self._items.append(PendingEvent(event=event))

    def drain_pending(self) -> list[PendingEvent]:
        with self._lock:
            return [item.model_copy() for item in self._items]

    def remove(self, event_ids: Sequence[str]) -> int:
        wanted = set(event_ids)
        with self._lock:
            before = len(self._items)
            self._items = [item for item in self._items if item.event.id not in wanted]
            return before - len(self._items)

    def record_failure(self, event_ids: Sequence[str]) -> None:
        wanted = set(event_ids)
        with self._lock:
            self._items = [
                item.model_copy(update={"attempts": item.attempts + 1}) if item.event.id in wanted else item
                for item in self._items
            ]


class SqlEventQueue:
    """Queue persisted in a client-local database, one transaction per call."""

    def __init__(self, url: str | None = None, session_factory: sessionmaker | None = None):
        if session_factory is None:
            if url is None:
                raise ValueError("Either url or session_factory is required.")
            engine = build_engine(url)
            OfflineBase.metadata.create_all(bind=engine)
            session_factory = sessionmaker(bind=engine, autoflush=False, autocommit=False)
        self.session_factory = session_factory

    def append(self, event: QualitativeEvent) -> None:
        if not event.id:
            raise ValueError("Queued events need a local id.")
        with self.session_factory.begin() as db:
            db.add(
                OfflineEvent(
                    local_id=event.id,
                    athlete_id=event.athlete_id,
                    training_id=event.training_id,
                    fundamento=event.fundamento,
                    event_type=event.event_type,
                    weight=event.weight,
                    timestamp=event.timestamp,
                    notes=event.notes,
                )
            )

    def drain_pending(self) -> list[PendingEvent]:
        with self.session_factory() as db:
            rows = db.query(OfflineEvent).order_by(OfflineEvent.seq).all()
            return [
                PendingEvent(
                    event=QualitativeEvent(
                        id=row.local_id,
                        athlete_id=row.athlete_id,
                        training_id=row.training_id,
                        fundamento=row.fundamento,
                        event_type=row.event_type,
                        weight=row.weight,
                        timestamp=row.timestamp,
                        notes=row.notes,
                    ),
                    attempts=row.attempts,
                )
                for row in rows
            ]

    def remove(self, event_ids: Sequence[str]) -> int:
        if not event_ids:
            return 0
        with self.session_factory.begin() as db:
            return (
                db.query(OfflineEvent)
                .filter(OfflineEvent.local_id.in_(list(event_ids)))
                .delete(synchronize_session=False)
            )

    def record_failure(self, event_ids: Sequence[str]) -> None:
        if not event_ids:
            return
        with self.session_factory.begin() as db:
            db.execute(
                update(OfflineEvent)
                .where(OfflineEvent.local_id.in_(list(event_ids)))
                .values(attempts=OfflineEvent.attempts + 1)
            )
