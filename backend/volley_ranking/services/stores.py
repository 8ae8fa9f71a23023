"""SQLAlchemy-backed collaborators: roster, execution tallies and events.

Queries run synchronously in a worker thread; every database failure is
surfaced as ``RemoteUnavailable`` so callers can fall back.
"""

import asyncio
import logging
from datetime import date, datetime, time
from typing import Callable, Optional, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..core.enums import Team
from ..core.errors import RemoteUnavailable
from ..models.athlete import Athlete as AthleteRow
from ..models.evaluation import ExecutionRecord, QualitativeEventRecord
from ..schemas.event import EventFilters, QualitativeEvent
from ..schemas.ranking import Athlete, ExecutionTally
from .skills import fundamento_aliases

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _SqlStore:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _run(self, work: Callable[[Session], T]) -> T:
        db = self.session_factory()
        try:
            return work(db)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Database operation failed: %s", exc)
            raise RemoteUnavailable(str(exc)) from exc
        finally:
            db.close()

    async def _call(self, work: Callable[[Session], T]) -> T:
        return await asyncio.to_thread(self._run, work)


class SqlRoster(_SqlStore):
    async def get(self, athlete_id: int) -> Optional[Athlete]:
        def work(db: Session) -> Optional[Athlete]:
            row = db.get(AthleteRow, athlete_id)
            return Athlete.model_validate(row) if row else None

        return await self._call(work)

    async def list_by_team(self, team: Team) -> list[Athlete]:
        def work(db: Session) -> list[Athlete]:
            rows = db.query(AthleteRow).filter(AthleteRow.team == team).order_by(AthleteRow.name).all()
            return [Athlete.model_validate(row) for row in rows]

        return await self._call(work)


class SqlExecutionTallyStore(_SqlStore):
    async def fetch_tallies(
        self,
        athlete_ids: list[int],
        date_start: Optional[date] = None,
        date_end: Optional[date] = None,
    ) -> list[ExecutionTally]:
        if not athlete_ids:
            return []

        def work(db: Session) -> list[ExecutionTally]:
            query = db.query(
                ExecutionRecord.athlete_id,
                ExecutionRecord.fundamento,
                func.coalesce(func.sum(ExecutionRecord.hits), 0),
                func.coalesce(func.sum(ExecutionRecord.misses), 0),
                func.max(ExecutionRecord.date),
            ).filter(ExecutionRecord.athlete_id.in_(athlete_ids))
            if date_start:
                query = query.filter(ExecutionRecord.date >= date_start)
            if date_end:
                query = query.filter(ExecutionRecord.date <= date_end)
            rows = query.group_by(ExecutionRecord.athlete_id, ExecutionRecord.fundamento).all()
            return [
                ExecutionTally(
                    athlete_id=athlete_id,
                    fundamento=fundamento,
                    hits=int(hits),
                    misses=int(misses),
                    last_date=last_date,
                )
                for athlete_id, fundamento, hits, misses, last_date in rows
            ]

        return await self._call(work)


def _to_event(row: QualitativeEventRecord) -> QualitativeEvent:
    return QualitativeEvent(
        id=str(row.id),
        athlete_id=row.athlete_id,
        training_id=row.training_id,
        fundamento=row.fundamento,
        event_type=row.event_type,
        weight=row.weight,
        timestamp=row.timestamp,
        notes=row.notes,
    )


class SqlEventStore(_SqlStore):
    async def insert(self, event: QualitativeEvent) -> QualitativeEvent:
        def work(db: Session) -> QualitativeEvent:
            row = QualitativeEventRecord(
                athlete_id=event.athlete_id,
                training_id=event.training_id,
                fundamento=event.fundamento,
                event_type=event.event_type,
                weight=event.weight,
                timestamp=event.timestamp,
                notes=event.notes,
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return _to_event(row)

        return await self._call(work)

    async def delete(self, event_id: str) -> bool:
        if not event_id.isdigit():
            return False

        def work(db: Session) -> bool:
            row = db.get(QualitativeEventRecord, int(event_id))
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True

        return await self._call(work)

    async def query(self, filters: EventFilters) -> list[QualitativeEvent]:
        def work(db: Session) -> list[QualitativeEvent]:
            query = db.query(QualitativeEventRecord)
            if filters.athlete_id is not None:
                query = query.filter(QualitativeEventRecord.athlete_id == filters.athlete_id)
            if filters.training_id is not None:
                query = query.filter(QualitativeEventRecord.training_id == filters.training_id)
            if filters.fundamento:
                query = query.filter(QualitativeEventRecord.fundamento.in_(fundamento_aliases(filters.fundamento)))
            if filters.event_type:
                query = query.filter(func.lower(QualitativeEventRecord.event_type) == filters.event_type.lower())
            if filters.date_start:
                query = query.filter(QualitativeEventRecord.timestamp >= datetime.combine(filters.date_start, time.min))
            if filters.date_end:
                query = query.filter(QualitativeEventRecord.timestamp <= datetime.combine(filters.date_end, time.max))
            rows = query.order_by(QualitativeEventRecord.timestamp.desc(), QualitativeEventRecord.id.desc()).all()
            return [_to_event(row) for row in rows]

        return await self._call(work)
