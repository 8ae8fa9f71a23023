"""Qualitative event persistence with an offline queue.

Per event: created -> PENDING_SYNC when the remote write fails -> removed
from the queue once reconciliation confirms it. Delivery is at-least-once;
the remote store may observe a duplicate when an acknowledgement is lost.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Protocol, Sequence

from ..core.enums import SyncState
from ..core.errors import RemoteUnavailable
from ..schemas.event import (
    EventFilters,
    PendingEvent,
    QualitativeEvent,
    QualitativeEventCreate,
    ReconciliationReport,
    RecordedEvent,
)
from .dates import window_bounds
from .skills import SkillConfigResolver, canonical_fundamento, is_known_fundamento

logger = logging.getLogger(__name__)


class EventStore(Protocol):
    """Remote store for qualitative events."""

    async def insert(self, event: QualitativeEvent) -> QualitativeEvent:
        """Persist the event and return it with its remote id."""

    async def delete(self, event_id: str) -> bool:
        """Delete by id; False when nothing was deleted."""

    async def query(self, filters: EventFilters) -> list[QualitativeEvent]:
        """Events matching every filter that is set."""


class EventQueueRepository(Protocol):
    """Local append-only queue of events awaiting reconciliation."""

    def append(self, event: QualitativeEvent) -> None:
        ...

    def drain_pending(self) -> list[PendingEvent]:
        """Copy of the queue contents; nothing is removed."""

    def remove(self, event_ids: Sequence[str]) -> int:
        ...

    def record_failure(self, event_ids: Sequence[str]) -> None:
        ...


def _same_fundamento(stored: str, wanted: str) -> bool:
    return is_known_fundamento(stored) and canonical_fundamento(stored) == canonical_fundamento(wanted)


def matches_filters(event: QualitativeEvent, filters: Optional[EventFilters]) -> bool:
    if filters is None:
        return True
    if filters.athlete_id is not None and event.athlete_id != filters.athlete_id:
        return False
    if filters.training_id is not None and event.training_id != filters.training_id:
        return False
    if filters.fundamento and not _same_fundamento(event.fundamento, filters.fundamento):
        return False
    if filters.event_type and event.event_type.casefold() != filters.event_type.casefold():
        return False
    lower, upper = window_bounds(filters.date_start, filters.date_end)
    if lower is not None and event.timestamp < lower:
        return False
    if upper is not None and event.timestamp > upper:
        return False
    return True


def _naive_utc(value: Optional[datetime]) -> datetime:
    if value is None:
        return datetime.now(timezone.utc).replace(tzinfo=None)
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class EventRepository:
    def __init__(
        self,
        remote: EventStore,
        queue: EventQueueRepository,
        resolver: Optional[SkillConfigResolver] = None,
        *,
        local_prefix: str = "local_",
        timeout: Optional[float] = 10.0,
        max_sync_attempts: int = 5,
    ):
        self.remote = remote
        self.queue = queue
        self.resolver = resolver or SkillConfigResolver()
        self.local_prefix = local_prefix
        self.timeout = timeout
        self.max_sync_attempts = max_sync_attempts

    def is_local_id(self, event_id: Optional[str]) -> bool:
        return bool(event_id) and event_id.startswith(self.local_prefix)

    def _new_local_id(self) -> str:
        return f"{self.local_prefix}{uuid.uuid4().hex}"

    async def _call_remote(self, awaitable):
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise RemoteUnavailable("Remote event store timed out.") from exc

    def build_event(self, draft: QualitativeEventCreate) -> QualitativeEvent:
        """Validate a draft against the skill configuration.

        Raises ``ConfigurationError`` for unknown fundamento / event type pairs,
        before anything is written anywhere.
        """
        fundamento = canonical_fundamento(draft.fundamento)
        config = self.resolver.resolve(fundamento, draft.event_type)
        return QualitativeEvent(
            athlete_id=draft.athlete_id,
            training_id=draft.training_id,
            fundamento=fundamento.value,
            event_type=config.event_type,
            weight=config.weight,
            timestamp=_naive_utc(draft.timestamp),
            notes=draft.notes,
        )

    async def record_event(self, draft: QualitativeEventCreate) -> RecordedEvent:
        event = self.build_event(draft)
        try:
            stored = await self._call_remote(self.remote.insert(event))
        except RemoteUnavailable as exc:
            local = event.model_copy(update={"id": self._new_local_id()})
            await asyncio.to_thread(self.queue.append, local)
            logger.warning("Remote write failed, event queued as %s: %s", local.id, exc)
            return RecordedEvent(event=local, state=SyncState.PENDING_SYNC)
        return RecordedEvent(event=stored, state=SyncState.SYNCED)

    async def _local_events(self, filters: Optional[EventFilters]) -> list[QualitativeEvent]:
        pending = await asyncio.to_thread(self.queue.drain_pending)
        return [p.event for p in pending if matches_filters(p.event, filters)]

    async def list_events(
        self,
        filters: Optional[EventFilters] = None,
        *,
        include_pending: bool = True,
    ) -> list[QualitativeEvent]:
        try:
            events = await self._call_remote(self.remote.query(filters or EventFilters()))
        except RemoteUnavailable as exc:
            logger.warning("Remote query failed, serving queued events only: %s", exc)
            return await self._local_events(filters)
        if include_pending:
            events = list(events) + await self._local_events(filters)
        return events

    async def delete_event(self, event_id: str) -> bool:
        if self.is_local_id(event_id):
            return await asyncio.to_thread(self.queue.remove, [event_id]) > 0
        return await self._call_remote(self.remote.delete(event_id))

    def pending_events(self) -> list[PendingEvent]:
        pending = []
        for item in self.queue.drain_pending():
            state = (
                SyncState.PERMANENTLY_LOCAL
                if item.attempts >= self.max_sync_attempts
                else SyncState.PENDING_SYNC
            )
            pending.append(item.model_copy(update={"state": state}))
        return pending

    async def reconcile(self) -> ReconciliationReport:
        """Push queued local events to the remote store.

        Each record's outcome is tracked on its own; only confirmed ids leave
        the queue, so events appended meanwhile are never dropped.
        """
        pending = await asyncio.to_thread(self.queue.drain_pending)
        snapshot = [p.event for p in pending if self.is_local_id(p.event.id)]
        if not snapshot:
            return ReconciliationReport(synced_count=0)

        outcomes: list[bool] = []
        for event in snapshot:
            try:
                await self._call_remote(self.remote.insert(event.model_copy(update={"id": None})))
            except RemoteUnavailable as exc:
                logger.warning("Could not sync queued event %s: %s", event.id, exc)
                outcomes.append(False)
            except Exception:
                logger.exception("Unexpected error syncing queued event %s", event.id)
                outcomes.append(False)
            else:
                outcomes.append(True)

        synced = [event.id for event, ok in zip(snapshot, outcomes) if ok]
        failed = [event.id for event, ok in zip(snapshot, outcomes) if not ok]
        if synced:
            await asyncio.to_thread(self.queue.remove, synced)
        if failed:
            await asyncio.to_thread(self.queue.record_failure, failed)
        logger.info("Reconciliation finished: %d synced, %d pending", len(synced), len(failed))
        return ReconciliationReport(synced_count=len(synced), failed_ids=failed)
