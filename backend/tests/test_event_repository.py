import asyncio
from datetime import datetime

import pytest

from volley_ranking.core.enums import SyncState
from volley_ranking.core.errors import ConfigurationError, RemoteUnavailable
from volley_ranking.schemas.event import EventFilters, QualitativeEvent, QualitativeEventCreate
from volley_ranking.services.event_repository import EventRepository, matches_filters
from volley_ranking.services.offline_queue import InMemoryEventQueue, SqlEventQueue


class FakeEventStore:
    def __init__(self):
        self.events: list[QualitativeEvent] = []
        self.offline = False
        self.fail_on: set[str] = set()
        self.delay = 0.0
        self.on_insert = None

    async def insert(self, event: QualitativeEvent) -> QualitativeEvent:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.offline or (event.notes in self.fail_on):
            raise RemoteUnavailable("offline")
        if self.on_insert:
            self.on_insert(event)
        stored = event.model_copy(update={"id": str(len(self.events) + 1)})
        self.events.append(stored)
        return stored

    async def delete(self, event_id: str) -> bool:
        before = len(self.events)
        self.events = [e for e in self.events if e.id != event_id]
        return len(self.events) < before

    async def query(self, filters: EventFilters) -> list[QualitativeEvent]:
        if self.offline:
            raise RemoteUnavailable("offline")
        return [e for e in self.events if matches_filters(e, filters)]


def draft(notes: str = None, **overrides) -> QualitativeEventCreate:
    values = {
        "athlete_id": 1,
        "training_id": 7,
        "fundamento": "saque",
        "event_type": "Ace",
        "timestamp": datetime(2026, 3, 5, 18, 0),
        "notes": notes,
    }
    values.update(overrides)
    return QualitativeEventCreate(**values)


@pytest.fixture
def store():
    return FakeEventStore()


@pytest.fixture
def queue():
    return InMemoryEventQueue()


@pytest.fixture
def repository(store, queue):
    return EventRepository(store, queue, max_sync_attempts=2)


def test_record_event_resolves_weight_and_syncs(repository, store):
    recorded = asyncio.run(repository.record_event(draft(event_type="eficiente")))

    assert recorded.state == SyncState.SYNCED
    assert recorded.event.id == "1"
    assert recorded.event.event_type == "Eficiente"
    assert recorded.event.weight == 1.0
    assert store.events == [recorded.event]


def test_recepcao_is_stored_as_passe(repository):
    recorded = asyncio.run(repository.record_event(draft(fundamento="Recepção", event_type="Perfeita")))
    assert recorded.event.fundamento == "passe"


def test_unknown_event_type_stores_nothing(repository, store, queue):
    with pytest.raises(ConfigurationError):
        asyncio.run(repository.record_event(draft(event_type="Perfeita")))

    store.offline = True
    with pytest.raises(ConfigurationError):
        asyncio.run(repository.record_event(draft(fundamento="cortada")))

    assert store.events == []
    assert queue.drain_pending() == []


def test_offline_write_is_queued_with_local_id(repository, store, queue):
    store.offline = True

    recorded = asyncio.run(repository.record_event(draft("offline")))

    assert recorded.state == SyncState.PENDING_SYNC
    assert repository.is_local_id(recorded.event.id)
    assert [p.event.id for p in queue.drain_pending()] == [recorded.event.id]
    assert store.events == []


def test_slow_remote_times_out_into_queue(store, queue):
    store.delay = 0.5
    repository = EventRepository(store, queue, timeout=0.01)

    recorded = asyncio.run(repository.record_event(draft("slow")))

    assert recorded.state == SyncState.PENDING_SYNC
    assert len(queue.drain_pending()) == 1


def test_reconcile_only_removes_confirmed_events(repository, store, queue):
    store.offline = True
    ids = [asyncio.run(repository.record_event(draft(name))).event.id for name in ("e1", "e2", "e3")]
    store.offline = False
    store.fail_on = {"e2"}

    report = asyncio.run(repository.reconcile())

    assert report.synced_count == 2
    assert report.failed_ids == [ids[1]]
    remaining = queue.drain_pending()
    assert [p.event.id for p in remaining] == [ids[1]]
    assert remaining[0].attempts == 1
    assert sorted(e.notes for e in store.events) == ["e1", "e3"]
    assert all(not repository.is_local_id(e.id) for e in store.events)


def test_reconcile_isolates_unexpected_errors(repository, store, queue):
    store.offline = True
    ids = [asyncio.run(repository.record_event(draft(name))).event.id for name in ("e1", "boom", "e3")]
    store.offline = False

    def reset_connection(event):
        if event.notes == "boom":
            raise ConnectionError("socket reset")

    store.on_insert = reset_connection

    report = asyncio.run(repository.reconcile())

    assert report.synced_count == 2
    assert report.failed_ids == [ids[1]]
    assert sorted(e.notes for e in store.events) == ["e1", "e3"]
    remaining = queue.drain_pending()
    assert [p.event.notes for p in remaining] == ["boom"]
    assert remaining[0].attempts == 1


def test_sql_queue_backs_the_repository(tmp_path, store):
    repository = EventRepository(store, SqlEventQueue(url=f"sqlite+pysqlite:///{tmp_path / 'queue.db'}"))
    store.offline = True
    local = asyncio.run(repository.record_event(draft("offline"))).event

    assert [e.id for e in asyncio.run(repository.list_events())] == [local.id]

    store.offline = False
    assert asyncio.run(repository.reconcile()).synced_count == 1
    assert repository.pending_events() == []
    assert [e.notes for e in store.events] == ["offline"]


def test_reconcile_keeps_events_appended_meanwhile(repository, store, queue):
    store.offline = True
    asyncio.run(repository.record_event(draft("queued")))
    store.offline = False
    late = QualitativeEvent(
        id="local_late",
        athlete_id=2,
        fundamento="defesa",
        event_type="Boa",
        weight=1.5,
        timestamp=datetime(2026, 3, 6),
    )

    def append_late(event):
        if event.notes == "queued":
            queue.append(late)

    store.on_insert = append_late

    report = asyncio.run(repository.reconcile())

    assert report.synced_count == 1
    assert [p.event.id for p in queue.drain_pending()] == ["local_late"]


def test_reconcile_with_empty_queue(repository):
    report = asyncio.run(repository.reconcile())
    assert report.synced_count == 0
    assert report.failed_ids == []


def test_pending_events_report_permanently_local(repository, store):
    store.offline = True
    asyncio.run(repository.record_event(draft("stuck")))

    asyncio.run(repository.reconcile())
    assert repository.pending_events()[0].state == SyncState.PENDING_SYNC

    asyncio.run(repository.reconcile())
    pending = repository.pending_events()
    assert pending[0].attempts == 2
    assert pending[0].state == SyncState.PERMANENTLY_LOCAL


def test_list_events_merges_queue_and_falls_back_when_offline(repository, store):
    asyncio.run(repository.record_event(draft("remote")))
    store.offline = True
    asyncio.run(repository.record_event(draft("local", fundamento="passe", event_type="Boa")))

    offline = asyncio.run(repository.list_events())
    assert [e.notes for e in offline] == ["local"]

    store.offline = False
    merged = asyncio.run(repository.list_events())
    assert sorted(e.notes for e in merged) == ["local", "remote"]

    remote_only = asyncio.run(repository.list_events(include_pending=False))
    assert [e.notes for e in remote_only] == ["remote"]

    by_synonym = asyncio.run(repository.list_events(EventFilters(fundamento="recepção")))
    assert [e.notes for e in by_synonym] == ["local"]


def test_list_events_date_filter_covers_whole_end_day(repository):
    asyncio.run(repository.record_event(draft("late", timestamp=datetime(2026, 3, 10, 23, 45))))
    asyncio.run(repository.record_event(draft("after", timestamp=datetime(2026, 3, 11, 0, 5))))

    events = asyncio.run(repository.list_events(EventFilters(date_end=datetime(2026, 3, 10).date())))

    assert [e.notes for e in events] == ["late"]


def test_delete_local_and_remote_events(repository, store, queue):
    remote = asyncio.run(repository.record_event(draft("remote"))).event
    store.offline = True
    local = asyncio.run(repository.record_event(draft("local"))).event

    assert asyncio.run(repository.delete_event(local.id)) is True
    assert queue.drain_pending() == []
    assert asyncio.run(repository.delete_event(local.id)) is False

    store.offline = False
    assert asyncio.run(repository.delete_event(remote.id)) is True
    assert store.events == []


def test_sql_queue_persists_between_instances(tmp_path):
    url = f"sqlite+pysqlite:///{tmp_path / 'queue.db'}"
    event = QualitativeEvent(
        id="local_abc",
        athlete_id=3,
        fundamento="ataque",
        event_type="Ponto",
        weight=3.0,
        timestamp=datetime(2026, 3, 5, 9, 30),
    )

    SqlEventQueue(url=url).append(event)
    reopened = SqlEventQueue(url=url)
    pending = reopened.drain_pending()

    assert [p.event for p in pending] == [event]
    reopened.record_failure(["local_abc"])
    assert reopened.drain_pending()[0].attempts == 1
    assert reopened.remove(["local_abc", "local_missing"]) == 1
    assert reopened.drain_pending() == []


def test_queue_rejects_events_without_local_id():
    event = QualitativeEvent(athlete_id=1, fundamento="saque", event_type="Ace", weight=3.0, timestamp=datetime(2026, 3, 1))
    with pytest.raises(ValueError):
        InMemoryEventQueue().append(event)
