from fastapi import Depends, Request
from sqlalchemy.orm import sessionmaker

from .core.config import Settings, get_settings
from .database import get_session_factory
from .services.event_repository import EventQueueRepository, EventRepository
from .services.offline_queue import SqlEventQueue
from .services.rankings import RankingService
from .services.skills import SkillConfigResolver
from .services.stores import SqlEventStore, SqlExecutionTallyStore, SqlRoster


def create_event_queue(settings: Settings) -> EventQueueRepository:
    return SqlEventQueue(url=settings.offline_queue_url)


def get_event_queue(request: Request) -> EventQueueRepository:
    queue = getattr(request.app.state, "event_queue", None)
    if queue is None:
        queue = create_event_queue(get_settings())
        request.app.state.event_queue = queue
    return queue


def get_skill_resolver() -> SkillConfigResolver:
    return SkillConfigResolver()


def get_event_repository(
    session_factory: sessionmaker = Depends(get_session_factory),
    queue: EventQueueRepository = Depends(get_event_queue),
    resolver: SkillConfigResolver = Depends(get_skill_resolver),
) -> EventRepository:
    settings = get_settings()
    return EventRepository(
        SqlEventStore(session_factory),
        queue,
        resolver,
        local_prefix=settings.local_id_prefix,
        timeout=settings.remote_timeout_seconds,
        max_sync_attempts=settings.max_sync_attempts,
    )


def get_ranking_service(
    session_factory: sessionmaker = Depends(get_session_factory),
    events: EventRepository = Depends(get_event_repository),
) -> RankingService:
    return RankingService(
        SqlRoster(session_factory),
        SqlExecutionTallyStore(session_factory),
        events,
        get_settings(),
    )
