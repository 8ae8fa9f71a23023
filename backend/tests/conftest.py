import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["RANKING_MIN_SAMPLE"] = "5"

from volley_ranking import models  # noqa: E402,F401
from volley_ranking.database import Base, get_session_factory  # noqa: E402
from volley_ranking.dependencies import get_event_queue  # noqa: E402
from volley_ranking.main import app  # noqa: E402
from volley_ranking.services.offline_queue import InMemoryEventQueue  # noqa: E402

engine = create_engine(
    os.environ["DATABASE_URL"],
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def override_get_session_factory():
    return TestingSessionLocal


def reset_database() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture(autouse=True)
def _prepare_db():
    reset_database()


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def event_queue():
    return InMemoryEventQueue()


@pytest.fixture()
def client(event_queue):
    app.dependency_overrides[get_session_factory] = override_get_session_factory
    app.dependency_overrides[get_event_queue] = lambda: event_queue
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
