# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count
from typing import Any

import pytest

os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("SECRET_KEY", "test-secret")

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from groupfinder.core.security import ADMIN_ROLE, create_access_token
from groupfinder.db.session import Base
from groupfinder.main import app as fastapi_app
from groupfinder.repositories.submission_repo import SubmissionRepository
from groupfinder.services.admin_actions import AdminActions
from groupfinder.services.authz import Authorizer, Caller
from groupfinder.services.container import ServiceContainer
from groupfinder.services.lifecycle import LifecycleEngine
from groupfinder.services.projection import LiveDirectoryProjection
from groupfinder.services.propagation import BusEvent, PropagationBus
from groupfinder.services.store import InMemorySubmissionStore, SqlSubmissionStore

TEST_DB_URL = "sqlite://"
BASE_TIME = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


def make_payload(**overrides: Any) -> dict[str, Any]:
    """Return a valid free-community submission body."""
    payload: dict[str, Any] = {
        "community_name": "Test Group",
        "platform": "WhatsApp",
        "category": "Tech",
        "short_description": "A group for testing things.",
        "join_type": "free",
        "join_link": "https://x.com/y",
        "founder_name": "Asha",
    }
    payload.update(overrides)
    return payload


def make_paid_payload(**overrides: Any) -> dict[str, Any]:
    """Return a valid paid-community submission body without a join link."""
    payload = make_payload(
        community_name="Paid Circle",
        join_type="paid",
        price_inr=199,
    )
    payload.pop("join_link")
    payload.update(overrides)
    return payload


@pytest.fixture()
def free_payload() -> dict[str, Any]:
    return make_payload()


@pytest.fixture()
def paid_payload() -> dict[str, Any]:
    return make_paid_payload()


@pytest.fixture()
def clock() -> Callable[[], datetime]:
    """A clock that advances one minute per call so creation order is explicit."""
    ticks = count()
    return lambda: BASE_TIME + timedelta(minutes=next(ticks))


@pytest.fixture()
def store() -> InMemorySubmissionStore:
    return InMemorySubmissionStore()


@pytest.fixture()
def bus() -> PropagationBus:
    return PropagationBus()


@pytest.fixture()
def published(bus: PropagationBus) -> list[BusEvent]:
    """Collect every event published on ``bus``."""
    events: list[BusEvent] = []
    bus.subscribe(events.append)
    return events


@pytest.fixture()
def repository(
    store: InMemorySubmissionStore, clock: Callable[[], datetime]
) -> SubmissionRepository:
    return SubmissionRepository(store, read_timeout=1.0, write_timeout=1.0, clock=clock)


@pytest.fixture()
def lifecycle(repository: SubmissionRepository, bus: PropagationBus) -> LifecycleEngine:
    return LifecycleEngine(repository, bus)


@pytest.fixture()
def projection(
    repository: SubmissionRepository, bus: PropagationBus
) -> LiveDirectoryProjection:
    return LiveDirectoryProjection(repository, bus, poll_interval=30.0)


@pytest.fixture()
def authorizer(repository: SubmissionRepository) -> Authorizer:
    return Authorizer(repository, admin_user_ids=["listed-admin"])


@pytest.fixture()
def admin_actions(lifecycle: LifecycleEngine, authorizer: Authorizer) -> AdminActions:
    return AdminActions(lifecycle, authorizer)


@pytest.fixture()
def admin_caller() -> Caller:
    return Caller(user_id="admin-1", role=ADMIN_ROLE)


@pytest.fixture()
def member_caller() -> Caller:
    return Caller(user_id="member-1")


@pytest.fixture()
def sql_engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def sql_store(sql_engine: Engine) -> SqlSubmissionStore:
    factory = sessionmaker(bind=sql_engine, autocommit=False, autoflush=False)
    return SqlSubmissionStore(factory, Base.metadata)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def container(client: TestClient, app: FastAPI) -> ServiceContainer:
    """The services the running test app was started with."""
    return app.state.container


@pytest.fixture()
def admin_headers() -> dict[str, str]:
    token = create_access_token("admin-1", role=ADMIN_ROLE)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def user_headers() -> dict[str, str]:
    token = create_access_token("member-1")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_user_headers() -> dict[str, str]:
    token = create_access_token("member-2")
    return {"Authorization": f"Bearer {token}"}
