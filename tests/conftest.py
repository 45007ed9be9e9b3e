"""
Test configuration and fixtures.
Uses SQLite in-memory with a single shared connection and a pinned clock.
"""
import os

# Must be set before barbershop.db builds its engine
os.environ["BARBERSHOP_DATABASE_URL"] = "sqlite://"

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from barbershop import models  # noqa: F401  registers the tables
from barbershop.config import Settings
from barbershop.db import get_session
from barbershop.deps import get_now
from barbershop.main import app
from barbershop.models import Barber, Branch

MANILA = ZoneInfo("Asia/Manila")

# Tuesday 12:15 in the shop timezone
NOW = datetime(2026, 10, 20, 12, 15, tzinfo=MANILA)
TODAY = date(2026, 10, 20)
TOMORROW = date(2026, 10, 21)


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def directory(session):
    """Two branches and two barbers; barber-1 works at both branches."""
    session.add(Branch(id="branch-1", name="Downtown"))
    session.add(Branch(id="branch-2", name="Uptown"))
    session.add(Barber(id="barber-1", name="Alex", branches=["branch-1", "branch-2"]))
    session.add(Barber(id="barber-2", name="Sam", branches=["branch-2"]))
    session.commit()


@pytest.fixture
def client(session):
    def get_session_override():
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_now] = lambda: NOW
    yield TestClient(app)
    app.dependency_overrides.clear()
