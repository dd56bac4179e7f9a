"""Shared test fixtures for the versionchain test suite.

All tests run against an in-memory SQLite database shared through a
StaticPool. Each test gets freshly created tables, so tests are fully
isolated from each other.
"""

import os

# Use an in-memory database and readable logs before any app imports.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_FORMAT"] = "text"

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from versionchain.database import Base, get_db, engine, init_db, SessionLocal
from versionchain.main import app
from versionchain.schemas.version import VersionKind, VersionRecord
from versionchain.services import VersionEngine

_T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _fresh_tables():
    """Recreate every table before each test for isolation."""
    Base.metadata.drop_all(bind=engine)
    init_db(engine)
    yield


@pytest.fixture()
def db():
    """Per-test database session."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client(db):
    """FastAPI TestClient with the DB dependency overridden to use the test session."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def version_engine() -> VersionEngine:
    """Engine with the default thresholds (interval 10, max delta 5000)."""
    return VersionEngine()


def build_chain(engine: VersionEngine, states, document_id: str = "doc-1"):
    """Create versions 1..n from successive content states."""
    chain = []
    previous = ""
    for version, content in enumerate(states, start=1):
        chain.append(engine.create_version(document_id, content, previous, version, timestamp=_T0))
        previous = content
    return chain


def baseline(version: int, content: str, document_id: str = "doc-1", size=None) -> VersionRecord:
    """Factory for a hand-built baseline record."""
    return VersionRecord(
        document_id=document_id,
        version=version,
        timestamp=_T0,
        kind=VersionKind.BASELINE,
        content=content,
        size=len(content) if size is None else size,
    )


def delta(version: int, payload: str, document_id: str = "doc-1", size=None) -> VersionRecord:
    """Factory for a hand-built delta record carrying a raw wire payload."""
    return VersionRecord(
        document_id=document_id,
        version=version,
        timestamp=_T0,
        kind=VersionKind.DELTA,
        delta=payload,
        size=len(payload) if size is None else size,
    )
