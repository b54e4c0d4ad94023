"""Shared fixtures for the test suite."""

import random

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from copilot import models  # noqa: F401
from copilot.config import settings
from copilot.database import Base, get_db
from copilot.main import app
from copilot.routes.chat import get_registry
from copilot.schemas import Dataset
from copilot.services.chat_session import ChatSession, SessionRegistry
from copilot.services.history_store import ChatHistoryRecorder


@pytest.fixture
def session_factory():
    """Session factory bound to a fresh in-memory database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def chat(rng):
    """A chat session with a seeded random source."""
    return ChatSession(session_id="test-session", rng=rng)


@pytest.fixture
def registry(session_factory):
    return SessionRegistry(
        subscriber_factory=lambda: ChatHistoryRecorder(session_factory),
    )


@pytest.fixture
def client(session_factory, registry, monkeypatch):
    """API client wired to the in-memory database and registry."""
    monkeypatch.setattr(settings, "response_delay_seconds", 0.0)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def food_dataset() -> Dataset:
    return Dataset(
        title="Crop Food Data",
        description="Sample food data for crop over the last 10 years",
        years=["2024", "2025", "2026"],
        data=[
            {"year": "2024", "production": 10, "consumption": 5, "export": 1},
            {"year": "2025", "production": 20, "consumption": 6, "export": 2},
            {"year": "2026", "production": 30, "consumption": 7, "export": 3},
        ],
    )
