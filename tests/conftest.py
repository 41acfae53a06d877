# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from task_tracker.config import Settings
from task_tracker.database import initialize_schema, make_engine, make_session_factory, seed_default_users
from task_tracker.main import create_app


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(database_url=f"sqlite:///{tmp_path / 'tasks.db'}", seed_users=("Alice", "Bob"))


@pytest.fixture()
def engine(settings: Settings):
    engine = make_engine(settings.database_url, enforce_foreign_keys=settings.enforce_foreign_keys)
    initialize_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db(engine, settings: Settings):
    """Session on a fresh store with Alice (id=1) and Bob (id=2) seeded."""
    session = make_session_factory(engine)()
    seed_default_users(session, settings.seed_users)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(settings: Settings, engine):
    app = create_app(settings, engine)
    with TestClient(app) as c:
        yield c
