"""Engine, session handle, schema creation and the one-time user seed."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


def make_engine(database_url: str, *, enforce_foreign_keys: bool = True) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        # sync routes run in a threadpool, so a pooled connection may hop threads
        connect_args["check_same_thread"] = False

    engine = create_engine(database_url, connect_args=connect_args)

    if enforce_foreign_keys and engine.dialect.name == "sqlite":

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_conn, _record) -> None:
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON")
            cur.close()

    logger.info("Database engine ready url=%s foreign_keys=%s", engine.url, enforce_foreign_keys)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db(request: Request) -> Iterator[Session]:
    """Request-scoped session taken from the factory the app was built with."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def initialize_schema(engine: Engine) -> None:
    # importing the models registers their tables on Base.metadata
    from task_tracker import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def seed_default_users(db: Session, names: Iterable[str]) -> int:
    """
    Insert each name as a user unless it already exists.

    Best-effort: a failing insert is logged and skipped. Returns the number of
    rows actually created.
    """
    from task_tracker.models import User

    created = 0
    for name in names:
        stmt = sqlite_insert(User).values(username=name).on_conflict_do_nothing(index_elements=["username"])
        try:
            result = db.execute(stmt)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning("Seeding user %r failed: %s", name, exc)
            continue
        created += result.rowcount or 0
    logger.debug("Seeded %s default user(s)", created)
    return created
