"""SQLAlchemy engine/session helpers for the ledger database.

Usage
-----
from ledger_db.client import create_ledger_engine, make_session_factory, session_scope

engine = create_ledger_engine(database_url="postgresql://...")
sessions = make_session_factory(engine)
with session_scope(sessions) as s:
    s.execute(...)

The engine (and its connection pool) is a process-scoped handle: the
application creates it once at startup, hands it to whatever needs database
access, and disposes of it on shutdown. Nothing in this module keeps a global
engine.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .models.ledger import Base

# Seconds to wait for a new Postgres connection before giving up.
_PG_CONNECT_TIMEOUT = 10


def normalize_database_url(url: str) -> str:
    """Return ``url`` with an explicit driver for bare Postgres URLs.

    Hosting providers hand out ``postgres://`` or ``postgresql://`` URLs;
    SQLAlchemy maps the former to nothing and the latter to psycopg2. The
    ledger uses psycopg 3, so both are rewritten to ``postgresql+psycopg://``.
    URLs that already name a driver (or another backend) pass through.
    """

    url = url.strip()
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix) :]
    return url


def _database_url(override: str | None = None) -> str:
    url = override or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set; cannot initialize database client")
    return normalize_database_url(url)


def create_ledger_engine(*, database_url: str | None = None) -> Engine:
    """Create the process-scoped engine for ``database_url`` (or ``DATABASE_URL``)."""

    url = _database_url(database_url)
    connect_args: dict[str, object] = {}
    if url.startswith("sqlite"):
        # Handlers run store calls on worker threads.
        connect_args["check_same_thread"] = False
    elif url.startswith("postgresql"):
        connect_args["connect_timeout"] = _PG_CONNECT_TIMEOUT
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, class_=Session)


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""

    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_schema(engine: Engine) -> None:
    """Create the ledger tables directly from the ORM metadata.

    Intended for local development and tests; deployed databases are managed
    with the Alembic migrations under ``libs/ledger/alembic``.
    """

    Base.metadata.create_all(bind=engine)


__all__ = [
    "create_ledger_engine",
    "create_schema",
    "make_session_factory",
    "normalize_database_url",
    "session_scope",
]
