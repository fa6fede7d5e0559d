"""SQLAlchemy engine and session helpers for the relational store."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# ``Base`` is the parent class for every SQLAlchemy model defined in issueboard/models.
Base = declarative_base()


def build_engine(url: str) -> Engine:
    """Create an engine for ``url`` with SQLite-friendly defaults."""

    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)
    # For SQLite, ``check_same_thread=False`` lets FastAPI's worker threads
    # share the connection. An in-memory database must also stay on a single
    # connection or every session would see a fresh, empty database.
    connect_args = {"check_same_thread": False}
    if url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(url, connect_args=connect_args, poolclass=StaticPool)
    return create_engine(url, connect_args=connect_args)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autoflush=False, expire_on_commit=False, bind=engine)
