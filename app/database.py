"""SQLAlchemy engine and session management for the key/value store."""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, scoped_session, sessionmaker


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


# One session per thread; history workers never touch the database.
SessionLocal = scoped_session(sessionmaker())

_engine: Optional[Engine] = None


def init_app(app: Any) -> Engine:
    """Bind the session factory to the configured database for ``app``."""

    global _engine

    if _engine is None:
        database_uri = app.config["SQLALCHEMY_DATABASE_URI"]
        _engine = create_engine(database_uri, future=True)
        SessionLocal.configure(bind=_engine, autoflush=False)

    @app.teardown_appcontext
    def shutdown_session(_: Optional[BaseException] = None) -> None:
        SessionLocal.remove()

    app.extensions["sqlalchemy_engine"] = _engine
    return _engine


def get_engine() -> Engine:
    """Return the active SQLAlchemy engine; raise if not yet initialized."""

    if _engine is None:
        raise RuntimeError("Database engine has not been initialized. Call init_app first.")
    return _engine


def get_session() -> scoped_session:
    """Expose the configured session factory."""

    return SessionLocal


def dispose_engine() -> None:
    """Release pooled connections and forget the engine."""

    global _engine

    SessionLocal.remove()
    if _engine is not None:
        _engine.dispose()
        _engine = None
