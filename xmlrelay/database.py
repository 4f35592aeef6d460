"""Database utilities for the Storage Service."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Generator

from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from . import config as config_module
from .config import PROJECT_ROOT
from .migrations import run_migrations

_engine: Engine | None = None


def _sqlite_options(url: URL) -> tuple[URL, dict[str, Any]]:
    """Anchor file databases under the project root and share in-memory ones."""

    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    database = url.database
    if not database or database == ":memory:":
        # One shared connection so every thread sees the same in-memory database.
        options["poolclass"] = StaticPool
        return url, options

    db_path = Path(database)
    if not db_path.is_absolute():
        db_path = (PROJECT_ROOT / db_path).resolve()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return url.set(database=str(db_path)), options


def get_engine() -> Engine:
    """Return the process-wide engine for the configured ``DATABASE_URL``."""

    global _engine
    if _engine is None:
        url = make_url(config_module.get_settings().database_url)
        options: dict[str, Any] = {}
        if url.get_backend_name() == "sqlite":
            url, options = _sqlite_options(url)
        _engine = create_engine(url, **options)
    return _engine


def get_session() -> Generator[Session, None, None]:
    """Provide a SQLModel session for FastAPI dependencies."""

    engine = get_engine()
    with Session(engine) as session:
        yield session


def init_db() -> None:
    """Initialise database tables."""

    from .models import processed_file  # noqa: F401  Registers the table with SQLModel metadata.

    engine = get_engine()
    SQLModel.metadata.create_all(engine)
    run_migrations(engine)


def reset_database_state() -> None:
    """Dispose of the cached engine (useful for tests)."""

    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None


__all__ = ["get_engine", "get_session", "init_db", "reset_database_state"]
