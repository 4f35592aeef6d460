"""Lightweight schema migration helpers for the Storage Service."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from sqlalchemy.engine import Engine

LOGGER = logging.getLogger(__name__)

MigrationFunc = Callable[[Engine], None]

# The current ``processed_files`` layout is the first one; append here when it changes.
_MIGRATIONS: tuple[MigrationFunc, ...] = ()


def run_migrations(engine: Engine, migrations: Iterable[MigrationFunc] | None = None) -> None:
    """Execute idempotent schema migrations for the provided engine."""

    pending = _MIGRATIONS if migrations is None else tuple(migrations)
    for migration in pending:
        LOGGER.debug("Applying migration %s", migration.__name__)
        migration(engine)
