# db_schema/init.py
"""Public entrypoint for applying the SQLite schema.

Each schema module exposes ``ddl(now=, schema_version=)`` (CREATE statements,
idempotent) and optionally ``migrate(cur)`` (indexes and other post-DDL steps).
"""

from __future__ import annotations

import sqlite3
from types import ModuleType
from typing import Sequence

from . import core, jobs, match_events


# Order matters:
# - core must come first (games/players are referenced by cards and rosters)
# - jobs has no FK (payload references games by id inside JSON)
DEFAULT_MODULES: Sequence[ModuleType] = (
    core,
    match_events,
    jobs,
)


def apply_schema(
    cur: sqlite3.Cursor,
    *,
    now: str,
    schema_version: str,
    modules: Sequence[ModuleType] = DEFAULT_MODULES,
) -> None:
    """Create the core, match_events and jobs tables, then run their migrate hooks."""
    cur.executescript("\n\n".join(m.ddl(now=now, schema_version=schema_version) for m in modules))

    for m in modules:
        migrate = getattr(m, "migrate", None)
        if migrate is not None:
            migrate(cur)
