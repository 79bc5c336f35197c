"""db_schema package.

SQLite DDL + migrations for the game lifecycle store, split per subsystem
and applied by GameRepo.init_db().

Public API:
- apply_schema(...)
"""

from .init import apply_schema  # noqa: F401

__all__ = ["apply_schema"]
