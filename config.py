from __future__ import annotations

"""Process-level settings for the squad_up backend.

Subsystem tunables live next to their code (games/config.py, jobs/config.py).
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent

# SQLite file path. Required at startup; there is no implicit default.
DB_PATH_ENV = "SQUAD_DB_PATH"

# Optional shared secret for state-changing API calls (X-Admin-Token header).
ADMIN_TOKEN_ENV = "SQUAD_ADMIN_TOKEN"

SCHEMA_VERSION = "1"


def db_path_from_env() -> str:
    db_path = (os.environ.get(DB_PATH_ENV) or "").strip()
    if not db_path:
        raise RuntimeError(f"{DB_PATH_ENV} is required (no default db_path).")
    return db_path


def admin_token_from_env() -> str:
    return (os.environ.get(ADMIN_TOKEN_ENV) or "").strip()
