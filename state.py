from __future__ import annotations

from typing import Optional

_DB_PATH: Optional[str] = None


def set_db_path(db_path: str) -> None:
    global _DB_PATH
    if not db_path:
        raise ValueError("db_path is required")
    _DB_PATH = str(db_path)


def get_db_path() -> str:
    # Fail loud: the server must call set_db_path() during startup.
    if not _DB_PATH:
        raise RuntimeError("db_path is not configured; call state.set_db_path() first")
    return _DB_PATH


def reset_db_path() -> None:
    global _DB_PATH
    _DB_PATH = None
