# game_repo.py
# Developer note:
# - SQLite DB is the single source of truth (SSOT) for games, cards, rosters and jobs.
# - game_id / player_id / card_id / job_id are opaque strings (uuid4 hex when generated here).
# - Invariant checks belong to the lifecycle layer (games/lifecycle.py), not to this module.
"""
GameRepository: persisted-data SSOT (SQLite)

Goal:
- All persisted reads/writes go through SQLite via GameRepo (connection + transactions)
  and the cursor-level subsystem repos (games/repo.py, match_events/repo.py, jobs/repo.py).
- Every load-modify-save runs inside ``GameRepo.transaction()``, which takes the
  database write lock up front (BEGIN IMMEDIATE), so concurrent requests on the
  same game are serialised.

Usage (CLI):
  python game_repo.py init --db <db_path>
  python game_repo.py validate --db <db_path>

Python:
  from game_repo import GameRepo
  with GameRepo("<db_path>") as repo:
      repo.init_db()
      with repo.transaction() as cur:
          ...
"""

from __future__ import annotations

import argparse
import contextlib
import datetime as _dt
import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from config import SCHEMA_VERSION


logger = logging.getLogger(__name__)
_WARN_COUNTS: Dict[str, int] = {}


# ----------------------------
# Helpers
# ----------------------------

def _warn_limited(code: str, msg: str, *, limit: int = 5) -> None:
    n = _WARN_COUNTS.get(code, 0)
    if n < limit:
        logger.warning("%s %s", code, msg, exc_info=True)
    _WARN_COUNTS[code] = n + 1


def utc_now_iso() -> str:
    """UTC timestamp with second precision and a Z suffix (lexicographically ordered)."""
    return _dt.datetime.now(_dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def json_dumps(obj: Any) -> str:
    return json.dumps(
        obj,
        ensure_ascii=False,
        separators=(",", ":"),
        sort_keys=True,
        default=str,
    )


def json_loads(value: Any, default: Any):
    """
    Safe JSON loader:
    - None -> default
    - already dict/list -> returns as-is
    - invalid JSON -> default
    """
    if value is None:
        return default
    if isinstance(value, (dict, list)):
        return value
    try:
        return json.loads(value)
    except (json.JSONDecodeError, TypeError):
        _warn_limited("JSON_DECODE_FAILED", f"value_preview={repr(str(value))[:120]}", limit=3)
        return default


# ----------------------------
# Repository
# ----------------------------

class GameRepo:
    def __init__(self, db_path: str | Path, *, timeout: float = 5.0):
        self.db_path = str(db_path)
        self._conn = sqlite3.connect(self.db_path, timeout=float(timeout))
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON;")
        self._conn.execute("PRAGMA journal_mode = WAL;")  # good safety for frequent autosaves
        # Nested transaction support (SAVEPOINT) for callers that compose repo methods.
        # (SQLite raises if BEGIN is issued while a transaction is already active.)
        self._savepoint_seq = 0

    def close(self) -> None:
        try:
            self._conn.close()
        except sqlite3.Error:
            logger.warning("GAME_REPO_CLOSE_FAILED db=%s", self.db_path, exc_info=True)

    @contextlib.contextmanager
    def transaction(self):
        """
        Atomic transaction helper.

        Supports nesting via SAVEPOINT:
        - outermost: BEGIN IMMEDIATE ... COMMIT/ROLLBACK
        - nested: SAVEPOINT ... RELEASE (or ROLLBACK TO + RELEASE on error)

        BEGIN IMMEDIATE acquires the write lock before the first read, so a
        load-modify-save inside one transaction cannot interleave with another
        writer.
        """
        cur = self._conn.cursor()
        nested = bool(getattr(self._conn, "in_transaction", False))
        sp_name = None
        try:
            if nested:
                self._savepoint_seq += 1
                sp_name = f"sp_{self._savepoint_seq}"
                cur.execute(f"SAVEPOINT {sp_name};")
            else:
                self._conn.execute("BEGIN IMMEDIATE;")

            yield cur

            if nested and sp_name:
                cur.execute(f"RELEASE SAVEPOINT {sp_name};")
            else:
                self._conn.commit()
        except Exception:
            if nested and sp_name:
                # Roll back to the savepoint only; do NOT rollback the outer transaction here.
                try:
                    cur.execute(f"ROLLBACK TO SAVEPOINT {sp_name};")
                finally:
                    cur.execute(f"RELEASE SAVEPOINT {sp_name};")
            else:
                self._conn.rollback()
            raise
        finally:
            cur.close()

    def cursor(self) -> sqlite3.Cursor:
        """Plain cursor for read-only access outside a transaction."""
        return self._conn.cursor()

    # ------------------------
    # Schema
    # ------------------------

    def init_db(self) -> None:
        """Apply SQLite schema (DDL + migrations) via db_schema."""
        from db_schema import apply_schema

        now = utc_now_iso()
        with self.transaction() as cur:
            apply_schema(
                cur,
                now=now,
                schema_version=SCHEMA_VERSION,
            )

    # ------------------------
    # Players (minimal registry)
    # ------------------------

    def upsert_player(
        self,
        player_id: str,
        *,
        full_name: str,
        team_id: Optional[str] = None,
        kit_number: Optional[int] = None,
    ) -> Dict[str, Any]:
        pid = str(player_id).strip()
        if not pid:
            raise ValueError("player_id is required")
        now = utc_now_iso()
        with self.transaction() as cur:
            cur.execute(
                """
                INSERT INTO players(player_id, team_id, full_name, kit_number, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(player_id) DO UPDATE SET
                    team_id=excluded.team_id,
                    full_name=excluded.full_name,
                    kit_number=excluded.kit_number,
                    updated_at=excluded.updated_at;
                """,
                (pid, team_id, str(full_name), kit_number, now, now),
            )
        return self.get_player(pid)

    def get_player(self, player_id: str) -> Dict[str, Any]:
        row = self._conn.execute(
            "SELECT player_id, team_id, full_name, kit_number FROM players WHERE player_id=?;",
            (str(player_id),),
        ).fetchone()
        if not row:
            raise KeyError(f"player not found: {player_id}")
        return {
            "playerId": str(row["player_id"]),
            "teamId": row["team_id"],
            "fullName": row["full_name"],
            "kitNumber": row["kit_number"],
        }

    # ------------------------
    # Integrity
    # ------------------------

    def validate_integrity(self) -> None:
        """
        Fail fast on draft/status disagreement.
        The CHECK constraints prevent new violations; this also covers DB files
        written before the constraints existed.
        """
        rows = self._conn.execute(
            """
            SELECT game_id, status, draft_kind FROM games
            WHERE (status = 'Scheduled' AND draft_kind = 'report')
               OR (status = 'Played' AND draft_kind = 'lineup')
               OR (status = 'Done' AND draft_kind != 'none')
               OR (status = 'Postponed' AND draft_kind = 'report');
            """
        ).fetchall()
        if rows:
            bad = [f"{r['game_id']}:{r['status']}/{r['draft_kind']}" for r in rows[:10]]
            raise ValueError(f"draft slot does not match status for games: {bad}")

        orphan = self._conn.execute(
            """
            SELECT COUNT(*) AS c FROM cards c
            LEFT JOIN games g ON g.game_id = c.game_id
            WHERE g.game_id IS NULL;
            """
        ).fetchone()
        if orphan and orphan["c"] > 0:
            raise ValueError(f"{orphan['c']} cards reference missing games")

    # ------------------------
    # Convenience
    # ------------------------

    def __enter__(self) -> "GameRepo":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


# ----------------------------
# CLI
# ----------------------------

def _cmd_init(args) -> None:
    with GameRepo(args.db) as repo:
        repo.init_db()
    print(f"OK: initialized {args.db}")


def _cmd_validate(args) -> None:
    with GameRepo(args.db) as repo:
        repo.validate_integrity()
    print(f"OK: validation passed for {args.db}")


def main(argv: Optional[Sequence[str]] = None) -> None:
    p = argparse.ArgumentParser(description="GameRepo (SQLite single source of truth)")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init", help="initialize DB schema")
    p_init.add_argument("--db", required=True, help="path to sqlite db file")
    p_init.set_defaults(func=_cmd_init)

    p_val = sub.add_parser("validate", help="validate DB integrity")
    p_val.add_argument("--db", required=True, help="path to sqlite db file")
    p_val.set_defaults(func=_cmd_validate)

    args = p.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
