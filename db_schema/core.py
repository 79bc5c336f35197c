# db_schema/core.py
"""SQLite schema: core game tables.

This module contains *only* DDL and schema migrations.
It must not import GameRepo (to avoid circular imports).

Tables
------
- meta: schema_version / created_at
- games: one row per game; the draft is a tagged union (draft_kind + draft_json)
- players: minimal player registry (existence checks for match events)
- game_rosters: roster assignments persisted when a game is started
"""

from __future__ import annotations

import sqlite3


def ddl(*, now: str, schema_version: str) -> str:
    """Return DDL SQL for core tables (as a single executescript string)."""
    return f"""
                CREATE TABLE IF NOT EXISTS meta (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );

                INSERT INTO meta(key, value) VALUES ('schema_version', '{schema_version}')
                ON CONFLICT(key) DO UPDATE SET value=excluded.value;
                INSERT OR IGNORE INTO meta(key, value) VALUES ('created_at', '{now}');

                CREATE TABLE IF NOT EXISTS games (
                    game_id TEXT PRIMARY KEY,
                    team_id TEXT NOT NULL,
                    opponent TEXT NOT NULL,
                    game_date TEXT,
                    location TEXT,
                    match_type TEXT NOT NULL DEFAULT 'league',
                    status TEXT NOT NULL DEFAULT 'Scheduled'
                        CHECK (status IN ('Scheduled', 'Played', 'Done', 'Postponed')),
                    draft_kind TEXT NOT NULL DEFAULT 'none'
                        CHECK (draft_kind IN ('none', 'lineup', 'report')),
                    draft_json TEXT,
                    our_score INTEGER,
                    opponent_score INTEGER,
                    defense_summary TEXT,
                    midfield_summary TEXT,
                    attack_summary TEXT,
                    general_summary TEXT,
                    match_duration_json TEXT,
                    total_match_duration INTEGER NOT NULL DEFAULT 90,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    -- Backstop only; the lifecycle layer validates before writing.
                    CHECK (
                        (status = 'Scheduled' AND draft_kind IN ('none', 'lineup'))
                        OR (status = 'Played' AND draft_kind IN ('none', 'report'))
                        OR (status = 'Done' AND draft_kind = 'none')
                        OR (status = 'Postponed' AND draft_kind IN ('none', 'lineup'))
                    ),
                    CHECK (draft_kind = 'none' OR draft_json IS NOT NULL)
                );

                CREATE TABLE IF NOT EXISTS players (
                    player_id TEXT PRIMARY KEY,
                    team_id TEXT,
                    full_name TEXT NOT NULL,
                    kit_number INTEGER,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS game_rosters (
                    game_id TEXT NOT NULL,
                    player_id TEXT NOT NULL,
                    status TEXT NOT NULL,
                    played_in_game INTEGER NOT NULL DEFAULT 0 CHECK (played_in_game IN (0, 1)),
                    kit_number INTEGER,
                    formation_type TEXT,
                    formation_json TEXT,
                    created_at TEXT NOT NULL,
                    PRIMARY KEY (game_id, player_id),
                    FOREIGN KEY(game_id) REFERENCES games(game_id) ON DELETE CASCADE,
                    FOREIGN KEY(player_id) REFERENCES players(player_id) ON DELETE CASCADE
                );
"""


def migrate(cur: sqlite3.Cursor) -> None:
    """Create lookup indexes for the core tables."""
    cur.execute("CREATE INDEX IF NOT EXISTS idx_games_team_id ON games(team_id);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_games_status ON games(status);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_game_rosters_player ON game_rosters(player_id);")
