# db_schema/match_events.py
"""SQLite schema: match events (disciplinary cards).

Cards reference games and players; each card mutation is evaluated by
match_events.dispatcher (it may enqueue a job in the same transaction).
"""

from __future__ import annotations


def ddl(*, now: str, schema_version: str) -> str:  # noqa: ARG001
    """Return DDL SQL for match event tables (as a single executescript string)."""

    return f"""
                CREATE TABLE IF NOT EXISTS cards (
                    card_id TEXT PRIMARY KEY,
                    game_id TEXT NOT NULL,
                    player_id TEXT NOT NULL,
                    card_type TEXT NOT NULL CHECK (card_type IN ('yellow', 'red', 'second-yellow')),
                    minute INTEGER NOT NULL CHECK (minute BETWEEN 1 AND 120),
                    reason TEXT NOT NULL DEFAULT '',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(game_id) REFERENCES games(game_id) ON DELETE CASCADE,
                    FOREIGN KEY(player_id) REFERENCES players(player_id) ON DELETE CASCADE
                );

                CREATE INDEX IF NOT EXISTS idx_cards_game_player ON cards(game_id, player_id);
                CREATE INDEX IF NOT EXISTS idx_cards_player_type ON cards(player_id, card_type);
"""
