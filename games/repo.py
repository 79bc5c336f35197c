from __future__ import annotations

"""DB access layer for games and game rosters.

This module is intentionally *pure DB I/O*:
- no lifecycle rules (games/lifecycle.py owns them)
- no business logic besides JSON encoding/decoding of the draft union

Tables (SSOT):
- games
- game_rosters
"""

import sqlite3
from typing import Any, Dict, Iterable, List, Optional

from game_repo import json_dumps, json_loads

from . import config as g_cfg
from .lifecycle import RosterAssignment
from .types import DraftKind, DraftSlot, Game

_GAME_COLUMNS = """
    game_id, team_id, opponent, game_date, location, match_type, status,
    draft_kind, draft_json,
    our_score, opponent_score,
    defense_summary, midfield_summary, attack_summary, general_summary,
    match_duration_json, created_at, updated_at
"""


def _row_to_game(row: sqlite3.Row) -> Game:
    kind = DraftKind(str(row["draft_kind"] or DraftKind.NONE.value))
    if kind is DraftKind.NONE:
        draft = DraftSlot.empty()
    else:
        data = json_loads(row["draft_json"], default={})
        draft = DraftSlot(kind, data if isinstance(data, dict) else {})

    md = json_loads(row["match_duration_json"], default=None)
    match_duration = dict(g_cfg.DEFAULT_MATCH_DURATION)
    if isinstance(md, dict):
        match_duration.update({k: int(v) for k, v in md.items() if k in match_duration and v is not None})

    return Game(
        game_id=str(row["game_id"]),
        team_id=str(row["team_id"]),
        opponent=str(row["opponent"]),
        game_date=row["game_date"],
        location=row["location"],
        match_type=str(row["match_type"] or "league"),
        status=str(row["status"]),
        draft=draft,
        our_score=row["our_score"],
        opponent_score=row["opponent_score"],
        defense_summary=row["defense_summary"],
        midfield_summary=row["midfield_summary"],
        attack_summary=row["attack_summary"],
        general_summary=row["general_summary"],
        match_duration=match_duration,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def load_game(cur: sqlite3.Cursor, game_id: str) -> Optional[Game]:
    row = cur.execute(
        f"SELECT {_GAME_COLUMNS} FROM games WHERE game_id=? LIMIT 1;",
        (str(game_id),),
    ).fetchone()
    if not row:
        return None
    return _row_to_game(row)


def insert_game(cur: sqlite3.Cursor, game: Game, *, now: str) -> Game:
    cur.execute(
        """
        INSERT INTO games(
            game_id, team_id, opponent, game_date, location, match_type, status,
            draft_kind, draft_json, match_duration_json, total_match_duration,
            created_at, updated_at
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
        """,
        (
            game.game_id,
            game.team_id,
            game.opponent,
            game.game_date,
            game.location,
            game.match_type,
            game.status,
            game.draft.kind.value,
            json_dumps(game.draft.data) if game.draft.data is not None else None,
            json_dumps(game.match_duration),
            game.total_match_duration,
            str(now),
            str(now),
        ),
    )
    return game.with_changes(created_at=str(now), updated_at=str(now))


def save_game(cur: sqlite3.Cursor, game: Game, *, now: str) -> Game:
    """Write status, draft union and finalized fields for an existing game."""
    cur.execute(
        """
        UPDATE games SET
            status=?,
            draft_kind=?,
            draft_json=?,
            our_score=?,
            opponent_score=?,
            defense_summary=?,
            midfield_summary=?,
            attack_summary=?,
            general_summary=?,
            match_duration_json=?,
            total_match_duration=?,
            updated_at=?
        WHERE game_id=?;
        """,
        (
            game.status,
            game.draft.kind.value,
            json_dumps(game.draft.data) if game.draft.data is not None else None,
            game.our_score,
            game.opponent_score,
            game.defense_summary,
            game.midfield_summary,
            game.attack_summary,
            game.general_summary,
            json_dumps(game.match_duration),
            game.total_match_duration,
            str(now),
            game.game_id,
        ),
    )
    if cur.rowcount != 1:
        raise KeyError(f"game not found: {game.game_id}")
    return game.with_changes(updated_at=str(now))


# ---------------------------------------------------------------------------
# Game rosters
# ---------------------------------------------------------------------------


def replace_game_rosters(
    cur: sqlite3.Cursor,
    *,
    game_id: str,
    rosters: Iterable[RosterAssignment],
    formation: Any,
    formation_type: Optional[str],
    now: str,
) -> int:
    """Replace all roster rows for a game. Every player must exist in ``players``.

    Returns the number of rows written.
    """
    cur.execute("DELETE FROM game_rosters WHERE game_id=?;", (str(game_id),))
    formation_json = json_dumps(formation)
    written = 0
    for r in rosters:
        player = cur.execute(
            "SELECT kit_number FROM players WHERE player_id=? LIMIT 1;",
            (r.player_id,),
        ).fetchone()
        if not player:
            raise KeyError(f"player not found: {r.player_id}")
        cur.execute(
            """
            INSERT INTO game_rosters(
                game_id, player_id, status, played_in_game, kit_number,
                formation_type, formation_json, created_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?);
            """,
            (
                str(game_id),
                r.player_id,
                r.status,
                1 if r.played_in_game else 0,
                player["kit_number"],
                formation_type,
                formation_json,
                str(now),
            ),
        )
        written += 1
    return written


def list_game_rosters(cur: sqlite3.Cursor, game_id: str) -> List[Dict[str, Any]]:
    rows = cur.execute(
        """
        SELECT player_id, status, played_in_game, kit_number, formation_type, formation_json
        FROM game_rosters
        WHERE game_id=?
        ORDER BY player_id ASC;
        """,
        (str(game_id),),
    ).fetchall()
    return [
        {
            "playerId": str(r["player_id"]),
            "status": str(r["status"]),
            "playedInGame": bool(int(r["played_in_game"] or 0)),
            "kitNumber": r["kit_number"],
            "formationType": r["formation_type"],
            "formation": json_loads(r["formation_json"], default=None),
        }
        for r in rows
    ]


def player_exists(cur: sqlite3.Cursor, player_id: str) -> bool:
    row = cur.execute("SELECT 1 FROM players WHERE player_id=? LIMIT 1;", (str(player_id),)).fetchone()
    return bool(row)


def missing_players(cur: sqlite3.Cursor, player_ids: Iterable[str]) -> List[str]:
    """Subset of ``player_ids`` with no ``players`` row, sorted."""
    return sorted(pid for pid in {str(p) for p in player_ids} if not player_exists(cur, pid))
