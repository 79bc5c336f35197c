from __future__ import annotations

"""DB access layer for match events (cards).

This module is intentionally *pure DB I/O*: eligibility rules live in
match_events/rules.py and dispatch in match_events/dispatcher.py.
"""

import sqlite3
from typing import List, Optional

from .types import Card

_CARD_COLUMNS = "card_id, game_id, player_id, card_type, minute, reason, created_at, updated_at"


def _row_to_card(row: sqlite3.Row) -> Card:
    return Card(
        card_id=str(row["card_id"]),
        game_id=str(row["game_id"]),
        player_id=str(row["player_id"]),
        card_type=str(row["card_type"]),
        minute=int(row["minute"]),
        reason=str(row["reason"] or ""),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def get_card(cur: sqlite3.Cursor, *, game_id: str, card_id: str) -> Optional[Card]:
    row = cur.execute(
        f"SELECT {_CARD_COLUMNS} FROM cards WHERE card_id=? AND game_id=? LIMIT 1;",
        (str(card_id), str(game_id)),
    ).fetchone()
    return _row_to_card(row) if row else None


def list_cards(cur: sqlite3.Cursor, game_id: str) -> List[Card]:
    rows = cur.execute(
        f"SELECT {_CARD_COLUMNS} FROM cards WHERE game_id=? ORDER BY minute ASC, created_at ASC, rowid ASC;",
        (str(game_id),),
    ).fetchall()
    return [_row_to_card(r) for r in rows]


def player_card_types(
    cur: sqlite3.Cursor,
    *,
    game_id: str,
    player_id: str,
    exclude_card_id: Optional[str] = None,
) -> List[str]:
    q = "SELECT card_type FROM cards WHERE game_id=? AND player_id=?"
    params: list = [str(game_id), str(player_id)]
    if exclude_card_id:
        q += " AND card_id<>?"
        params.append(str(exclude_card_id))
    return [str(r["card_type"]) for r in cur.execute(q + ";", params).fetchall()]


def insert_card(cur: sqlite3.Cursor, card: Card, *, now: str) -> Card:
    cur.execute(
        """
        INSERT INTO cards(card_id, game_id, player_id, card_type, minute, reason, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?);
        """,
        (card.card_id, card.game_id, card.player_id, card.card_type, int(card.minute), card.reason, str(now), str(now)),
    )
    return card.with_changes(created_at=str(now), updated_at=str(now))


def update_card(cur: sqlite3.Cursor, card: Card, *, now: str) -> Card:
    cur.execute(
        """
        UPDATE cards SET player_id=?, card_type=?, minute=?, reason=?, updated_at=?
        WHERE card_id=? AND game_id=?;
        """,
        (card.player_id, card.card_type, int(card.minute), card.reason, str(now), card.card_id, card.game_id),
    )
    if cur.rowcount != 1:
        raise KeyError(f"card not found: {card.card_id}")
    return card.with_changes(updated_at=str(now))


def delete_card(cur: sqlite3.Cursor, *, game_id: str, card_id: str) -> bool:
    cur.execute("DELETE FROM cards WHERE card_id=? AND game_id=?;", (str(card_id), str(game_id)))
    return cur.rowcount == 1
