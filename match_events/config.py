from __future__ import annotations

"""Tunables for match events (disciplinary cards)."""

CARD_YELLOW = "yellow"
CARD_RED = "red"
CARD_SECOND_YELLOW = "second-yellow"

CARD_TYPES: tuple[str, ...] = (CARD_YELLOW, CARD_RED, CARD_SECOND_YELLOW)

# Card types that remove the player from play. Any mutation touching one of
# these changes minutes played, so it enqueues a recalc-minutes job.
SENDING_OFF_TYPES: frozenset[str] = frozenset({CARD_RED, CARD_SECOND_YELLOW})

MINUTE_MIN: int = 1
MINUTE_MAX: int = 120

REASON_MAX_LEN: int = 200
