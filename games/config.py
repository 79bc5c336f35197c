from __future__ import annotations

"""Tunables for the game lifecycle engine.

This module is the single place to tune:
- which statuses accept draft writes (and which slot they write)
- roster statuses accepted by the start-game transition
- report fields required to finalize a game
- the postponement draft policy
"""

# ---------------------------------------------------------------------------
# Statuses / draft slots
# ---------------------------------------------------------------------------

STATUS_SCHEDULED = "Scheduled"
STATUS_PLAYED = "Played"
STATUS_DONE = "Done"
STATUS_POSTPONED = "Postponed"

GAME_STATUSES: tuple[str, ...] = (STATUS_SCHEDULED, STATUS_PLAYED, STATUS_DONE, STATUS_POSTPONED)

# status -> writable draft slot. Statuses missing here reject all draft writes.
DRAFT_SLOT_BY_STATUS: dict[str, str] = {
    STATUS_SCHEDULED: "lineup",
    STATUS_PLAYED: "report",
}

# (from, to) pairs the state machine accepts.
ALLOWED_TRANSITIONS: frozenset[tuple[str, str]] = frozenset(
    {
        (STATUS_SCHEDULED, STATUS_PLAYED),
        (STATUS_PLAYED, STATUS_DONE),
        (STATUS_SCHEDULED, STATUS_POSTPONED),
        (STATUS_DONE, STATUS_PLAYED),
    }
)

# Postponement is not data loss: the lineup in progress stays parked on the game
# (not readable/writable until the game is Scheduled again through plain CRUD).
CLEAR_LINEUP_DRAFT_ON_POSTPONE: bool = False

# ---------------------------------------------------------------------------
# Start game (Scheduled -> Played)
# ---------------------------------------------------------------------------

ROSTER_STARTING = "Starting Lineup"
ROSTER_BENCH = "Bench"
ROSTER_UNAVAILABLE = "Unavailable"
ROSTER_NOT_IN_SQUAD = "Not in Squad"

ROSTER_STATUSES: tuple[str, ...] = (ROSTER_STARTING, ROSTER_BENCH, ROSTER_UNAVAILABLE, ROSTER_NOT_IN_SQUAD)

# formationType (game size) -> number of "Starting Lineup" players.
GAME_SIZES: dict[str, int] = {
    "9-a-side": 9,
    "11-a-side": 11,
}

# Used when the lineup carries no formationType, or carries a tactical shape
# such as "4-4-2" (a shape does not fix the squad size).
DEFAULT_STARTING_LINEUP_SIZE: int = 11

# ---------------------------------------------------------------------------
# Final report (Played -> Done)
# ---------------------------------------------------------------------------

SCORE_FIELDS: tuple[str, ...] = ("ourScore", "opponentScore")

# teamSummary key -> games column
SUMMARY_FIELDS: dict[str, str] = {
    "defenseSummary": "defense_summary",
    "midfieldSummary": "midfield_summary",
    "attackSummary": "attack_summary",
    "generalSummary": "general_summary",
}

DEFAULT_MATCH_DURATION: dict[str, int] = {
    "regularTime": 90,
    "firstHalfExtraTime": 0,
    "secondHalfExtraTime": 0,
}

MATCH_TYPES: tuple[str, ...] = ("league", "cup", "friendly")
