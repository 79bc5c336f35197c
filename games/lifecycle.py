from __future__ import annotations

"""Game lifecycle state machine.

States: Scheduled (initial) -> Played -> Done, Scheduled -> Postponed, and the
explicit edit path Done -> Played. Each transition validates everything first
and returns a new Game (plus side-effect data for the caller to persist); no
function here mutates its input or touches the database.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from . import config as g_cfg
from .drafts import clear_draft, merge_draft
from .errors import DRAFT_INVARIANT_VIOLATED, INCOMPLETE_REPORT, INVALID_LINEUP, INVALID_STATUS, GameEngineError
from .types import DraftKind, DraftSlot, Game, normalize_match_duration

logger = logging.getLogger(__name__)

_SHAPE_RE = re.compile(r"^\d+(-\d+)+$")


@dataclass(frozen=True, slots=True)
class RosterAssignment:
    player_id: str
    status: str
    played_in_game: bool


@dataclass(frozen=True, slots=True)
class StartGameResult:
    game: Game
    rosters: Tuple[RosterAssignment, ...]
    formation: Any
    formation_type: Optional[str]


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------


def check_transition(game: Game, to_status: str, *, from_status: str) -> None:
    """Require ``game.status == from_status`` and an allowed (from, to) pair."""
    if game.status != from_status or (game.status, to_status) not in g_cfg.ALLOWED_TRANSITIONS:
        raise GameEngineError(
            INVALID_STATUS,
            f"Cannot move game from status {game.status} to {to_status}",
            {"status": game.status, "target": to_status},
        )


def check_draft_invariant(game: Game) -> None:
    """Raise if the held draft slot disagrees with ``game.status``.

    Scheduled may hold only a lineup draft, Played only a report draft, Done
    nothing. Postponed may keep a parked lineup draft.
    """
    kind = game.draft.kind
    ok = (
        kind is DraftKind.NONE
        or (game.status == g_cfg.STATUS_SCHEDULED and kind is DraftKind.LINEUP)
        or (game.status == g_cfg.STATUS_PLAYED and kind is DraftKind.REPORT)
        or (game.status == g_cfg.STATUS_POSTPONED and kind is DraftKind.LINEUP)
    )
    if not ok:
        raise GameEngineError(
            DRAFT_INVARIANT_VIOLATED,
            f"game {game.game_id}: {kind.value} draft held while {game.status}",
            {"game_id": game.game_id, "status": game.status, "draft": kind.value},
        )


# ---------------------------------------------------------------------------
# Scheduled -> Played
# ---------------------------------------------------------------------------


def required_starting_count(formation_type: Optional[str]) -> int:
    """Number of ``Starting Lineup`` players a formation needs.

    "9-a-side" -> 9, "11-a-side" -> 11. No type, or a tactical shape such as
    "4-4-2" / "1-4-3-3", -> DEFAULT_STARTING_LINEUP_SIZE.
    """
    if formation_type is None or not str(formation_type).strip():
        return g_cfg.DEFAULT_STARTING_LINEUP_SIZE
    s = str(formation_type).strip().lower()
    if s in g_cfg.GAME_SIZES:
        return g_cfg.GAME_SIZES[s]
    if _SHAPE_RE.match(s):
        return g_cfg.DEFAULT_STARTING_LINEUP_SIZE
    raise GameEngineError(
        INVALID_LINEUP,
        f"Unknown formationType: {formation_type!r}",
        {"formationType": str(formation_type), "allowed": sorted(g_cfg.GAME_SIZES)},
    )


def _resolve_lineup(game: Game, lineup: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    # Keys missing from the request are promoted from the outgoing lineup draft.
    draft = game.lineup_draft or {}
    return merge_draft(draft, {k: v for k, v in (lineup or {}).items() if v is not None})


def start_game(game: Game, lineup: Optional[Mapping[str, Any]] = None) -> StartGameResult:
    """Scheduled -> Played ("game was played").

    ``lineup`` = {"rosters": {playerId: rosterStatus}, "formation": ..., "formationType": ...}.
    """
    check_transition(game, g_cfg.STATUS_PLAYED, from_status=g_cfg.STATUS_SCHEDULED)
    resolved = _resolve_lineup(game, lineup)

    rosters = resolved.get("rosters")
    if not isinstance(rosters, Mapping) or not rosters:
        raise GameEngineError(INVALID_LINEUP, "Rosters are required to start a game", {})
    formation = resolved.get("formation")
    if formation is None:
        raise GameEngineError(INVALID_LINEUP, "Formation is required to start a game", {})
    formation_type = resolved.get("formationType")

    bad = {str(pid): st for pid, st in rosters.items() if st not in g_cfg.ROSTER_STATUSES}
    if bad:
        raise GameEngineError(
            INVALID_LINEUP,
            "Unknown roster status",
            {"invalid": bad, "allowed": list(g_cfg.ROSTER_STATUSES)},
        )

    required = required_starting_count(formation_type)
    starting = sorted(str(pid) for pid, st in rosters.items() if st == g_cfg.ROSTER_STARTING)
    if len(starting) != required:
        raise GameEngineError(
            INVALID_LINEUP,
            f"Starting lineup must have exactly {required} players, got {len(starting)}",
            {"required": required, "actual": len(starting), "formationType": formation_type},
        )

    assignments = tuple(
        RosterAssignment(
            player_id=str(pid),
            status=str(st),
            played_in_game=(st == g_cfg.ROSTER_STARTING),
        )
        for pid, st in sorted(rosters.items(), key=lambda kv: str(kv[0]))
    )
    # Lineup draft is consumed; the report slot starts empty under Played.
    played = game.with_changes(status=g_cfg.STATUS_PLAYED, draft=DraftSlot.empty())
    return StartGameResult(game=played, rosters=assignments, formation=formation, formation_type=formation_type)


# ---------------------------------------------------------------------------
# Played -> Done
# ---------------------------------------------------------------------------


def collect_report(game: Game, report: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Report inputs: the report draft, shallow-overridden by explicit fields."""
    explicit = {k: v for k, v in (report or {}).items() if v is not None}
    return merge_draft(game.report_draft or {}, explicit)


def missing_report_fields(report: Mapping[str, Any]) -> List[str]:
    missing: List[str] = []
    score = report.get("finalScore")
    score = score if isinstance(score, Mapping) else {}
    for key in g_cfg.SCORE_FIELDS:
        if score.get(key) is None:
            missing.append(f"finalScore.{key}")

    summary = report.get("teamSummary")
    summary = summary if isinstance(summary, Mapping) else {}
    for key in g_cfg.SUMMARY_FIELDS:
        v = summary.get(key)
        if not isinstance(v, str) or not v.strip():
            missing.append(f"teamSummary.{key}")
    return missing


def submit_final_report(game: Game, report: Optional[Mapping[str, Any]] = None) -> Game:
    """Played -> Done ("submit final report").

    Raises GameEngineError(INCOMPLETE_REPORT) listing missing fields; the game
    (and its report draft) is left unchanged in that case.
    """
    check_transition(game, g_cfg.STATUS_DONE, from_status=g_cfg.STATUS_PLAYED)
    inputs = collect_report(game, report)
    missing = missing_report_fields(inputs)
    if missing:
        raise GameEngineError(
            INCOMPLETE_REPORT,
            "Final report is incomplete: " + ", ".join(missing),
            {"missing": missing},
        )

    score = inputs["finalScore"]
    summary = inputs["teamSummary"]
    try:
        our_score = int(score["ourScore"])
        opponent_score = int(score["opponentScore"])
        match_duration = normalize_match_duration(inputs.get("matchDuration") or game.match_duration)
    except (TypeError, ValueError) as exc:
        raise GameEngineError(INCOMPLETE_REPORT, f"Final report has invalid values: {exc}", {"missing": [], "invalid": str(exc)}) from exc
    if our_score < 0 or opponent_score < 0:
        raise GameEngineError(INCOMPLETE_REPORT, "Scores must be >= 0", {"missing": [], "invalid": "negative score"})

    done = clear_draft(game, DraftKind.REPORT).with_changes(
        status=g_cfg.STATUS_DONE,
        our_score=our_score,
        opponent_score=opponent_score,
        defense_summary=str(summary["defenseSummary"]).strip(),
        midfield_summary=str(summary["midfieldSummary"]).strip(),
        attack_summary=str(summary["attackSummary"]).strip(),
        general_summary=str(summary["generalSummary"]).strip(),
        match_duration=match_duration,
    )
    return done


# ---------------------------------------------------------------------------
# Scheduled -> Postponed, Done -> Played
# ---------------------------------------------------------------------------


def postpone_game(game: Game, *, clear_lineup: Optional[bool] = None) -> Game:
    check_transition(game, g_cfg.STATUS_POSTPONED, from_status=g_cfg.STATUS_SCHEDULED)
    clear = g_cfg.CLEAR_LINEUP_DRAFT_ON_POSTPONE if clear_lineup is None else bool(clear_lineup)
    postponed = game.with_changes(status=g_cfg.STATUS_POSTPONED)
    if clear:
        postponed = clear_draft(postponed, DraftKind.LINEUP)
    return postponed


def report_draft_from_finalized(game: Game) -> Dict[str, Any]:
    """Rebuild a report draft (draft shape) from a Done game's finalized fields."""
    return {
        "finalScore": {"ourScore": game.our_score, "opponentScore": game.opponent_score},
        "teamSummary": {
            "defenseSummary": game.defense_summary,
            "midfieldSummary": game.midfield_summary,
            "attackSummary": game.attack_summary,
            "generalSummary": game.general_summary,
        },
        "matchDuration": dict(game.match_duration),
    }


def reopen_report(game: Game, *, restore_draft: bool = False) -> Game:
    """Done -> Played (edit a submitted report).

    Finalized fields stay in place until the next submit. With
    ``restore_draft`` the report slot is seeded from them.
    """
    check_transition(game, g_cfg.STATUS_PLAYED, from_status=g_cfg.STATUS_DONE)
    draft = DraftSlot.report(report_draft_from_finalized(game)) if restore_draft else DraftSlot.empty()
    return game.with_changes(status=g_cfg.STATUS_PLAYED, draft=draft)
