from __future__ import annotations

"""Game lifecycle service: load -> validate/transition -> save, one transaction each.

Every public function opens ``repo.transaction()`` (BEGIN IMMEDIATE), loads the
Game, applies a pure function from drafts.py / lifecycle.py, checks the draft
invariant and writes the result back. A GameEngineError raised anywhere in
between rolls the whole transaction back, so nothing is partially applied.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from game_repo import GameRepo, utc_now_iso
from jobs import repo as j_repo
from jobs.types import Job, recalc_minutes

from . import config as g_cfg
from . import repo as g_repo
from .drafts import read_draft, write_draft
from .errors import NOT_FOUND, GameEngineError, not_found
from .lifecycle import (
    check_draft_invariant,
    postpone_game,
    reopen_report,
    start_game as _start_game,
    submit_final_report,
)
from .types import DraftSlot, Game, normalize_match_duration

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TransitionResult:
    game: Game
    rosters: Optional[List[Dict[str, Any]]] = None
    job: Optional[Job] = None

    def to_api(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"game": self.game.to_api()}
        if self.rosters is not None:
            out["rosters"] = self.rosters
        if self.job is not None:
            out["job"] = self.job.to_api()
        return out


def _load(cur, game_id: str) -> Game:
    game = g_repo.load_game(cur, game_id)
    if game is None:
        raise not_found("Game", game_id)
    return game


def _save(cur, before: Game, after: Game, *, now: str) -> Game:
    check_draft_invariant(after)
    saved = g_repo.save_game(cur, after, now=now)
    if before.status != after.status:
        logger.info("GAME_TRANSITION game=%s from=%s to=%s", after.game_id, before.status, after.status)
    return saved


# ---------------------------------------------------------------------------
# Minimal CRUD
# ---------------------------------------------------------------------------


def create_game(
    repo: GameRepo,
    *,
    team_id: str,
    opponent: str,
    game_date: Optional[str] = None,
    location: Optional[str] = None,
    match_type: str = "league",
    match_duration: Optional[Mapping[str, Any]] = None,
    game_id: Optional[str] = None,
) -> Game:
    """Create a Scheduled game with an empty draft."""
    if match_type not in g_cfg.MATCH_TYPES:
        raise ValueError(f"Unknown matchType: {match_type}. Allowed: {list(g_cfg.MATCH_TYPES)}")
    md = normalize_match_duration(match_duration)

    game = Game(
        game_id=str(game_id or uuid.uuid4().hex),
        team_id=str(team_id),
        opponent=str(opponent),
        status=g_cfg.STATUS_SCHEDULED,
        draft=DraftSlot.empty(),
        game_date=game_date,
        location=location,
        match_type=match_type,
        match_duration=md,
    )
    now = utc_now_iso()
    with repo.transaction() as cur:
        created = g_repo.insert_game(cur, game, now=now)
    logger.info("GAME_CREATED game=%s team=%s", created.game_id, created.team_id)
    return created


def get_game(repo: GameRepo, game_id: str) -> Game:
    with repo.transaction() as cur:
        return _load(cur, game_id)


def list_rosters(repo: GameRepo, game_id: str) -> List[Dict[str, Any]]:
    with repo.transaction() as cur:
        _load(cur, game_id)
        return g_repo.list_game_rosters(cur, game_id)


# ---------------------------------------------------------------------------
# Drafts
# ---------------------------------------------------------------------------


def get_draft(repo: GameRepo, game_id: str) -> DraftSlot:
    return read_draft(get_game(repo, game_id))


def put_draft(repo: GameRepo, game_id: str, partial: Mapping[str, Any]) -> DraftSlot:
    """Autosave: shallow-merge ``partial`` into the active slot and return the merged slot."""
    now = utc_now_iso()
    with repo.transaction() as cur:
        game = _load(cur, game_id)
        updated = write_draft(game, partial)
        _save(cur, game, updated, now=now)
    return read_draft(updated)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def start_game(repo: GameRepo, game_id: str, lineup: Optional[Mapping[str, Any]] = None) -> TransitionResult:
    now = utc_now_iso()
    with repo.transaction() as cur:
        game = _load(cur, game_id)
        result = _start_game(game, lineup)
        missing = g_repo.missing_players(cur, (r.player_id for r in result.rosters))
        if missing:
            raise GameEngineError(
                NOT_FOUND,
                f"Player not found: {', '.join(missing)}",
                {"player_id": missing[0], "missing": missing},
            )
        saved = _save(cur, game, result.game, now=now)
        g_repo.replace_game_rosters(
            cur,
            game_id=saved.game_id,
            rosters=result.rosters,
            formation=result.formation,
            formation_type=result.formation_type,
            now=now,
        )
        rosters = g_repo.list_game_rosters(cur, saved.game_id)
    return TransitionResult(game=saved, rosters=rosters)


def submit_report(repo: GameRepo, game_id: str, report: Optional[Mapping[str, Any]] = None) -> TransitionResult:
    """Played -> Done; enqueues one recalc-minutes job in the same transaction."""
    now = utc_now_iso()
    with repo.transaction() as cur:
        game = _load(cur, game_id)
        done = submit_final_report(game, report)
        saved = _save(cur, game, done, now=now)
        job = j_repo.enqueue_job(cur, recalc_minutes(saved.game_id), now=now)
    logger.info("GAME_REPORT_SUBMITTED game=%s score=%s job=%s", saved.game_id, saved.final_score_display, job.job_id)
    return TransitionResult(game=saved, job=job)


def postpone(repo: GameRepo, game_id: str, *, clear_lineup: Optional[bool] = None) -> TransitionResult:
    now = utc_now_iso()
    with repo.transaction() as cur:
        game = _load(cur, game_id)
        saved = _save(cur, game, postpone_game(game, clear_lineup=clear_lineup), now=now)
    return TransitionResult(game=saved)


def reopen(repo: GameRepo, game_id: str, *, restore_draft: bool = False) -> TransitionResult:
    now = utc_now_iso()
    with repo.transaction() as cur:
        game = _load(cur, game_id)
        saved = _save(cur, game, reopen_report(game, restore_draft=restore_draft), now=now)
    return TransitionResult(game=saved)
