from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body

import state
from game_repo import GameRepo
from games import service as g_service
from app.schemas.games import (
    GameCreateRequest,
    PostponeRequest,
    ReopenReportRequest,
    StartGameRequest,
    SubmitReportRequest,
)
from app.services.error_facade import _http_error

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/api/games")
async def api_create_game(req: GameCreateRequest):
    """Create a Scheduled game (empty draft)."""
    try:
        with GameRepo(state.get_db_path()) as repo:
            game = g_service.create_game(
                repo,
                team_id=req.teamId,
                opponent=req.opponent,
                game_date=req.date,
                location=req.location,
                match_type=req.matchType,
                match_duration=req.matchDuration.model_dump() if req.matchDuration else None,
            )
        return game.to_api()
    except Exception as e:
        raise _http_error(e, op="create game") from e


@router.get("/api/games/{game_id}")
async def api_get_game(game_id: str):
    try:
        with GameRepo(state.get_db_path()) as repo:
            game = g_service.get_game(repo, game_id)
            rosters = g_service.list_rosters(repo, game_id)
        out = game.to_api()
        out["rosters"] = rosters
        return out
    except Exception as e:
        raise _http_error(e, op="get game") from e


# ---------------------------------------------------------------------------
# Drafts
# ---------------------------------------------------------------------------


@router.get("/api/games/{game_id}/draft")
async def api_get_game_draft(game_id: str):
    """Active draft slot for the game's status: {"slot": lineup|report|none, "data": {...}}."""
    try:
        with GameRepo(state.get_db_path()) as repo:
            draft = g_service.get_draft(repo, game_id)
        return {"gameId": game_id, **draft.to_api()}
    except Exception as e:
        raise _http_error(e, op="get draft") from e


@router.put("/api/games/{game_id}/draft")
async def api_put_game_draft(game_id: str, payload: Any = Body(...)):
    """Autosave: shallow-merge the body into the active slot and echo the merged slot."""
    try:
        with GameRepo(state.get_db_path()) as repo:
            draft = g_service.put_draft(repo, game_id, payload)
        return {"gameId": game_id, **draft.to_api()}
    except Exception as e:
        raise _http_error(e, op="save draft") from e


# ---------------------------------------------------------------------------
# Status transitions
# ---------------------------------------------------------------------------


@router.post("/api/games/{game_id}/start-game")
async def api_start_game(game_id: str, req: Optional[StartGameRequest] = None):
    """Scheduled -> Played. Persists the roster and consumes the lineup draft."""
    lineup = req.model_dump(exclude_none=True) if req else None
    try:
        with GameRepo(state.get_db_path()) as repo:
            result = g_service.start_game(repo, game_id, lineup)
        return result.to_api()
    except Exception as e:
        raise _http_error(e, op="start game") from e


@router.post("/api/games/{game_id}/submit-report")
async def api_submit_report(game_id: str, req: Optional[SubmitReportRequest] = None):
    """Played -> Done. Explicit fields override the report draft (shallow)."""
    report = req.model_dump(exclude_none=True) if req else None
    try:
        with GameRepo(state.get_db_path()) as repo:
            result = g_service.submit_report(repo, game_id, report)
        return result.to_api()
    except Exception as e:
        raise _http_error(e, op="submit report") from e


@router.post("/api/games/{game_id}/postpone")
async def api_postpone_game(game_id: str, req: Optional[PostponeRequest] = None):
    try:
        with GameRepo(state.get_db_path()) as repo:
            result = g_service.postpone(repo, game_id, clear_lineup=req.clearLineupDraft if req else None)
        return result.to_api()
    except Exception as e:
        raise _http_error(e, op="postpone game") from e


@router.post("/api/games/{game_id}/reopen-report")
async def api_reopen_report(game_id: str, req: Optional[ReopenReportRequest] = None):
    """Done -> Played, to edit a submitted report."""
    try:
        with GameRepo(state.get_db_path()) as repo:
            result = g_service.reopen(repo, game_id, restore_draft=bool(req and req.restoreDraft))
        return result.to_api()
    except Exception as e:
        raise _http_error(e, op="reopen report") from e
