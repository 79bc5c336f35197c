from __future__ import annotations

import logging

from fastapi import APIRouter

import state
from game_repo import GameRepo
from app.schemas.players import PlayerUpsertRequest
from app.services.error_facade import _http_error

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/api/players")
async def api_upsert_player(req: PlayerUpsertRequest):
    """Register (or update) a player so cards and rosters can reference it."""
    try:
        with GameRepo(state.get_db_path()) as repo:
            return repo.upsert_player(
                req.playerId,
                full_name=req.fullName,
                team_id=req.teamId,
                kit_number=req.kitNumber,
            )
    except Exception as e:
        raise _http_error(e, op="register player") from e
