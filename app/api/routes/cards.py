from __future__ import annotations

import logging

from fastapi import APIRouter

import state
from game_repo import GameRepo
from match_events import service as m_service
from app.schemas.cards import CardCreateRequest, CardUpdateRequest
from app.services.error_facade import _http_error

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/games/{game_id}/cards")
async def api_list_cards(game_id: str):
    try:
        with GameRepo(state.get_db_path()) as repo:
            cards = m_service.list_cards(repo, game_id)
        return {"gameId": game_id, "cards": [c.to_api() for c in cards]}
    except Exception as e:
        raise _http_error(e, op="list cards") from e


@router.post("/api/games/{game_id}/cards")
async def api_create_card(game_id: str, req: CardCreateRequest):
    """Record a card. Red / second-yellow also enqueue a recalc-minutes job (jobId in response)."""
    try:
        with GameRepo(state.get_db_path()) as repo:
            result = m_service.create_card(
                repo,
                game_id,
                player_id=req.playerId,
                card_type=req.cardType,
                minute=req.minute,
                reason=req.reason,
            )
        return result.to_api()
    except Exception as e:
        raise _http_error(e, op="create card") from e


@router.put("/api/games/{game_id}/cards/{card_id}")
async def api_update_card(game_id: str, card_id: str, req: CardUpdateRequest):
    try:
        with GameRepo(state.get_db_path()) as repo:
            result = m_service.update_card(
                repo,
                game_id,
                card_id,
                player_id=req.playerId,
                card_type=req.cardType,
                minute=req.minute,
                reason=req.reason,
            )
        return result.to_api()
    except Exception as e:
        raise _http_error(e, op="update card") from e


@router.delete("/api/games/{game_id}/cards/{card_id}")
async def api_delete_card(game_id: str, card_id: str):
    try:
        with GameRepo(state.get_db_path()) as repo:
            result = m_service.delete_card(repo, game_id, card_id)
        return {"deleted": True, **result.to_api()}
    except Exception as e:
        raise _http_error(e, op="delete card") from e
