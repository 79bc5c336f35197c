from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional

from game_repo import GameRepo, utc_now_iso
from games import repo as g_repo
from games.errors import not_found
from jobs import repo as j_repo
from jobs.types import Job

from . import repo as m_repo
from .dispatcher import CardMutation, MutationKind, on_card_mutation
from .rules import check_can_receive_card, check_card_fields
from .types import Card

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CardWriteResult:
    card: Card
    job: Optional[Job] = None

    def to_api(self) -> dict:
        out = self.card.to_api()
        out["jobId"] = self.job.job_id if self.job else None
        return out


def _dispatch(cur, event: CardMutation, *, now: str) -> Optional[Job]:
    job_spec = on_card_mutation(event)
    if job_spec is None:
        return None
    job = j_repo.enqueue_job(cur, job_spec, now=now)
    logger.info(
        "CARD_JOB_ENQUEUED game=%s mutation=%s type=%s job=%s",
        event.game_id,
        MutationKind(event.kind).value,
        event.card_type,
        job.job_id,
    )
    return job


def _require_game(cur, game_id: str) -> None:
    if g_repo.load_game(cur, game_id) is None:
        raise not_found("Game", game_id)


def _require_player(cur, player_id: str) -> None:
    if not g_repo.player_exists(cur, player_id):
        raise not_found("Player", player_id)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def list_cards(repo: GameRepo, game_id: str) -> List[Card]:
    with repo.transaction() as cur:
        _require_game(cur, game_id)
        return m_repo.list_cards(cur, game_id)


def create_card(
    repo: GameRepo,
    game_id: str,
    *,
    player_id: str,
    card_type: str,
    minute: int,
    reason: Optional[str] = None,
) -> CardWriteResult:
    """Record a card; enqueue recalc-minutes for sending-offs in the same transaction."""
    check_card_fields(minute=minute, reason=reason)
    now = utc_now_iso()
    with repo.transaction() as cur:
        _require_game(cur, game_id)
        _require_player(cur, player_id)
        existing = m_repo.player_card_types(cur, game_id=game_id, player_id=player_id)
        check_can_receive_card(existing, card_type, player_id=player_id)

        card = m_repo.insert_card(
            cur,
            Card(
                card_id=uuid.uuid4().hex,
                game_id=str(game_id),
                player_id=str(player_id),
                card_type=str(card_type),
                minute=int(minute),
                reason=str(reason or ""),
            ),
            now=now,
        )
        job = _dispatch(cur, CardMutation(MutationKind.CREATED, card.game_id, card.card_type), now=now)
    return CardWriteResult(card=card, job=job)


def update_card(
    repo: GameRepo,
    game_id: str,
    card_id: str,
    *,
    player_id: Optional[str] = None,
    card_type: Optional[str] = None,
    minute: Optional[int] = None,
    reason: Optional[str] = None,
) -> CardWriteResult:
    """Patch a card. Fields left as None keep their stored value."""
    check_card_fields(minute=minute, reason=reason)
    now = utc_now_iso()
    with repo.transaction() as cur:
        _require_game(cur, game_id)
        card = m_repo.get_card(cur, game_id=game_id, card_id=card_id)
        if card is None:
            raise not_found("Card", card_id)
        if player_id is not None and player_id != card.player_id:
            _require_player(cur, player_id)

        updated = card.with_changes(
            player_id=str(player_id) if player_id is not None else card.player_id,
            card_type=str(card_type) if card_type is not None else card.card_type,
            minute=int(minute) if minute is not None else card.minute,
            reason=str(reason) if reason is not None else card.reason,
        )
        if updated.card_type != card.card_type or updated.player_id != card.player_id:
            others = m_repo.player_card_types(
                cur, game_id=game_id, player_id=updated.player_id, exclude_card_id=card.card_id
            )
            check_can_receive_card(others, updated.card_type, player_id=updated.player_id)

        updated = m_repo.update_card(cur, updated, now=now)
        job = _dispatch(
            cur,
            CardMutation(MutationKind.UPDATED, updated.game_id, updated.card_type, previous_card_type=card.card_type),
            now=now,
        )
    return CardWriteResult(card=updated, job=job)


def delete_card(repo: GameRepo, game_id: str, card_id: str) -> CardWriteResult:
    now = utc_now_iso()
    with repo.transaction() as cur:
        _require_game(cur, game_id)
        card = m_repo.get_card(cur, game_id=game_id, card_id=card_id)
        if card is None or not m_repo.delete_card(cur, game_id=game_id, card_id=card_id):
            raise not_found("Card", card_id)
        job = _dispatch(cur, CardMutation(MutationKind.DELETED, card.game_id, card.card_type), now=now)
    return CardWriteResult(card=card, job=job)
