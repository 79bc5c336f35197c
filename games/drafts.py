from __future__ import annotations

"""Draft store: autosaved, non-authoritative work attached to a Game.

Two mutually exclusive slots exist (lineup while Scheduled, report while
Played). Writes are a one-level (shallow) merge: a top-level key in the
partial payload replaces the stored key wholesale, absent keys survive. Nested
maps such as ``playerMatchStats`` are therefore replaced, not merged, and
callers must resend every entry they want to keep.

All functions are pure: they return a new Game and never touch the store.
"""

import copy
import logging
from typing import Any, Dict, Mapping, Optional

from . import config as g_cfg
from .errors import INVALID_DRAFT, INVALID_STATUS, GameEngineError
from .types import DraftKind, DraftSlot, Game, slot_for_status

logger = logging.getLogger(__name__)


def merge_draft(existing: Optional[Mapping[str, Any]], partial: Mapping[str, Any]) -> Dict[str, Any]:
    """Return ``{**existing, **partial}`` without aliasing either input."""
    merged: Dict[str, Any] = copy.deepcopy(dict(existing or {}))
    for key, value in partial.items():
        merged[str(key)] = copy.deepcopy(value)
    return merged


def read_draft(game: Game) -> DraftSlot:
    """Active slot and payload, derived from ``game.status``.

    A slot that is empty for the current status reads as an empty payload;
    statuses without a writable slot read as ``none``.
    """
    kind = slot_for_status(game.status)
    if kind is DraftKind.NONE:
        return DraftSlot.empty()
    data = game.draft.data if game.draft.kind is kind else None
    return DraftSlot(kind, copy.deepcopy(data) if data is not None else {})


def invalid_status_for_draft(status: str) -> GameEngineError:
    return GameEngineError(
        INVALID_STATUS,
        f"Cannot save draft for game with status: {status}. "
        f"Drafts are only allowed for {g_cfg.STATUS_SCHEDULED} or {g_cfg.STATUS_PLAYED} games.",
        {"status": status, "allowed": sorted(g_cfg.DRAFT_SLOT_BY_STATUS)},
    )


def write_draft(game: Game, partial: Mapping[str, Any]) -> Game:
    """Shallow-merge ``partial`` into the slot selected by ``game.status``.

    Raises:
        GameEngineError(INVALID_STATUS): status is Done or Postponed.
        GameEngineError(INVALID_DRAFT): payload is not a non-empty object.
    """
    kind = slot_for_status(game.status)
    if kind is DraftKind.NONE:
        raise invalid_status_for_draft(game.status)
    if not isinstance(partial, Mapping):
        raise GameEngineError(INVALID_DRAFT, "Draft payload must be a JSON object", {"type": type(partial).__name__})
    if not partial:
        raise GameEngineError(INVALID_DRAFT, "Draft payload must contain at least one field", {})

    existing = game.draft.data if game.draft.kind is kind else None
    merged = merge_draft(existing, partial)
    logger.debug("DRAFT_WRITE game=%s slot=%s keys=%s", game.game_id, kind.value, sorted(partial))
    return game.with_changes(draft=DraftSlot(kind, merged))


def clear_draft(game: Game, slot: DraftKind | str) -> Game:
    """Empty ``slot`` if the game currently holds it. Idempotent."""
    kind = DraftKind(slot)
    if kind is DraftKind.NONE or game.draft.kind is not kind:
        return game
    return game.with_changes(draft=DraftSlot.empty())
