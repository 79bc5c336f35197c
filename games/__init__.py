"""Game lifecycle subsystem.

Public API (v1)
---------------
- Draft store: read_draft / write_draft / clear_draft / merge_draft (pure)
- State machine: start_game / submit_final_report / postpone_game / reopen_report (pure)
- Service (persisted, one transaction per call): see games.service
"""

from .drafts import clear_draft, merge_draft, read_draft, write_draft
from .errors import GameEngineError
from .lifecycle import (
    check_draft_invariant,
    postpone_game,
    reopen_report,
    start_game,
    submit_final_report,
)
from .types import DraftKind, DraftSlot, Game

__all__ = [
    "DraftKind",
    "DraftSlot",
    "Game",
    "GameEngineError",
    "check_draft_invariant",
    "clear_draft",
    "merge_draft",
    "postpone_game",
    "read_draft",
    "reopen_report",
    "start_game",
    "submit_final_report",
    "write_draft",
]
