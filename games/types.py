from __future__ import annotations

"""Typed game records for the lifecycle engine.

The draft is a tagged union (DraftSlot) instead of two nullable fields, so a
Game can never hold a lineup draft and a report draft at the same time.
``lineup_draft`` / ``report_draft`` are derived views kept for the JSON API.

We keep this module free of DB I/O.
"""

import copy
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from . import config as g_cfg


class DraftKind(str, Enum):
    LINEUP = "lineup"
    REPORT = "report"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class DraftSlot:
    kind: DraftKind = DraftKind.NONE
    data: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        if self.kind is DraftKind.NONE and self.data is not None:
            raise ValueError("an empty draft slot cannot carry data")
        if self.kind is not DraftKind.NONE and not isinstance(self.data, dict):
            raise ValueError(f"{self.kind.value} draft requires a dict payload")

    @classmethod
    def empty(cls) -> "DraftSlot":
        return cls(DraftKind.NONE, None)

    @classmethod
    def lineup(cls, data: Mapping[str, Any]) -> "DraftSlot":
        return cls(DraftKind.LINEUP, copy.deepcopy(dict(data)))

    @classmethod
    def report(cls, data: Mapping[str, Any]) -> "DraftSlot":
        return cls(DraftKind.REPORT, copy.deepcopy(dict(data)))

    def to_api(self) -> Dict[str, Any]:
        return {"slot": self.kind.value, "data": copy.deepcopy(self.data) if self.data is not None else {}}


def slot_for_status(status: str) -> DraftKind:
    """Draft slot writable under ``status`` (NONE when drafts are rejected)."""
    raw = g_cfg.DRAFT_SLOT_BY_STATUS.get(str(status))
    return DraftKind(raw) if raw else DraftKind.NONE


def total_match_duration(match_duration: Optional[Mapping[str, Any]]) -> int:
    md = dict(g_cfg.DEFAULT_MATCH_DURATION)
    if isinstance(match_duration, Mapping):
        md.update({k: v for k, v in match_duration.items() if k in md and v is not None})
    return int(md["regularTime"]) + int(md["firstHalfExtraTime"]) + int(md["secondHalfExtraTime"])


def normalize_match_duration(raw: Optional[Mapping[str, Any]]) -> Dict[str, int]:
    """Fill missing match duration parts with defaults; reject negative values."""
    md = dict(g_cfg.DEFAULT_MATCH_DURATION)
    if isinstance(raw, Mapping):
        for k in md:
            v = raw.get(k)
            if v is None:
                continue
            iv = int(v)
            if iv < 0:
                raise ValueError(f"matchDuration.{k} must be >= 0")
            md[k] = iv
    return md


@dataclass(frozen=True, slots=True)
class Game:
    game_id: str
    team_id: str
    opponent: str
    status: str = g_cfg.STATUS_SCHEDULED
    draft: DraftSlot = field(default_factory=DraftSlot.empty)
    game_date: Optional[str] = None
    location: Optional[str] = None
    match_type: str = "league"

    # Finalized fields (authoritative once the game is Done)
    our_score: Optional[int] = None
    opponent_score: Optional[int] = None
    defense_summary: Optional[str] = None
    midfield_summary: Optional[str] = None
    attack_summary: Optional[str] = None
    general_summary: Optional[str] = None

    match_duration: Dict[str, int] = field(default_factory=lambda: dict(g_cfg.DEFAULT_MATCH_DURATION))
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def lineup_draft(self) -> Optional[Dict[str, Any]]:
        return self.draft.data if self.draft.kind is DraftKind.LINEUP else None

    @property
    def report_draft(self) -> Optional[Dict[str, Any]]:
        return self.draft.data if self.draft.kind is DraftKind.REPORT else None

    @property
    def total_match_duration(self) -> int:
        return total_match_duration(self.match_duration)

    @property
    def final_score_display(self) -> Optional[str]:
        if self.our_score is None or self.opponent_score is None:
            return None
        return f"{self.our_score} - {self.opponent_score}"

    def with_changes(self, **changes: Any) -> "Game":
        return replace(self, **changes)

    def to_api(self) -> Dict[str, Any]:
        return {
            "gameId": self.game_id,
            "teamId": self.team_id,
            "opponent": self.opponent,
            "date": self.game_date,
            "location": self.location,
            "matchType": self.match_type,
            "status": self.status,
            "lineupDraft": copy.deepcopy(self.lineup_draft),
            "reportDraft": copy.deepcopy(self.report_draft),
            "ourScore": self.our_score,
            "opponentScore": self.opponent_score,
            "finalScoreDisplay": self.final_score_display,
            "defenseSummary": self.defense_summary,
            "midfieldSummary": self.midfield_summary,
            "attackSummary": self.attack_summary,
            "generalSummary": self.general_summary,
            "matchDuration": dict(self.match_duration),
            "totalMatchDuration": self.total_match_duration,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
