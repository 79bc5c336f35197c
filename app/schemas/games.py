from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel


class MatchDuration(BaseModel):
    regularTime: int = 90
    firstHalfExtraTime: int = 0
    secondHalfExtraTime: int = 0


class GameCreateRequest(BaseModel):
    teamId: str
    opponent: str
    date: Optional[str] = None  # YYYY-MM-DD
    location: Optional[str] = None
    matchType: Literal["league", "cup", "friendly"] = "league"
    matchDuration: Optional[MatchDuration] = None


class StartGameRequest(BaseModel):
    # Missing keys are taken from the game's lineup draft.
    rosters: Optional[Dict[str, str]] = None  # {playerId: "Starting Lineup" | "Bench" | ...}
    formation: Optional[Any] = None
    formationType: Optional[str] = None  # "9-a-side" | "11-a-side" | shape such as "4-4-2"


class FinalScore(BaseModel):
    ourScore: Optional[int] = None
    opponentScore: Optional[int] = None


class TeamSummary(BaseModel):
    defenseSummary: Optional[str] = None
    midfieldSummary: Optional[str] = None
    attackSummary: Optional[str] = None
    generalSummary: Optional[str] = None


class SubmitReportRequest(BaseModel):
    # Missing keys are taken from the game's report draft.
    finalScore: Optional[FinalScore] = None
    teamSummary: Optional[TeamSummary] = None
    matchDuration: Optional[MatchDuration] = None


class PostponeRequest(BaseModel):
    clearLineupDraft: Optional[bool] = None  # None: use CLEAR_LINEUP_DRAFT_ON_POSTPONE


class ReopenReportRequest(BaseModel):
    restoreDraft: bool = False
