from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

CardType = Literal["yellow", "red", "second-yellow"]


class CardCreateRequest(BaseModel):
    playerId: str
    cardType: CardType
    minute: int = Field(..., ge=1, le=120)
    reason: Optional[str] = Field(default=None, max_length=200)


class CardUpdateRequest(BaseModel):
    playerId: Optional[str] = None
    cardType: Optional[CardType] = None
    minute: Optional[int] = Field(default=None, ge=1, le=120)
    reason: Optional[str] = Field(default=None, max_length=200)
