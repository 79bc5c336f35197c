from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class PlayerUpsertRequest(BaseModel):
    playerId: str
    fullName: str
    teamId: Optional[str] = None
    kitNumber: Optional[int] = None
