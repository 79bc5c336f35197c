from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional


@dataclass(frozen=True, slots=True)
class Card:
    card_id: str
    game_id: str
    player_id: str
    card_type: str
    minute: int
    reason: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def with_changes(self, **changes: Any) -> "Card":
        return replace(self, **changes)

    def to_api(self) -> Dict[str, Any]:
        return {
            "cardId": self.card_id,
            "gameId": self.game_id,
            "playerId": self.player_id,
            "cardType": self.card_type,
            "minute": self.minute,
            "reason": self.reason,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
