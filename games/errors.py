from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class GameEngineError(Exception):
    """Structured error for draft, transition and match-event flows.

    The server layer maps these to HTTP 4xx while keeping a stable
    machine-readable code for client/UI.
    """

    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}"


# Error codes (stable API surface)
INVALID_STATUS = "INVALID_STATUS"
INCOMPLETE_REPORT = "INCOMPLETE_REPORT"
INVALID_LINEUP = "INVALID_LINEUP"
INVALID_DRAFT = "INVALID_DRAFT"
INVALID_CARD = "INVALID_CARD"
NOT_FOUND = "NOT_FOUND"

# Internal: a stored or computed game broke the status/draft-slot pairing.
DRAFT_INVARIANT_VIOLATED = "DRAFT_INVARIANT_VIOLATED"


def not_found(kind: str, ident: str) -> GameEngineError:
    return GameEngineError(NOT_FOUND, f"{kind} not found", {kind.lower() + "_id": str(ident)})
