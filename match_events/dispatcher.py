from __future__ import annotations

"""Card mutation -> job dispatch.

Pure decision function: given what happened to a card, return the job to
enqueue (or None). The card service inserts the returned job in the same
transaction as the card write.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from jobs.types import JobSpec, recalc_minutes

from .rules import is_sending_off


class MutationKind(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True, slots=True)
class CardMutation:
    kind: MutationKind
    game_id: str
    # created/updated: the type after the write; deleted: the removed card's type
    card_type: str
    # updated only: the type before the write
    previous_card_type: Optional[str] = None


def on_card_mutation(event: CardMutation) -> Optional[JobSpec]:
    kind = MutationKind(event.kind)
    if kind is MutationKind.UPDATED:
        # red -> red (minute edit) still moves the sending-off time
        triggers = is_sending_off(event.previous_card_type) or is_sending_off(event.card_type)
    else:
        triggers = is_sending_off(event.card_type)
    return recalc_minutes(event.game_id) if triggers else None
