"""Match events subsystem (disciplinary cards).

Public API (v1)
---------------
- create_card / list_cards / update_card / delete_card (service)
- on_card_mutation: card mutation -> optional recalc-minutes JobSpec
- card_rejection / check_can_receive_card: eligibility rules
"""

from .dispatcher import CardMutation, MutationKind, on_card_mutation
from .rules import card_rejection, check_can_receive_card, is_sending_off
from .service import CardWriteResult, create_card, delete_card, list_cards, update_card
from .types import Card

__all__ = [
    "Card",
    "CardMutation",
    "CardWriteResult",
    "MutationKind",
    "card_rejection",
    "check_can_receive_card",
    "create_card",
    "delete_card",
    "is_sending_off",
    "list_cards",
    "on_card_mutation",
    "update_card",
]
