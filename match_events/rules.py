from __future__ import annotations

"""Card eligibility rules.

A player moves yellow -> second-yellow, or straight to red; once sent off
(red or second-yellow) they cannot receive anything else in that game.
"""

from typing import Iterable, Optional

from games.errors import INVALID_CARD, GameEngineError

from . import config as m_cfg


def is_sending_off(card_type: Optional[str]) -> bool:
    return card_type in m_cfg.SENDING_OFF_TYPES


def card_rejection(existing_types: Iterable[str], new_type: str) -> Optional[str]:
    """Reason ``new_type`` cannot be given to a player holding ``existing_types``, or None."""
    existing = list(existing_types)
    yellows = sum(1 for t in existing if t == m_cfg.CARD_YELLOW)

    if any(is_sending_off(t) for t in existing):
        return "Player has already been sent off and cannot receive additional cards"

    if new_type == m_cfg.CARD_YELLOW:
        if yellows == 0:
            return None
        return 'Player already has a yellow card. Use "second-yellow" instead'
    if new_type == m_cfg.CARD_SECOND_YELLOW:
        if yellows == 1:
            return None
        if yellows == 0:
            return "Player must have a yellow card before receiving a second yellow"
        return "Player already has multiple yellow cards"
    if new_type == m_cfg.CARD_RED:
        return None
    return f"Invalid card type: {new_type}"


def check_can_receive_card(existing_types: Iterable[str], new_type: str, *, player_id: str = "") -> None:
    """Raise GameEngineError(INVALID_CARD) when the card is not allowed."""
    reason = card_rejection(existing_types, new_type)
    if reason is not None:
        raise GameEngineError(
            INVALID_CARD,
            f"Invalid card assignment: {reason}",
            {"playerId": player_id, "cardType": new_type},
        )


def check_card_fields(*, minute: Optional[int] = None, reason: Optional[str] = None) -> None:
    if minute is not None and not (m_cfg.MINUTE_MIN <= int(minute) <= m_cfg.MINUTE_MAX):
        raise GameEngineError(
            INVALID_CARD,
            f"minute must be between {m_cfg.MINUTE_MIN} and {m_cfg.MINUTE_MAX}",
            {"minute": minute},
        )
    if reason is not None and len(str(reason)) > m_cfg.REASON_MAX_LEN:
        raise GameEngineError(
            INVALID_CARD,
            f"reason must be at most {m_cfg.REASON_MAX_LEN} characters",
            {"length": len(str(reason))},
        )
