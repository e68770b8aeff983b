"""
Card comparison: banish legality and siphon rules.
"""

from typing import Optional

from .constants import SPADES, SUIT_TIER
from .models import Card


def suit_tier(suit: Optional[str]) -> int:
    return SUIT_TIER.get(suit, 0)


def can_banish(card: Card, ghost: Card) -> bool:
    """
    A card banishes a ghost when its value is higher, or equal with a suit
    of the same or higher tier.
    """
    if ghost.is_wall:
        return False
    if card.value > ghost.value:
        return True
    return card.value == ghost.value and suit_tier(card.suit) >= suit_tier(ghost.suit)


def passes_clown_ward(card: Card) -> bool:
    """Ghosts attached by a clown yield only to face cards and sevens."""
    return card.is_face or card.rank == '7'


def compute_siphon(card: Card, ghost: Card, leech: bool = False) -> bool:
    """
    Whether removing `ghost` with `card` heals the remover.

    Spade ghosts never heal. Otherwise a matching rank, a seven of the
    ghost's suit, or a face ghost taken by a ten or face card of its suit
    all heal; a leech always heals.
    """
    if ghost.suit == SPADES or ghost.is_joker:
        return False
    if leech:
        return True
    if card.rank == ghost.rank:
        return True
    if card.rank == '7' and card.suit == ghost.suit:
        return True
    if ghost.is_face and card.suit == ghost.suit and (card.rank == '10' or card.is_face):
        return True
    return False
