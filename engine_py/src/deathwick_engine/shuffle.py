"""
Deck building, shuffling and dealing utilities.
"""

import itertools
import random
from typing import List, Optional

from .constants import JOKER, RANKS, SUITS
from .models import Card, GameState
from .rules import RuleConfig, default_rules


def create_deck(player_count: int, rules: RuleConfig = default_rules) -> List[Card]:
    """Build the combined pack for a table: standard decks plus jokers."""
    uids = itertools.count(1)
    deck = []

    for _ in range(rules.deck_count(player_count)):
        for suit in SUITS:
            for rank in RANKS:
                deck.append(Card(uid=next(uids), rank=rank, suit=suit))

    for j in range(rules.joker_count(player_count)):
        deck.append(Card(uid=next(uids), rank=JOKER, joker_variant=(j % 4) + 1))

    return deck


def shuffle_cards(cards: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Shuffle a list of cards in place.

    Args:
        cards: Cards to shuffle
        rng: Random provider; the module-level generator when omitted

    Returns:
        The same list, shuffled
    """
    if rng is not None:
        rng.shuffle(cards)
    else:
        random.shuffle(cards)
    return cards


def deal(state: GameState, rules: RuleConfig = default_rules) -> GameState:
    """
    Deal every seated player a deck and an opening hand.

    Cards left undealt leave the game; conservation is measured against
    what was actually dealt.
    """
    pack = shuffle_cards(create_deck(len(state.players), rules), state.rng)

    dealt = 0
    for player in state.players:
        player.deck = pack[:rules.cards_per_player]
        del pack[:rules.cards_per_player]
        dealt += len(player.deck)
        for _ in range(min(rules.opening_hand, len(player.deck))):
            player.hand.append(player.deck.pop(0))

    state.deal_size = dealt
    state.turn_order = list(range(len(state.players)))
    return state


def validate_deck_integrity(state: GameState) -> bool:
    """Every dealt card is in exactly one zone."""
    uids = [c.uid for c in state.discard]
    for p in state.players:
        uids.extend(c.uid for c in p.hand)
        uids.extend(c.uid for c in p.deck)
        uids.extend(c.uid for c in p.shadow)
    return len(uids) == state.deal_size and len(set(uids)) == len(uids)
