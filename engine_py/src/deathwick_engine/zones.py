"""
Zone manager: every card movement between hand, deck, shadow and discard.
"""

import logging
from typing import List, Optional

from .classes import capability
from .models import Card, GameState, Player
from .shuffle import shuffle_cards

logger = logging.getLogger(__name__)


def to_discard(state: GameState, *cards: Card):
    for card in cards:
        card.haunted_by = None
        card.value_override = None
        card.is_wall = False
        state.discard.append(card)


def find_in_hand(player: Player, uid: Optional[int]) -> Optional[int]:
    for i, c in enumerate(player.hand):
        if c.uid == uid:
            return i
    return None


def _crow_for(state: GameState, player: Player) -> Optional[Player]:
    from .seating import neighbor_list

    for n in neighbor_list(state, player):
        if capability(n).collects_burned_faces:
            return n
    return None


def burn(state: GameState, player: Player, n: int, mandatory: bool = False) -> bool:
    """
    Move up to `n` cards from the deck top to the discard.

    A burned face card goes to a crow neighbour's hand instead. During the
    mandatory start-of-turn burn a sufferer draws 1 after each burned card.
    Returns False if the deck ran out before `n` cards were burned.
    """
    cap = capability(player)
    for _ in range(n):
        if not player.deck:
            logger.debug("%s ran out of deck while burning", player.name)
            return False
        card = player.deck.pop(0)
        crow = _crow_for(state, player) if card.is_face else None
        if crow is not None:
            crow.hand.append(card)
            state.add_log(f"{crow.name} snatches the burned {card.label} from {player.name}.")
        else:
            to_discard(state, card)
        if mandatory and cap.draws_on_burn and player.deck:
            player.hand.append(player.deck.pop(0))
    return True


def draw(state: GameState, player: Player, n: int = 1) -> bool:
    """Deck top to hand. False when the deck is empty before `n` draws."""
    for _ in range(n):
        if not player.deck:
            return False
        player.hand.append(player.deck.pop(0))
    return True


def heal(player: Player, cards: List[Card], bottom: bool = True):
    """Put cards into a deck, stripped of ghost markings."""
    for card in cards:
        card.haunted_by = None
        card.value_override = None
        card.is_wall = False
        if bottom:
            player.deck.append(card)
        else:
            player.deck.insert(0, card)


def attach_ghost(state: GameState, target: Player, card: Card, attacker: Optional[Player]):
    """Append a ghost to a shadow and run the instant possession check."""
    card.is_wall = False
    card.haunted_by = attacker.id if attacker is not None else None
    target.shadow.append(card)
    if attacker is not None:
        state.last_attacker[target.id] = attacker.id

    from .evaluator import check_instant_possession
    check_instant_possession(state, target)


def remove_ghost(owner: Player, ghost: Card) -> Card:
    """Lift a ghost or wall out of a shadow; the caller decides where it goes."""
    owner.shadow = [g for g in owner.shadow if g is not ghost]
    return ghost


def add_wall(owner: Player, card: Card):
    card.is_wall = True
    card.haunted_by = None
    owner.shadow.append(card)


def required_burn(player: Player) -> int:
    return max(0, len(player.ghosts) - capability(player).burn_reduction)


def shuffle_deck(state: GameState, player: Player):
    shuffle_cards(player.deck, state.rng)


def discard_top(state: GameState, n: int) -> List[Card]:
    """Pop up to `n` cards from the top of the discard, topmost first."""
    taken = []
    for _ in range(min(n, len(state.discard))):
        taken.append(state.discard.pop())
    return taken
