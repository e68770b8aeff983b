"""
Greedy bot implementation with basic heuristics.
"""

from typing import Any, List, Optional, Tuple

from .base import BaseBot, BotAction, candidate_inputs
from ..classes import CLASS_REGISTRY
from ..comparator import can_banish, compute_siphon
from ..constants import SHIELD_RANK, SUITS, InputKind, PendingKind
from ..models import Card, GameState, Player
from ..validate import validate_banish, validate_haunt

# Classes a bot is happiest with, most preferred first
PREFERRED_CLASSES = [
    'THE VESSEL', 'THE LEECH', 'THE SKEPTIC', 'THE SUFFERER', 'THE HOARDER',
    'THE UNSEEN', 'THE HEX', 'THE SILENCE', 'THE EXTORTIONER',
]


class GreedyBot(BaseBot):
    """
    Greedy bot that plays with simple heuristics.

    Strategy:
    - Banish an own ghost when a hand card beats it, preferring siphons
    - Otherwise haunt the neighbour closest to possession with the strongest number card
    - Keep fives back as shields and always use a reaction when offered one
    """

    def choose_action(self, state: GameState) -> Optional[BotAction]:
        if self.needs_class(state):
            return self._choose_class(state)
        if self.is_my_decision(state):
            return self._answer(state)
        if self.is_my_turn(state):
            return self._choose_turn_action(state)
        return None

    # class selection

    def _choose_class(self, state: GameState) -> BotAction:
        offers = state.class_offers.get(self.player_id, [])
        ranked = sorted(offers, key=lambda c: PREFERRED_CLASSES.index(c) if c in PREFERRED_CLASSES else 99)
        choice = ranked[0]
        suits = None
        if CLASS_REGISTRY[choice].binds_suits:
            hand = self.me(state).hand
            suits = sorted(SUITS, key=lambda s: sum(1 for c in hand if c.suit == s))[:2]
        return BotAction.choose_class(choice, suits)

    # turn

    def _choose_turn_action(self, state: GameState) -> BotAction:
        me = self.me(state)

        banish = self._best_banish(state, me)
        if banish is not None:
            return BotAction.banish(banish)

        haunt = self._best_haunt(state, me)
        if haunt is not None:
            return BotAction.haunt(haunt)

        return BotAction.pass_turn()

    def _best_banish(self, state: GameState, me: Player) -> Optional[int]:
        best: Optional[Tuple[float, int]] = None
        for i, card in enumerate(me.hand):
            if not validate_banish(state, self.player_id, i).valid:
                continue
            for ghost in me.ghosts:
                if not can_banish(card, ghost):
                    continue
                score = 20 if compute_siphon(card, ghost) else 10
                score -= card.value / 10
                if card.rank == SHIELD_RANK:
                    score -= 5
                if best is None or score > best[0]:
                    best = (score, i)
        return best[1] if best else None

    def _best_haunt(self, state: GameState, me: Player) -> Optional[int]:
        best: Optional[Tuple[float, int]] = None
        for i, card in enumerate(me.hand):
            if card.rank == SHIELD_RANK:
                continue
            if not validate_haunt(state, self.player_id, i).valid:
                continue
            score = card.value
            if best is None or score > best[0]:
                best = (score, i)
        return best[1] if best else None

    # pending decisions

    def _answer(self, state: GameState) -> Optional[BotAction]:
        pending = state.pending
        me = self.me(state)
        options = candidate_inputs(state, me)
        if not options:
            return None
        kind = options[0][0]

        if kind == InputKind.YES_NO:
            return BotAction.answer(kind, self._yes_no(state, me))
        if kind == InputKind.TARGET:
            return BotAction.answer(kind, self._pick_target(state, me, [v for _, v in options]))
        if kind == InputKind.GHOST:
            return BotAction.answer(kind, self._pick_ghost(state, me, [v for _, v in options]))
        if kind == InputKind.CARD and pending.interrupt is not None:
            return BotAction.answer(kind, self._cheapest_card(me.hand))
        if kind == InputKind.OPTION:
            return BotAction.answer(kind, self._pick_option(state, me, [v for _, v in options]))
        return BotAction.answer(kind, options[-1][1] if kind == InputKind.CARD else options[0][1])

    def _yes_no(self, state: GameState, me: Player) -> bool:
        pending = state.pending
        if pending.interrupt is not None:
            # reactions are always worth it
            return True
        if pending.kind == PendingKind.ORACLE:
            return bool(me.deck) and me.deck[0].value < 5
        return True

    def _pick_target(self, state: GameState, me: Player, ids: List[Any]) -> Any:
        pending = state.pending
        card = None
        if pending.card_uid is not None:
            card = next((c for c in me.hand if c.uid == pending.card_uid), None)

        def pressure(pid):
            t = state.players[pid]
            same_suit = sum(1 for g in t.ghosts if card is not None and g.suit == card.suit)
            return (same_suit, len(t.ghosts), -len(t.deck))

        return max(ids, key=pressure)

    def _pick_ghost(self, state: GameState, me: Player, refs: List[Any]) -> Any:
        pending = state.pending
        own = [r for r in refs if r[0] == me.id]
        if pending.kind == PendingKind.BANISH:
            card = next((c for c in me.hand if c.uid == pending.card_uid), None)
            for owner_id, idx in own:
                if card is not None and can_banish(card, me.shadow[idx]):
                    return (owner_id, idx)
        pool = own or refs
        return max(pool, key=lambda r: state.players[r[0]].shadow[r[1]].value)

    def _pick_option(self, state: GameState, me: Player, values: List[str]) -> str:
        if 'rekindle' in values and len(me.deck) < 6:
            return 'rekindle'
        return values[0]

    @staticmethod
    def _cheapest_card(hand: List[Card]) -> int:
        return min(range(len(hand)), key=lambda i: (hand[i].rank == SHIELD_RANK, hand[i].value))
