"""
Shared fixtures: hand-built tables for scenario tests.
"""

import itertools

import pytest

from deathwick_engine.constants import JOKER, ControllerKind, TurnPhase
from deathwick_engine.engine import create_game
from deathwick_engine.models import Card, GameState, Player
from deathwick_engine.rules import create_rules


class TableBuilder:
    """Builds a table already in its first ACTION phase, player 0 to act."""

    def __init__(self):
        self._uids = itertools.count(1000)

    def card(self, label: str) -> Card:
        if label == JOKER:
            return Card(uid=next(self._uids), rank=JOKER, joker_variant=1)
        return Card(uid=next(self._uids), rank=label[:-1], suit=label[-1])

    def cards(self, *labels):
        return [self.card(label) for label in labels]

    def __call__(self, n=3, classes=None, alternate=False, deck_size=10, bots=()) -> GameState:
        state = create_game(create_rules(alternate_ruleset=alternate), seed=7)
        classes = classes or {}
        for i in range(n):
            kind = ControllerKind.SIMULATED if i in bots else ControllerKind.HUMAN
            player = Player(id=i, name=f"P{i}", kind=kind, class_name=classes.get(i))
            player.deck = self.cards(*(['2D'] * deck_size))
            state.players.append(player)
        state.turn_order = list(range(n))
        state.turn_index = 0
        state.active_player_id = 0
        state.phase = TurnPhase.ACTION
        return self.seal(state)

    def hand(self, state: GameState, pid: int, *labels):
        state.players[pid].hand = self.cards(*labels)
        return self.seal(state)

    def shadow(self, state: GameState, pid: int, *labels, by=None):
        ghosts = self.cards(*labels)
        for g in ghosts:
            g.haunted_by = by
        state.players[pid].shadow = ghosts
        return self.seal(state)

    def discard(self, state: GameState, *labels):
        state.discard = self.cards(*labels)
        return self.seal(state)

    @staticmethod
    def seal(state: GameState) -> GameState:
        state.deal_size = state.card_count()
        return state


@pytest.fixture
def table():
    return TableBuilder()
