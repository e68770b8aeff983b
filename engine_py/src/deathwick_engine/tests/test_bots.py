"""
Tests for the simulated players.
"""

import pytest

from deathwick_engine.bots.base import BotAction, candidate_inputs
from deathwick_engine.bots.greedy import GreedyBot
from deathwick_engine.constants import ControllerKind, InputKind
from deathwick_engine.engine import (
    add_player, apply_bot_action, banish, create_game, haunt, start_game,
)
from deathwick_engine.shuffle import validate_deck_integrity


def test_bot_banishes_when_it_can(table):
    state = table(3)
    table.hand(state, 0, '2C', '8C')
    table.shadow(state, 0, '7D', by=1)
    action = GreedyBot(0).choose_action(state)
    assert action.type == 'banish'
    assert action.data['card_index'] == 1


def test_bot_haunts_with_strongest_number(table):
    state = table(3)
    table.hand(state, 0, '3C', '9H', 'KS')
    action = GreedyBot(0).choose_action(state)
    assert action.type == 'haunt'
    assert action.data['card_index'] == 1


def test_bot_waits_when_not_its_turn(table):
    state = table(3)
    assert GreedyBot(1).choose_action(state) is None


def test_candidate_inputs_for_ghost_choice(table):
    state = table(3)
    table.hand(state, 0, '8C')
    table.shadow(state, 0, '7D', '4S')
    state = banish(state, 0, 0).state
    options = candidate_inputs(state, state.players[0])
    assert options == [(InputKind.GHOST, (0, 0)), (InputKind.GHOST, (0, 1))]
    assert candidate_inputs(state, state.players[1]) == []


def test_candidate_targets_are_neighbours(table):
    state = table(4)
    table.hand(state, 0, '7H')
    state = haunt(state, 0, 0).state
    ids = [v for _, v in candidate_inputs(state, state.players[0])]
    assert sorted(ids) == [1, 3]


def test_apply_bot_action_reports_errors(table):
    state = table(3)
    result = apply_bot_action(state, 0, BotAction.haunt(4))
    assert not result.success


@pytest.mark.parametrize("seed,players", [(1, 2), (5, 4), (9, 7)])
def test_simulated_table_plays_to_the_end(seed, players):
    state = create_game(seed=seed)
    for i in range(players):
        state = add_player(state, f"Bot {i}", ControllerKind.SIMULATED).state
    result = start_game(state)
    assert result.success, result.error_message

    state = result.state
    assert state.is_game_over
    assert validate_deck_integrity(state)
    survivors = [p for p in state.players if not p.eliminated]
    assert len(survivors) <= 1 or state.winner_id is None
