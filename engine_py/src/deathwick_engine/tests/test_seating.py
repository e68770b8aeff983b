"""
Tests for seating topology over the alive players.
"""

from deathwick_engine.constants import InputKind, PendingKind
from deathwick_engine.models import PendingAction
from deathwick_engine.seating import (
    is_neighbor, neighbor_list, neighbors, others_in_turn_order, valid_targets,
)


def ids(players):
    return [p.id for p in players]


def test_neighbours_wrap_around_the_table(table):
    state = table(4)
    left, right = neighbors(state, state.players[0])
    assert (left.id, right.id) == (3, 1)
    left, right = neighbors(state, state.players[3])
    assert (left.id, right.id) == (2, 0)


def test_eliminated_players_are_skipped(table):
    state = table(4)
    state.players[1].eliminated = True
    left, right = neighbors(state, state.players[0])
    assert (left.id, right.id) == (3, 2)
    assert neighbors(state, state.players[1]) == (None, None)
    assert is_neighbor(state, state.players[2], state.players[0])


def test_two_alive_share_one_neighbour(table):
    state = table(3)
    state.players[2].eliminated = True
    left, right = neighbors(state, state.players[0])
    assert left.id == right.id == 1
    assert ids(neighbor_list(state, state.players[0])) == [1]


def test_last_player_alive_has_no_neighbours(table):
    state = table(3)
    state.players[1].eliminated = True
    state.players[2].eliminated = True
    assert neighbors(state, state.players[0]) == (None, None)
    assert neighbor_list(state, state.players[0]) == []


def test_targets_default_to_neighbours(table):
    state = table(5)
    assert sorted(ids(valid_targets(state, state.players[0]))) == [1, 4]


def test_occultist_nine_reaches_across_the_table(table):
    state = table(5, classes={0: 'THE OCCULTIST'})
    actor = state.players[0]
    possess = PendingAction(PendingKind.CAST, InputKind.TARGET, 0, payload={'rank': '9'})
    assert ids(valid_targets(state, actor, possess)) == [1, 2, 3, 4]

    mirror = PendingAction(PendingKind.CAST, InputKind.TARGET, 0, payload={'rank': 'J'})
    assert sorted(ids(valid_targets(state, actor, mirror))) == [1, 4]


def test_plain_nine_stays_with_neighbours(table):
    state = table(5)
    possess = PendingAction(PendingKind.CAST, InputKind.TARGET, 0, payload={'rank': '9'})
    assert sorted(ids(valid_targets(state, state.players[0], possess))) == [1, 4]


def test_others_in_turn_order_start_after_actor(table):
    state = table(4)
    state.players[3].eliminated = True
    assert ids(others_in_turn_order(state, state.players[1])) == [2, 0]
