"""
Tests for turn order and the start/end of turn.
"""

import pytest

from deathwick_engine.constants import InputKind, PendingKind, TurnPhase
from deathwick_engine.engine import pass_turn, provide_cards, provide_yes_no
from deathwick_engine.scheduler import eligible_player_ids, slots_per_round


@pytest.mark.parametrize("n,slots", [(2, 1), (5, 1), (6, 2), (8, 2), (9, 3), (12, 3)])
def test_slots_per_round(n, slots):
    assert slots_per_round(n) == slots


def play_order(state, turns):
    order = []
    for _ in range(turns):
        pid = state.active_player_id
        order.append(pid)
        result = pass_turn(state, pid)
        assert result.success, result.error_message
        state = result.state
    return order


def test_small_table_cycles_in_seat_order(table):
    state = table(4)
    assert play_order(state, 6) == [0, 1, 2, 3, 0, 1]


def test_six_players_act_in_pairs(table):
    state = table(6)
    assert eligible_player_ids(state) == [0, 3]
    assert play_order(state, 6) == [0, 3, 1, 4, 2, 5]


def test_nine_players_act_in_threes(table):
    state = table(9)
    assert eligible_player_ids(state) == [0, 3, 6]
    assert play_order(state, 6) == [0, 3, 6, 1, 4, 7]


@pytest.mark.parametrize("n,seats,order", [
    (7, [0, 3], [0, 3, 1, 4, 2, 5]),
    (10, [0, 3, 6], [0, 3, 6, 1, 4, 7]),
    (11, [0, 3, 7], [0, 3, 7, 1, 4, 8]),
    (12, [0, 4, 8], [0, 4, 8, 1, 5, 9]),
])
def test_concurrent_seats_sit_at_even_fractions(table, n, seats, order):
    state = table(n)
    assert eligible_player_ids(state) == seats
    assert play_order(state, 6) == order


def test_last_seat_wraps_to_the_start(table):
    state = table(11)
    state.turn_index = 10
    assert eligible_player_ids(state) == [10, 2, 6]


def test_eliminated_players_are_skipped(table):
    state = table(4)
    state.players[1].eliminated = True
    assert play_order(state, 3) == [0, 2, 3]


def test_start_of_turn_burns_one_per_ghost(table):
    state = table(3)
    table.shadow(state, 1, '3C', '4D')
    state = pass_turn(state, 0).state
    p1 = state.players[1]
    assert len(p1.deck) == 10 - 2 - 1
    assert len(p1.hand) == 1


def test_vessel_burns_one_fewer(table):
    state = table(3, classes={1: 'THE VESSEL'})
    table.shadow(state, 1, '3C', '4D')
    state = pass_turn(state, 0).state
    assert len(state.players[1].deck) == 10 - 1 - 1


def test_sufferer_draws_after_each_burn(table):
    state = table(3, classes={1: 'THE SUFFERER'})
    table.shadow(state, 1, '3C', '4D')
    state = pass_turn(state, 0).state
    p1 = state.players[1]
    assert len(p1.hand) == 3
    assert len(p1.deck) == 10 - 2 - 2 - 1


def test_crow_collects_burned_face_cards(table):
    state = table(3, classes={2: 'THE CROW'})
    table.shadow(state, 1, '3C')
    state.players[1].deck[0] = table.card('KH')
    table.seal(state)
    state = pass_turn(state, 0).state
    assert 'K♥' in [c.label for c in state.players[2].hand]


def test_oracle_may_bury_deck_top(table):
    state = table(3, classes={1: 'THE ORACLE'})
    top = state.players[1].deck[0]
    state = pass_turn(state, 0).state
    assert state.pending.kind == PendingKind.ORACLE
    assert state.pending.responder_id == 1
    state = provide_yes_no(state, 1, True).state
    p1 = state.players[1]
    assert p1.deck[-1].uid == top.uid
    assert state.phase == TurnPhase.ACTION


def test_hand_limit_asks_human_to_discard(table):
    state = table(3)
    table.hand(state, 0, 'AH', '2H', '3H', '4H', '6H', '7H')
    state = pass_turn(state, 0).state
    assert state.pending.kind == PendingKind.DISCARD_DOWN
    assert state.pending.awaited_input == InputKind.CARDS
    assert state.pending.payload['count'] == 1

    assert not provide_cards(state, 0, [0, 1]).success
    result = provide_cards(state, 0, [5])
    assert result.success
    assert len(result.state.players[0].hand) == 5
    assert result.state.active_player_id == 1


def test_hoarder_keeps_eight(table):
    state = table(3, classes={0: 'THE HOARDER'})
    table.hand(state, 0, 'AH', '2H', '3H', '4H', '6H', '7H')
    state = pass_turn(state, 0).state
    assert state.pending is None
    assert len(state.players[0].hand) == 6


def test_simulated_player_discards_automatically(table):
    state = table(2, bots=(1,))
    table.hand(state, 1, 'AH', '2H', '3H', '4H', '6H', '7H', '8H')
    state = pass_turn(state, 0).state
    assert len(state.players[1].hand) <= 5
