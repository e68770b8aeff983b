"""
Tests for possession, death triggers and victory.
"""

from deathwick_engine import errors
from deathwick_engine.constants import TurnPhase
from deathwick_engine.engine import haunt, pass_turn, provide_target
from deathwick_engine.evaluator import check_possession, handle_death
from deathwick_engine.shuffle import validate_deck_integrity


def labels(cards):
    return [c.label for c in cards]


def test_possession_needs_three_of_a_suit(table):
    cards = table.cards('3H', '4H', '9H')
    assert check_possession(cards)
    assert not check_possession(table.cards('3H', '4H', '9S'))


def test_walls_and_jokers_do_not_possess(table):
    cards = table.cards('3H', '4H', '9H')
    cards[0].is_wall = True
    assert not check_possession(cards)
    assert not check_possession(table.cards('JOKER', 'JOKER', 'JOKER'))


def test_possessed_player_dies_at_end_of_turn(table):
    state = table(3)
    table.shadow(state, 0, '3H', '4H', '9H')
    state = pass_turn(state, 0).state
    assert state.players[0].eliminated
    assert state.active_player_id == 1
    assert not state.is_game_over


def test_empty_deck_at_draw_kills(table):
    state = table(2)
    state.players[1].deck = []
    table.seal(state)
    result = pass_turn(state, 0)
    assert result.success
    state = result.state
    assert state.phase == TurnPhase.GAME_OVER
    assert state.winner_id == 0


def test_no_actions_after_game_over(table):
    state = table(2)
    state.players[1].deck = []
    table.seal(state)
    state = pass_turn(state, 0).state
    result = pass_turn(state, 0)
    assert not result.success
    assert result.error_code == errors.GAME_OVER


def test_instant_possession_under_dark_ritual(table):
    state = table(3, alternate=True)
    table.hand(state, 0, '9H')
    table.shadow(state, 1, '3H', '4H', by=2)
    state = haunt(state, 0, 0).state
    state = provide_target(state, 0, 1).state

    assert state.players[1].eliminated
    # the three ghosts scatter to the surviving neighbours
    inherited = len(state.players[0].ghosts) + len(state.players[2].ghosts)
    assert inherited == 3
    assert validate_deck_integrity(state)


def test_base_ruleset_leaves_dead_shadow_in_place(table):
    state = table(3)
    table.shadow(state, 0, '3H', '4H', '9H')
    state = pass_turn(state, 0).state
    assert state.players[1].ghosts == []
    assert state.players[2].ghosts == []
    assert len(state.players[0].shadow) == 3


def test_witness_drags_the_last_rival_down(table):
    state = table(3, classes={2: 'THE WITNESS'})
    state.players[1].deck = []
    table.seal(state)
    state = pass_turn(state, 0).state
    assert state.is_game_over
    assert state.winner_id is None
    assert state.players[0].eliminated
    assert not state.players[2].eliminated


def test_witness_in_a_duel_ends_at_once(table):
    state = table(2, classes={1: 'THE WITNESS'})
    state = pass_turn(state, 0).state
    assert state.is_game_over
    assert state.winner_id is None


def test_lich_returns_once(table):
    state = table(3, classes={1: 'THE LICH'})
    state.players[1].deck = []
    table.hand(state, 1, 'AH')
    state = pass_turn(state, 0).state

    p1 = state.players[1]
    assert not p1.eliminated
    assert p1.used_lich_revive
    assert len(p1.deck) == 4
    assert p1.hand == []
    assert len(state.players[0].deck) == 8
    assert state.active_player_id == 1
    assert validate_deck_integrity(state)


def test_gravedigger_inherits_the_deck(table):
    state = table(3, classes={2: 'THE GRAVEDIGGER'})
    handle_death(state, state.players[1])
    assert len(state.players[2].deck) == 20
    assert validate_deck_integrity(state)


def test_vulture_scavenges_the_discard(table):
    state = table(3, classes={2: 'THE VULTURE'})
    table.discard(state, 'AH', '2H', '3H', '4H', '6H', '7H')
    handle_death(state, state.players[1])
    assert len(state.players[2].deck) == 15
    assert len(state.discard) == 1


def test_funeral_bell_tolls_once(table):
    state = table(4, classes={3: 'THE FUNERAL BELL'})
    handle_death(state, state.players[1])
    assert len(state.players[0].deck) == 9
    assert len(state.players[2].deck) == 9
    assert len(state.players[3].deck) == 10
    assert state.funeral_bell_triggered


def test_last_player_standing_wins(table):
    state = table(3)
    handle_death(state, state.players[1])
    assert not state.is_game_over
    handle_death(state, state.players[2])
    assert state.is_game_over
    assert state.winner_id == 0


def test_dark_ritual_checks_possession_at_end_of_turn(table):
    state = table(3, alternate=True)
    table.shadow(state, 0, '3H', '4H', '9H')
    state = pass_turn(state, 0).state
    assert state.players[0].eliminated
    assert state.active_player_id == 1


def test_salvage_gives_each_neighbour_one_of_two(table):
    state = table(4, alternate=True)
    table.shadow(state, 1, '3C', '4D')
    handle_death(state, state.players[1])
    assert labels(state.players[0].shadow) == ['3♣']
    assert labels(state.players[2].shadow) == ['4♦']
    assert state.players[3].shadow == []
    assert validate_deck_integrity(state)


def test_salvage_odd_ghost_goes_to_the_least_haunted(table):
    state = table(4, alternate=True)
    table.shadow(state, 0, '2H')
    state.players[2].shadow = table.cards('2S')
    state.players[1].shadow = table.cards('3C', '4D', '6S')
    table.seal(state)
    handle_death(state, state.players[1])
    assert labels(state.players[0].shadow) == ['2♥', '3♣']
    assert labels(state.players[2].shadow) == ['2♠', '4♦']
    assert labels(state.players[3].shadow) == ['6♠']
