"""
Tests for the reactive decisions a haunt must pass.
"""

from deathwick_engine import errors
from deathwick_engine.constants import InputKind, InterruptKind
from deathwick_engine.engine import (
    cancel_pending, haunt, provide_card, provide_target, provide_yes_no,
)
from deathwick_engine.shuffle import validate_deck_integrity


def labels(cards):
    return [c.label for c in cards]


def haunt_at(state, target_id=1, actor_id=0, card_index=0):
    state = haunt(state, actor_id, card_index).state
    result = provide_target(state, actor_id, target_id)
    assert result.success, result.error_message
    return result.state


def test_cancel_duel_salts_the_haunt_away(table):
    state = table(3)
    table.hand(state, 0, '7H')
    table.hand(state, 1, '5D')
    state = haunt_at(state)

    it = state.pending.interrupt
    assert it.kind == InterruptKind.CANCEL_DUEL
    assert state.pending.responder_id == 1

    # only the defender may answer
    assert provide_yes_no(state, 0, True).error_code == errors.NOT_YOUR_TURN

    state = provide_yes_no(state, 1, True).state
    assert state.players[1].shadow == []
    assert {'7♥', '5♦'} <= set(labels(state.discard))
    assert validate_deck_integrity(state)


def test_declined_duel_lets_the_ghost_land(table):
    state = table(3)
    table.hand(state, 0, '7H')
    table.hand(state, 1, '5D')
    state = haunt_at(state)
    state = provide_yes_no(state, 1, False).state
    assert labels(state.players[1].shadow) == ['7♥']


def test_attacker_can_counter_the_duel(table):
    state = table(3)
    table.hand(state, 0, '7H', '5S')
    table.hand(state, 1, '5D')
    state = haunt_at(state)
    state = provide_yes_no(state, 1, True).state

    it = state.pending.interrupt
    assert it.side == 'attacker'
    assert state.pending.responder_id == 0

    state = provide_yes_no(state, 0, True).state
    assert labels(state.players[1].shadow) == ['7♥']
    assert {'5♠', '5♦'} <= set(labels(state.discard))


def test_committed_haunt_cannot_be_cancelled(table):
    state = table(3)
    table.hand(state, 0, '7H')
    table.hand(state, 1, '5D')
    state = haunt_at(state)
    result = cancel_pending(state, 0)
    assert not result.success
    assert result.error_code == errors.CANNOT_CANCEL


def test_silence_cannot_be_salted(table):
    state = table(3, classes={0: 'THE SILENCE'})
    table.hand(state, 0, '7H')
    table.hand(state, 1, '5D')
    state = haunt_at(state)
    assert labels(state.players[1].shadow) == ['7♥']


def test_hex_cancels_with_same_rank(table):
    state = table(3, classes={1: 'THE HEX'})
    table.hand(state, 0, '7H')
    table.hand(state, 1, '7S', '2C')
    state = haunt_at(state)
    assert state.pending.interrupt.kind == InterruptKind.HEX_CANCEL
    state = provide_yes_no(state, 1, True).state
    assert state.players[1].shadow == []
    assert {'7♥', '7♠'} <= set(labels(state.discard))


def test_hex_without_matching_rank_is_not_asked(table):
    state = table(3, classes={1: 'THE HEX'})
    table.hand(state, 0, '7H')
    table.hand(state, 1, '8S')
    state = haunt_at(state)
    assert labels(state.players[1].shadow) == ['7♥']


def test_unseen_pays_a_card_to_cancel(table):
    state = table(3, classes={1: 'THE UNSEEN'})
    table.hand(state, 0, '7H')
    table.hand(state, 1, '2C', '3C')
    state = haunt_at(state)
    assert state.pending.interrupt.kind == InterruptKind.DISCARD_CANCEL

    state = provide_yes_no(state, 1, True).state
    assert state.pending.awaited_input == InputKind.CARD
    assert not provide_card(state, 1, 5).success

    state = provide_card(state, 1, 0).state
    assert state.players[1].shadow == []
    assert '2♣' in labels(state.discard)
    assert validate_deck_integrity(state)


def test_mime_redirects_to_other_neighbour(table):
    state = table(3, classes={1: 'THE MIME'})
    table.hand(state, 0, '7H')
    table.hand(state, 1, '2C')
    state = haunt_at(state)
    assert state.pending.interrupt.kind == InterruptKind.REDIRECT

    state = provide_yes_no(state, 1, True).state
    state = provide_card(state, 1, 0).state
    assert state.players[1].shadow == []
    assert labels(state.players[2].shadow) == ['7♥']


def test_redirected_haunt_faces_new_target_reactions(table):
    state = table(3, classes={1: 'THE MIME'})
    table.hand(state, 0, '7H')
    table.hand(state, 1, '2C')
    table.hand(state, 2, '5C')
    state = haunt_at(state)
    state = provide_yes_no(state, 1, True).state
    state = provide_card(state, 1, 0).state
    assert state.pending.interrupt.kind == InterruptKind.CANCEL_DUEL
    assert state.pending.responder_id == 2


def test_cryptkeeper_trades_a_wall(table):
    state = table(3, classes={1: 'THE CRYPTKEEPER'})
    table.hand(state, 0, '7H')
    wall = table.card('3S')
    wall.is_wall = True
    state.players[1].shadow = [wall]
    table.seal(state)

    state = haunt_at(state)
    assert state.pending.interrupt.kind == InterruptKind.WALL_BLOCK
    state = provide_yes_no(state, 1, True).state
    assert state.players[1].shadow == []
    assert validate_deck_integrity(state)


def test_stage_order_offers_hex_before_duel(table):
    state = table(3, classes={1: 'THE HEX'})
    table.hand(state, 0, '7H')
    table.hand(state, 1, '7S', '5D')
    state = haunt_at(state)
    assert state.pending.interrupt.kind == InterruptKind.HEX_CANCEL
    state = provide_yes_no(state, 1, False).state
    assert state.pending.interrupt.kind == InterruptKind.CANCEL_DUEL
