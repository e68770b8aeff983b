"""
Tests for class modifiers, reactive hooks and active abilities.
"""

from deathwick_engine import errors
from deathwick_engine.classes import CLASS_REGISTRY, class_pool
from deathwick_engine.constants import InputKind, PendingKind, TurnPhase
from deathwick_engine.engine import (
    banish, cast, haunt, pass_turn, provide_card, provide_ghost, provide_option,
    provide_target, provide_yes_no, use_class_ability,
)
from deathwick_engine.shuffle import validate_deck_integrity


def labels(cards):
    return [c.label for c in cards]


def test_registry_has_every_class():
    assert len(CLASS_REGISTRY) == 38
    assert len(class_pool(True)) == 38
    assert len(class_pool(False)) < 38


def test_no_ability_without_active_class(table):
    state = table(3, classes={0: 'THE VESSEL'})
    result = use_class_ability(state, 0)
    assert not result.success
    assert result.error_code == errors.NO_ABILITY


# grimoire

def test_grimoire_rejects_written_rank(table):
    state = table(3, classes={0: 'THE GRIMOIRE OF REJECTION'})
    table.hand(state, 1, '7C')
    state = use_class_ability(state, 0).state
    assert state.pending.awaited_input == InputKind.OPTION
    state = provide_option(state, 0, '7').state

    # writing is free: still player 0's action
    assert state.rejection_rank == '7'
    assert state.active_player_id == 0
    assert state.phase == TurnPhase.ACTION
    assert use_class_ability(state, 0).error_code == errors.ABILITY_USED

    state = pass_turn(state, 0).state
    idx = next(i for i, c in enumerate(state.players[1].hand) if c.rank == '7')
    state = haunt(state, 1, idx).state
    assert state.rejection_rank is None
    assert state.players[0].shadow == []
    assert state.players[2].shadow == []
    assert '7♣' in labels(state.discard)
    assert state.active_player_id == 2


# modifiers

def test_warlock_haunts_with_face_cards(table):
    state = table(3, classes={0: 'THE WARLOCK'})
    table.hand(state, 0, 'QH')
    state = haunt(state, 0, 0).state
    state = provide_target(state, 0, 1).state
    ghost = state.players[1].shadow[0]
    assert ghost.rank == 'Q'
    assert ghost.value == 10


def test_ravenous_steals_instead_of_drawing(table):
    state = table(3, classes={0: 'THE RAVENOUS'})
    table.hand(state, 0, '2H')
    table.hand(state, 1, 'KS')
    state = cast(state, 0, 0).state
    state = provide_target(state, 0, 1).state
    assert labels(state.players[0].hand) == ['K♠']
    assert len(state.players[0].deck) == 10


def test_sadist_scare_drops_two(table):
    state = table(3, classes={0: 'THE SADIST'})
    table.hand(state, 0, '3H')
    table.hand(state, 1, 'AC', '2C')
    table.hand(state, 2, 'AS', '2S')
    state = cast(state, 0, 0).state
    # two dropped, then player 1 drew at the start of their turn
    assert len(state.players[1].hand) + len(state.players[2].hand) == 3


def test_extortioner_sight_takes_two(table):
    state = table(3, classes={0: 'THE EXTORTIONER'})
    table.hand(state, 0, '6H')
    table.hand(state, 1, 'AC', '2C')
    state = cast(state, 0, 0).state
    state = provide_target(state, 0, 1).state
    assert state.pending.awaited_input == InputKind.CARD
    state = provide_card(state, 0, 0).state
    assert state.pending.awaited_input == InputKind.CARD
    state = provide_card(state, 0, 0).state
    assert sorted(labels(state.players[0].hand)) == ['2♣', 'A♣']
    assert validate_deck_integrity(state)


def test_gatekeeper_is_immune_to_mirror(table):
    state = table(3, classes={1: 'THE GATEKEEPER'})
    table.hand(state, 0, 'JH')
    state = cast(state, 0, 0).state
    result = provide_target(state, 0, 1)
    assert not result.success
    assert result.error_code == errors.IMMUNE


def test_occultist_possesses_across_the_table(table):
    state = table(4, classes={0: 'THE OCCULTIST'})
    table.hand(state, 0, '9H')
    table.shadow(state, 0, '3S')
    state = cast(state, 0, 0).state
    state = provide_ghost(state, 0, 0, 0).state
    state = provide_target(state, 0, 2).state
    assert labels(state.players[2].shadow) == ['3♠']
    # distant possession heals one card from the dark
    assert len(state.players[0].deck) == 11
    assert validate_deck_integrity(state)


def test_possess_limited_to_neighbours(table):
    state = table(4)
    table.hand(state, 0, '9H')
    table.shadow(state, 0, '3S')
    state = cast(state, 0, 0).state
    state = provide_ghost(state, 0, 0, 0).state
    assert provide_target(state, 0, 2).error_code == errors.INVALID_TARGET


# reactive hooks

def test_voodoo_doll_pricks_the_attacker(table):
    state = table(3, classes={1: 'THE VOODOO DOLL'})
    state.players[1].bound_suits = ['H', 'S']
    table.hand(state, 0, '7H')
    state = haunt(state, 0, 0).state
    state = provide_target(state, 0, 1).state
    assert len(state.players[0].deck) == 9


def test_meddler_buries_target_deck_top(table):
    state = table(3, classes={0: 'THE MEDDLER'})
    table.hand(state, 0, '7H')
    state.players[1].deck[0] = table.card('KH')
    table.seal(state)
    state = haunt(state, 0, 0).state
    state = provide_target(state, 0, 1).state
    assert state.players[1].deck[-1].label == 'K♥'


def test_sealbinder_ghosts_cannot_be_recalled(table):
    state = table(3, classes={2: 'THE SEALBINDER'})
    table.hand(state, 0, '8H')
    table.shadow(state, 1, '6S', by=2)
    result = cast(state, 0, 0)
    assert not result.success
    assert result.error_code == errors.ZONE_EMPTY


def test_clown_ghosts_need_face_or_seven(table):
    state = table(3, classes={1: 'THE CLOWN'})
    table.hand(state, 0, '9C', '7C')
    table.shadow(state, 0, '3H', by=1)
    pending = banish(state, 0, 0).state
    assert provide_ghost(pending, 0, 0, 0).error_code == errors.CARD_TOO_WEAK

    state = banish(state, 0, 1).state
    assert provide_ghost(state, 0, 0, 0).success


def test_plague_spreads_banished_ghost(table):
    state = table(4, classes={2: 'THE PLAGUE'})
    table.hand(state, 0, '9C')
    table.shadow(state, 0, '3H', by=2)
    state = banish(state, 0, 0).state
    state = provide_ghost(state, 0, 0, 0).state
    assert state.players[0].shadow == []
    assert labels(state.players[3].shadow) == ['3♥']


def test_reaper_collects_neighbour_banish(table):
    state = table(3, classes={1: 'THE REAPER'})
    table.hand(state, 0, '9C')
    table.shadow(state, 0, '3H', by=2)
    ghost_uid = state.players[0].shadow[0].uid
    state = banish(state, 0, 0).state
    state = provide_ghost(state, 0, 0, 0).state
    assert any(c.uid == ghost_uid for c in state.players[1].deck)


def test_priest_may_draw_after_banish(table):
    state = table(3, classes={0: 'THE PRIEST'})
    table.hand(state, 0, '9C')
    table.shadow(state, 0, '3H')
    state = banish(state, 0, 0).state
    state = provide_ghost(state, 0, 0, 0).state
    assert state.pending.kind == PendingKind.PRIEST_DRAW
    state = provide_yes_no(state, 0, True).state
    assert len(state.players[0].hand) == 1
    assert state.active_player_id == 1


def test_leech_always_siphons(table):
    state = table(3, classes={0: 'THE LEECH'})
    table.hand(state, 0, '9C')
    table.shadow(state, 0, '3H')
    state = banish(state, 0, 0).state
    state = provide_ghost(state, 0, 0, 0).state
    assert state.players[0].deck[-1].label == '3♥'


def test_exorcist_cleanses_two(table):
    state = table(3, classes={0: 'THE EXORCIST'})
    table.hand(state, 0, '7C')
    table.shadow(state, 0, '3H', '4S')
    state = cast(state, 0, 0).state
    state = provide_ghost(state, 0, 0, 0).state
    assert state.pending.awaited_input == InputKind.GHOST
    state = provide_ghost(state, 0, 0, 1).state
    p0 = state.players[0]
    assert p0.shadow == []
    assert p0.deck[-1].label == '3♥'
    assert '4♠' in labels(state.discard)


# active abilities

def test_doomreader_shifts_a_suit(table):
    state = table(3, classes={0: 'THE DOOMREADER'})
    table.hand(state, 0, '2C')
    table.shadow(state, 0, '3H')
    state = use_class_ability(state, 0, 0).state
    state = provide_ghost(state, 0, 0, 0).state
    assert labels(state.players[0].shadow) == ['3♣']


def test_pyromaniac_needs_a_red_card(table):
    state = table(3, classes={0: 'THE PYROMANIAC'})
    table.hand(state, 0, '2S', '2H')
    assert use_class_ability(state, 0, 0).error_code == errors.INVALID_SELECTION

    state = use_class_ability(state, 0, 1).state
    state = provide_target(state, 0, 1).state
    # burned 2, then drew 1 on their own turn
    assert len(state.players[1].deck) == 7


def test_userer_trades_cards(table):
    state = table(3, classes={0: 'THE USERER'})
    table.hand(state, 0, '2H', '3H')
    table.hand(state, 1, 'KS')
    state = use_class_ability(state, 0, 0).state
    state = provide_target(state, 0, 1).state
    state = provide_card(state, 0, 0).state
    assert sorted(labels(state.players[0].hand)) == ['3♥', 'K♠']
    assert '2♥' in labels(state.players[1].hand)


def test_inquisitor_burns_a_face_holder(table):
    state = table(3, classes={0: 'THE INQUISITOR'})
    table.hand(state, 0, '2H')
    table.hand(state, 1, 'QS')
    state = use_class_ability(state, 0, 0).state
    state = provide_target(state, 0, 1).state
    assert len(state.players[1].deck) == 7


def test_mimic_swaps_decks_once(table):
    state = table(3, classes={0: 'THE MIMIC'})
    state.players[1].deck = state.players[1].deck[:3]
    table.seal(state)
    state = use_class_ability(state, 0).state
    state = provide_target(state, 0, 1).state
    assert len(state.players[0].deck) == 3
    assert state.players[0].used_mimic


def test_cryptkeeper_builds_a_wall(table):
    state = table(3, classes={0: 'THE CRYPTKEEPER'})
    table.hand(state, 0, '9S')
    state = use_class_ability(state, 0, 0).state
    p0 = state.players[0]
    assert [c.is_wall for c in p0.shadow] == [True]
    assert p0.ghosts == []


def test_doomreader_shift_can_possess_under_dark_ritual(table):
    state = table(3, classes={0: 'THE DOOMREADER'}, alternate=True)
    table.hand(state, 0, '2C')
    table.shadow(state, 0, '3H', '4H', '9S')
    state = use_class_ability(state, 0, 0).state
    state = provide_ghost(state, 0, 0, 2).state
    assert state.players[0].eliminated
    assert state.active_player_id == 1
    assert validate_deck_integrity(state)


def test_pyromaniac_kill_is_attributed(table):
    state = table(3, classes={0: 'THE PYROMANIAC'})
    table.hand(state, 0, '2H')
    state.players[1].deck = state.players[1].deck[:1]
    table.seal(state)
    state = use_class_ability(state, 0, 0).state
    state = provide_target(state, 0, 1).state
    assert state.players[1].eliminated
    assert state.last_attacker[1] == 0


def test_voodoo_doll_can_burn_out_the_attacker(table):
    state = table(3, classes={1: 'THE VOODOO DOLL'})
    state.players[1].bound_suits = ['H', 'S']
    table.hand(state, 0, '7H')
    state.players[0].deck = []
    table.seal(state)
    state = haunt(state, 0, 0).state
    state = provide_target(state, 0, 1).state
    assert state.players[0].eliminated
    assert state.last_attacker[0] == 1
    assert labels(state.players[1].shadow) == ['7♥']
