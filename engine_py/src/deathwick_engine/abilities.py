"""
Active class abilities, resolved through the same machinery as card effects.
"""

from typing import Dict

from . import errors
from .constants import HEARTS, DIAMONDS, JOKER, RANKS, SUIT_CYCLE, InputKind
from .effects import (
    EffectSpec, accept_ghost, accept_pick, accept_target, actor_of,
    picked_ghosts, picks_of, require, spend_played_card, target_of,
)
from .evaluator import check_instant_possession, handle_death
from .seating import neighbor_list
from .zones import add_wall, burn, find_in_hand


def _target_plan(state, p):
    return InputKind.TARGET if p.target_id is None else None


def _needs_neighbor(state, actor, card):
    require(bool(neighbor_list(state, actor)), errors.INVALID_TARGET, "No one to target")


# grimoire: write down a rank

def _grimoire_options(state, p):
    return [r for r in RANKS + [JOKER] if r != state.last_rejection_rank]


def _grimoire_precheck(state, actor, card):
    require(not state.rejection_set_this_turn, errors.ABILITY_USED, "The grimoire was already written this turn")


def _grimoire_plan(state, p):
    return InputKind.OPTION if 'option' not in p.payload else None


def _grimoire_accept(state, p, kind, value):
    require(value in _grimoire_options(state, p), errors.INVALID_SELECTION,
            "That rank cannot be written down again")
    p.payload['option'] = value


def _grimoire_resolve(state, p):
    actor = actor_of(state, p)
    rank = p.payload['option']
    state.rejection_rank = rank
    state.last_rejection_rank = rank
    state.rejection_set_this_turn = True
    state.add_log(f"{actor.name} writes {rank} in the grimoire of rejection.")


# doomreader: shift one ghost's suit

def _doomreader_precheck(state, actor, card):
    require(not actor.doomreader_used, errors.ABILITY_USED, "Already read your doom this turn")
    require(any(g.suit is not None for g in actor.ghosts), errors.ZONE_EMPTY, "You have no ghost to shift")


def _doomreader_plan(state, p):
    return None if p.payload.get('ghosts') else InputKind.GHOST


def _doomreader_accept(state, p, kind, value):
    accept_ghost(state, p, value, predicate=lambda g: g.suit is not None)


def _doomreader_resolve(state, p):
    actor = actor_of(state, p)
    spend_played_card(state, p)
    (_, ghost), = picked_ghosts(state, p)
    before = ghost.label
    ghost.suit = SUIT_CYCLE[(SUIT_CYCLE.index(ghost.suit) + 1) % len(SUIT_CYCLE)]
    actor.doomreader_used = True
    state.add_log(f"{actor.name} reads doom: {before} becomes {ghost.label}.")
    check_instant_possession(state, actor)


# pyromaniac: a red card sets a neighbour's deck alight

def _pyromaniac_precheck(state, actor, card):
    require(card.suit in (HEARTS, DIAMONDS), errors.INVALID_SELECTION, "Only a heart or diamond will burn")
    _needs_neighbor(state, actor, card)


def _pyromaniac_accept(state, p, kind, value):
    accept_target(state, p, value)


def _pyromaniac_resolve(state, p):
    actor, target = actor_of(state, p), target_of(state, p)
    spend_played_card(state, p)
    state.add_log(f"{actor.name} sets {target.name}'s candle ablaze: burn 2.")
    if not burn(state, target, 2):
        state.last_attacker[target.id] = actor.id
        handle_death(state, target)


# userer: trade a hand card for a chosen one

def _userer_precheck(state, actor, card):
    require(any(n.hand for n in neighbor_list(state, actor)), errors.INVALID_TARGET,
            "No neighbour has a card to trade")


def _userer_plan(state, p):
    if p.target_id is None:
        return InputKind.TARGET
    return None if picks_of(p) else InputKind.CARD


def _userer_accept(state, p, kind, value):
    if kind == InputKind.TARGET:
        accept_target(state, p, value, extra=lambda t: bool(t.hand))
    else:
        accept_pick(state, p, value)


def _userer_resolve(state, p):
    actor, target = actor_of(state, p), target_of(state, p)
    given = actor.hand.pop(find_in_hand(actor, p.card_uid))
    taken = target.hand.pop(find_in_hand(target, picks_of(p)[0]))
    actor.hand.append(taken)
    target.hand.append(given)
    state.add_log(f"{actor.name} trades a card with {target.name}.")


# inquisitor: inspect a hand for face cards

def _inquisitor_accept(state, p, kind, value):
    accept_target(state, p, value)


def _inquisitor_resolve(state, p):
    actor, target = actor_of(state, p), target_of(state, p)
    spend_played_card(state, p)
    shown = ', '.join(c.label for c in target.hand) or 'nothing'
    state.add_log(f"{actor.name} inquires into {target.name}'s hand: {shown}.")
    if any(c.is_face for c in target.hand):
        state.add_log(f"{target.name} is found guilty and burns 2.")
        if not burn(state, target, 2):
            state.last_attacker[target.id] = actor.id
            handle_death(state, target)


# mimic: swap decks once per game

def _mimic_precheck(state, actor, card):
    require(not actor.used_mimic, errors.ABILITY_USED, "The mimic's trick works only once")
    _needs_neighbor(state, actor, card)


def _mimic_accept(state, p, kind, value):
    accept_target(state, p, value)


def _mimic_resolve(state, p):
    actor, target = actor_of(state, p), target_of(state, p)
    actor.deck, target.deck = target.deck, actor.deck
    actor.used_mimic = True
    state.add_log(f"{actor.name} swaps candles with {target.name}.")


# cryptkeeper: build a wall

def _cryptkeeper_resolve(state, p):
    actor = actor_of(state, p)
    card = actor.hand.pop(find_in_hand(actor, p.card_uid))
    add_wall(actor, card)
    state.add_log(f"{actor.name} raises a wall in their shadow.")


ABILITIES: Dict[str, EffectSpec] = {
    'grimoire': EffectSpec('grimoire', _grimoire_resolve, _grimoire_plan, _grimoire_accept, _grimoire_precheck,
                           options=_grimoire_options, needs_card=False, free_action=True),
    'doomreader': EffectSpec('doomreader', _doomreader_resolve, _doomreader_plan, _doomreader_accept,
                             _doomreader_precheck),
    'pyromaniac': EffectSpec('pyromaniac', _pyromaniac_resolve, _target_plan, _pyromaniac_accept,
                             _pyromaniac_precheck),
    'userer': EffectSpec('userer', _userer_resolve, _userer_plan, _userer_accept, _userer_precheck,
                         pool=lambda s, p: list(target_of(s, p).hand) if p.target_id is not None else []),
    'inquisitor': EffectSpec('inquisitor', _inquisitor_resolve, _target_plan, _inquisitor_accept,
                             _needs_neighbor),
    'mimic': EffectSpec('mimic', _mimic_resolve, _target_plan, _mimic_accept, _mimic_precheck,
                        needs_card=False),
    'cryptkeeper': EffectSpec('cryptkeeper', _cryptkeeper_resolve),
}
