"""
Card effect resolver.

Every multi-step effect is described by an EffectSpec: `plan` names the next
input the effect still needs (or None when it can resolve), `accept`
validates and records one input, and `resolve` applies the effect. The
collected inputs live on the pending action, so a suspended effect can be
snapshotted and resumed.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from . import errors
from .classes import HookContext, capability
from .comparator import can_banish, compute_siphon, passes_clown_ward
from .constants import (
    EFFECT_ALARM, EFFECT_CLEANSE, EFFECT_DRAIN, EFFECT_EXCHANGE, EFFECT_GREED,
    EFFECT_MEDIUM, EFFECT_MIRROR, EFFECT_POSSESS, EFFECT_PURGE, EFFECT_RECALL,
    EFFECT_REKINDLE, EFFECT_SALT, EFFECT_SCARE, EFFECT_SIGHT, JOKER,
    MEDIUM_EXHUME, MEDIUM_OPTIONS, SPADES, InputKind, PendingKind,
)
from .errors import GameError
from .evaluator import check_instant_possession
from .models import Card, GameState, PendingAction, Player
from .scheduler import finish_action
from .seating import neighbor_list, valid_targets
from .shuffle import shuffle_cards
from .zones import (
    discard_top, draw, find_in_hand, heal, remove_ghost, shuffle_deck, to_discard,
)

logger = logging.getLogger(__name__)

Plan = Callable[[GameState, PendingAction], Optional[InputKind]]
Accept = Callable[[GameState, PendingAction, InputKind, Any], None]
Resolve = Callable[[GameState, PendingAction], None]


@dataclass
class EffectSpec:
    name: str
    resolve: Resolve
    plan: Optional[Plan] = None
    accept: Optional[Accept] = None
    precheck: Optional[Callable[[GameState, Player, Optional[Card]], None]] = None
    pool: Optional[Callable[[GameState, PendingAction], List[Card]]] = None
    options: Optional[Callable[[GameState, PendingAction], List[str]]] = None
    needs_card: bool = True
    free_action: bool = False


# ---------------------------------------------------------------------------
# helpers shared with the class abilities
# ---------------------------------------------------------------------------

def actor_of(state: GameState, pending: PendingAction) -> Player:
    return state.players[pending.actor_id]


def target_of(state: GameState, pending: PendingAction) -> Optional[Player]:
    return state.get_player(pending.target_id)


def played_card(state: GameState, pending: PendingAction) -> Optional[Card]:
    actor = actor_of(state, pending)
    idx = find_in_hand(actor, pending.card_uid)
    return actor.hand[idx] if idx is not None else None


def spend_played_card(state: GameState, pending: PendingAction) -> Optional[Card]:
    """Move the played card from the actor's hand to the discard."""
    actor = actor_of(state, pending)
    idx = find_in_hand(actor, pending.card_uid)
    if idx is None:
        return None
    card = actor.hand.pop(idx)
    to_discard(state, card)
    return card


def picked_ghosts(state: GameState, pending: PendingAction) -> List[Tuple[Player, Card]]:
    result = []
    for owner_id, uid in pending.payload.get('ghosts', []):
        owner = state.players[owner_id]
        for g in owner.shadow:
            if g.uid == uid:
                result.append((owner, g))
                break
    return result


def is_sealed(state: GameState, ghost: Card) -> bool:
    return capability(state.get_player(ghost.haunted_by)).seals_ghosts


def has_ghost(player: Player) -> bool:
    return bool(player.ghosts)


def require(condition: bool, code: str, message: str):
    if not condition:
        raise GameError(code, message)


def accept_target(state: GameState, pending: PendingAction, value: Any,
                  immune: Optional[Callable[[Player], bool]] = None,
                  extra: Optional[Callable[[Player], bool]] = None):
    actor = actor_of(state, pending)
    target = state.get_player(value) if isinstance(value, int) else None
    legal = valid_targets(state, actor, pending)
    require(target is not None and any(t.id == target.id for t in legal),
            errors.INVALID_TARGET, "That player is not a legal target")
    if immune is not None and immune(target):
        raise GameError(errors.IMMUNE, f"{target.name} is immune to that")
    if extra is not None:
        require(extra(target), errors.INVALID_TARGET, f"{target.name} cannot be chosen for that")
    pending.target_id = target.id


def accept_ghost(state: GameState, pending: PendingAction, value: Any,
                 own: bool = True, allow_sealed: bool = True,
                 predicate: Optional[Callable[[Card], bool]] = None) -> Card:
    try:
        owner_id, index = value
    except (TypeError, ValueError):
        raise GameError(errors.INVALID_SELECTION, "Ghost selection must be (owner, index)")
    owner = state.get_player(owner_id)
    require(owner is not None and not owner.eliminated, errors.INVALID_SELECTION, "No such shadow")
    if own:
        require(owner.id == pending.actor_id, errors.INVALID_SELECTION, "Choose one of your own ghosts")
    require(isinstance(index, int) and 0 <= index < len(owner.shadow),
            errors.INVALID_SELECTION, "No ghost at that position")
    ghost = owner.shadow[index]
    require(not ghost.is_wall, errors.INVALID_SELECTION, "Walls are not ghosts")
    if not allow_sealed and is_sealed(state, ghost):
        raise GameError(errors.IMMUNE, "That ghost is sealed")
    if predicate is not None:
        require(predicate(ghost), errors.INVALID_SELECTION, "That ghost cannot be chosen")
    chosen = pending.payload.setdefault('ghosts', [])
    require(all(uid != ghost.uid for _, uid in chosen), errors.INVALID_SELECTION, "Ghost already chosen")
    chosen.append([owner.id, ghost.uid])
    return ghost


def accept_pick(state: GameState, pending: PendingAction, value: Any,
                predicate: Optional[Callable[[Card], bool]] = None) -> Card:
    pool = spec_for(pending).pool(state, pending)
    require(isinstance(value, int) and 0 <= value < len(pool),
            errors.INVALID_SELECTION, "No card at that position")
    card = pool[value]
    if predicate is not None:
        require(predicate(card), errors.INVALID_SELECTION, f"{card.label} cannot be chosen")
    pending.payload.setdefault('picks', []).append(card.uid)
    return card


def picks_of(pending: PendingAction) -> List[int]:
    return pending.payload.get('picks', [])


def take_from_discard(state: GameState, uid: int) -> Optional[Card]:
    for i, c in enumerate(state.discard):
        if c.uid == uid:
            return state.discard.pop(i)
    return None


def run_post_hooks(state: GameState, ctx: HookContext):
    hook = capability(ctx.actor).actor_post
    if hook is not None:
        hook(state, ctx)


def is_rejected(state: GameState, card: Card) -> bool:
    rank = state.rejection_rank
    if rank is None:
        return False
    if rank == JOKER:
        return card.is_face or card.is_joker
    return card.rank == rank


def enforce_rejection(state: GameState, actor: Player, card_index: int) -> bool:
    """A card of the written-down rank is cancelled and the writing erased."""
    card = actor.hand[card_index]
    if not is_rejected(state, card):
        return False
    actor.hand.pop(card_index)
    to_discard(state, card)
    state.add_log(f"{actor.name}'s {card.label} is rejected by the grimoire.")
    state.rejection_rank = None
    finish_action(state)
    return True


# ---------------------------------------------------------------------------
# A: exchange
# ---------------------------------------------------------------------------

def _exchange_precheck(state, actor, card):
    require(has_ghost(actor), errors.ZONE_EMPTY, "You have no ghost to exchange")
    require(any(c.is_number for c in state.discard), errors.ZONE_EMPTY, "The dark holds no number card")


def _exchange_plan(state, p):
    if not p.payload.get('ghosts'):
        return InputKind.GHOST
    if not picks_of(p):
        return InputKind.CARD
    return None


def _exchange_accept(state, p, kind, value):
    if kind == InputKind.GHOST:
        accept_ghost(state, p, value)
    else:
        accept_pick(state, p, value, lambda c: c.is_number)


def _exchange_resolve(state, p):
    actor = actor_of(state, p)
    (owner, ghost), = picked_ghosts(state, p)
    replacement = take_from_discard(state, picks_of(p)[0])
    idx = owner.shadow.index(ghost)
    replacement.haunted_by = ghost.haunted_by
    replacement.is_wall = False
    owner.shadow[idx] = replacement
    to_discard(state, ghost)
    spend_played_card(state, p)
    state.add_log(f"{actor.name} exchanges {ghost.label} for {replacement.label} from the dark.")
    check_instant_possession(state, actor)


# ---------------------------------------------------------------------------
# 2: greed
# ---------------------------------------------------------------------------

def _greed_plan(state, p):
    actor = actor_of(state, p)
    if capability(actor).greed_steals and neighbor_list(state, actor) and p.target_id is None:
        return InputKind.TARGET
    return None


def _greed_accept(state, p, kind, value):
    accept_target(state, p, value)


def _greed_resolve(state, p):
    actor = actor_of(state, p)
    spend_played_card(state, p)
    target = target_of(state, p)
    if target is not None:
        if target.hand:
            stolen = target.hand.pop(state.rng.randrange(len(target.hand)))
            actor.hand.append(stolen)
            state.add_log(f"{actor.name} steals a card from {target.name}.")
        else:
            state.add_log(f"{actor.name} finds {target.name}'s hand empty.")
        return
    drawn = min(2, len(actor.deck))
    draw(state, actor, drawn)
    state.add_log(f"{actor.name} uses Greed and draws {drawn}.")


# ---------------------------------------------------------------------------
# 3: scare
# ---------------------------------------------------------------------------

def _scare_resolve(state, p):
    actor = actor_of(state, p)
    spend_played_card(state, p)
    around = neighbor_list(state, actor)
    if not around:
        state.add_log(f"{actor.name}'s Scare finds no one.")
        return
    target = state.rng.choice(around)
    p.target_id = target.id
    shuffle_cards(target.hand, state.rng)
    lost = 0
    for _ in range(capability(actor).scare_discards):
        if target.hand:
            to_discard(state, target.hand.pop(0))
            lost += 1
    state.add_log(f"{actor.name} scares {target.name}, who drops {lost} card(s).")


# ---------------------------------------------------------------------------
# 4: drain
# ---------------------------------------------------------------------------

def _needs_neighbor(state, actor, card):
    require(bool(neighbor_list(state, actor)), errors.INVALID_TARGET, "No one to target")


def _target_plan(state, p):
    return InputKind.TARGET if p.target_id is None else None


def _drain_accept(state, p, kind, value):
    accept_target(state, p, value)


def _drain_resolve(state, p):
    actor, target = actor_of(state, p), target_of(state, p)
    spend_played_card(state, p)
    if capability(target).drain_immune:
        state.add_log(f"{target.name} shrugs off the Drain.")
        return
    if target.deck:
        actor.deck.insert(0, target.deck.pop(0))
        state.add_log(f"{actor.name} drains the top of {target.name}'s deck.")
    else:
        state.add_log(f"{target.name} has nothing left to drain.")


# ---------------------------------------------------------------------------
# 5: salt
# ---------------------------------------------------------------------------

def _salt_resolve(state, p):
    actor = actor_of(state, p)
    spend_played_card(state, p)
    actor.salted = True
    state.add_log(f"{actor.name} lays a ring of salt.")


# ---------------------------------------------------------------------------
# 6: sight
# ---------------------------------------------------------------------------

def _sight_pool(state, p):
    actor = actor_of(state, p)
    if capability(actor).sight_both_neighbors:
        cards = []
        for n in neighbor_list(state, actor):
            cards.extend(n.hand)
        return cards
    target = target_of(state, p)
    return list(target.hand) if target is not None else []


def _sight_plan(state, p):
    actor = actor_of(state, p)
    cap = capability(actor)
    if cap.sight_both_neighbors:
        takes = 1
    else:
        if p.target_id is None:
            return InputKind.TARGET
        takes = cap.sight_takes
    if len(picks_of(p)) < takes and _sight_pool(state, p):
        return InputKind.CARD
    return None


def _sight_accept(state, p, kind, value):
    if kind == InputKind.TARGET:
        accept_target(state, p, value)
        return
    card = accept_pick(state, p, value)
    actor = actor_of(state, p)
    for owner in neighbor_list(state, actor):
        if any(c is card for c in owner.hand):
            owner.hand = [c for c in owner.hand if c is not card]
            actor.hand.append(card)
            state.add_log(f"{actor.name} takes a card from {owner.name}'s hand.")
            break
    p.payload['committed'] = True


def _sight_resolve(state, p):
    actor = actor_of(state, p)
    spend_played_card(state, p)
    if not picks_of(p):
        state.add_log(f"{actor.name} peers into an empty hand.")


# ---------------------------------------------------------------------------
# 7: cleanse
# ---------------------------------------------------------------------------

def _ghost_precheck(state, actor, card):
    require(has_ghost(actor), errors.ZONE_EMPTY, "You have no ghost")


def _cleanse_plan(state, p):
    actor = actor_of(state, p)
    chosen = p.payload.get('ghosts', [])
    if not chosen:
        return InputKind.GHOST
    if capability(actor).exorcist_cleanse and len(chosen) == 1 and len(actor.ghosts) > 1:
        return InputKind.GHOST
    return None


def _cleanse_accept(state, p, kind, value):
    accept_ghost(state, p, value)


def _cleanse_resolve(state, p):
    actor = actor_of(state, p)
    card = spend_played_card(state, p)
    cap = capability(actor)
    ghosts = [remove_ghost(owner, g) for owner, g in picked_ghosts(state, p)]
    if cap.exorcist_cleanse:
        healed = next((g for g in ghosts if g.suit != SPADES and not g.is_joker), None)
    else:
        healed = next((g for g in ghosts if compute_siphon(card, g, cap.always_siphon)), None)
    for g in ghosts:
        if g is healed:
            heal(actor, [g])
            state.add_log(f"{actor.name} cleanses {g.label} and siphons it into their deck.")
        else:
            to_discard(state, g)
            state.add_log(f"{actor.name} cleanses {g.label}.")


# ---------------------------------------------------------------------------
# 8: recall
# ---------------------------------------------------------------------------

def _recall_precheck(state, actor, card):
    require(any(not is_sealed(state, g) for p in state.alive_players() for g in p.ghosts),
            errors.ZONE_EMPTY, "There is no ghost to recall")


def _recall_plan(state, p):
    return None if p.payload.get('ghosts') else InputKind.GHOST


def _recall_accept(state, p, kind, value):
    accept_ghost(state, p, value, own=False, allow_sealed=False)


def _recall_resolve(state, p):
    actor = actor_of(state, p)
    spend_played_card(state, p)
    (owner, ghost), = picked_ghosts(state, p)
    remove_ghost(owner, ghost)
    ghost.haunted_by = None
    ghost.value_override = None
    actor.hand.append(ghost)
    state.add_log(f"{actor.name} recalls {ghost.label} from {owner.name}'s shadow.")


# ---------------------------------------------------------------------------
# 9: possess
# ---------------------------------------------------------------------------

def _possess_precheck(state, actor, card):
    require(any(not is_sealed(state, g) for g in actor.ghosts), errors.ZONE_EMPTY, "You have no ghost to move")
    require(bool(valid_targets(state, actor, PendingAction(PendingKind.CAST, InputKind.GHOST, actor.id,
                                                           payload={'rank': '9'}))),
            errors.INVALID_TARGET, "No one to possess")


def _possess_plan(state, p):
    if not p.payload.get('ghosts'):
        return InputKind.GHOST
    if p.target_id is None:
        return InputKind.TARGET
    return None


def _possess_accept(state, p, kind, value):
    if kind == InputKind.GHOST:
        accept_ghost(state, p, value, allow_sealed=False)
    else:
        accept_target(state, p, value, immune=lambda t: capability(t).possess_immune)


def _possess_resolve(state, p):
    actor, target = actor_of(state, p), target_of(state, p)
    card = spend_played_card(state, p)
    (owner, ghost), = picked_ghosts(state, p)
    remove_ghost(owner, ghost)
    target.shadow.append(ghost)
    state.last_attacker[target.id] = actor.id
    state.add_log(f"{actor.name} possesses {target.name} with {ghost.label}.")
    run_post_hooks(state, HookContext(actor, card, target, action='cast'))
    check_instant_possession(state, target)


# ---------------------------------------------------------------------------
# 10: rekindle
# ---------------------------------------------------------------------------

def _rekindle_resolve(state, p):
    actor = actor_of(state, p)
    cards = discard_top(state, 3)
    heal(actor, cards, bottom=False)
    shuffle_deck(state, actor)
    spend_played_card(state, p)
    state.add_log(f"{actor.name} rekindles {len(cards)} card(s) from the dark.")


# ---------------------------------------------------------------------------
# J: mirror
# ---------------------------------------------------------------------------

def _mirror_accept(state, p, kind, value):
    accept_target(state, p, value, immune=lambda t: capability(t).possess_immune)


def _mirror_resolve(state, p):
    actor, target = actor_of(state, p), target_of(state, p)
    spend_played_card(state, p)
    actor.shadow, target.shadow = target.shadow, actor.shadow
    state.add_log(f"{actor.name} mirrors shadows with {target.name}.")
    check_instant_possession(state, actor)
    check_instant_possession(state, target)


# ---------------------------------------------------------------------------
# Q: medium
# ---------------------------------------------------------------------------

def _medium_options(state, p):
    can_exhume = any(not c.is_joker for c in state.discard)
    return [o for o in MEDIUM_OPTIONS if o != MEDIUM_EXHUME or can_exhume]


def _medium_plan(state, p):
    option = p.payload.get('option')
    if option is None:
        return InputKind.OPTION
    if option == MEDIUM_EXHUME and not picks_of(p):
        return InputKind.CARD
    return None


def _medium_accept(state, p, kind, value):
    if kind == InputKind.OPTION:
        require(value in _medium_options(state, p), errors.INVALID_SELECTION, f"Unknown choice {value!r}")
        p.payload['option'] = value
    else:
        accept_pick(state, p, value, lambda c: not c.is_joker)


def _medium_resolve(state, p):
    actor = actor_of(state, p)
    if p.payload['option'] == MEDIUM_EXHUME:
        card = take_from_discard(state, picks_of(p)[0])
        actor.hand.append(card)
        state.add_log(f"{actor.name} exhumes {card.label} from the dark.")
    else:
        cards = discard_top(state, 2)
        heal(actor, cards, bottom=False)
        shuffle_deck(state, actor)
        state.add_log(f"{actor.name} rekindles {len(cards)} card(s) through the medium.")
    spend_played_card(state, p)


# ---------------------------------------------------------------------------
# K: purge
# ---------------------------------------------------------------------------

def _purge_resolve(state, p):
    actor = actor_of(state, p)
    spend_played_card(state, p)
    ghosts = actor.ghosts
    actor.shadow = actor.walls
    to_discard(state, *ghosts)
    state.add_log(f"{actor.name} purges {len(ghosts)} ghost(s).")


# ---------------------------------------------------------------------------
# JOKER: alarm
# ---------------------------------------------------------------------------

def _alarm_resolve(state, p):
    from .interrupts import start_alarm

    start_alarm(state, p)


# ---------------------------------------------------------------------------
# banish and panic
# ---------------------------------------------------------------------------

def _banish_accept(state, p, kind, value):
    card = played_card(state, p)

    def beatable(ghost):
        attacker = state.get_player(ghost.haunted_by)
        if capability(attacker).ghosts_need_face_or_seven and not passes_clown_ward(card):
            raise GameError(errors.CARD_TOO_WEAK, "Only a face card or a 7 banishes that ghost")
        if not can_banish(card, ghost):
            raise GameError(errors.CARD_TOO_WEAK, f"{card.label} is too weak to banish {ghost.label}")
        return True

    accept_ghost(state, p, value, predicate=beatable)


def dispose_banished(state: GameState, actor: Player, ghost: Card):
    """Where a banished ghost goes when it does not siphon."""
    from .zones import attach_ghost

    attacker = state.get_player(ghost.haunted_by)
    if capability(attacker).spreads_banished:
        for n in neighbor_list(state, actor):
            if n.id != attacker.id and n.id != actor.id:
                state.add_log(f"The plague spreads {ghost.label} to {n.name}.")
                attach_ghost(state, n, ghost, attacker)
                return
    reaper = next((n for n in neighbor_list(state, actor) if capability(n).reaps_banished), None)
    if reaper is not None:
        heal(reaper, [ghost])
        state.add_log(f"{reaper.name} reaps the banished {ghost.label}.")
        return
    to_discard(state, ghost)


def _banish_resolve(state, p):
    actor = actor_of(state, p)
    card = spend_played_card(state, p)
    (owner, ghost), = picked_ghosts(state, p)
    remove_ghost(owner, ghost)
    cap = capability(actor)
    if compute_siphon(card, ghost, cap.always_siphon):
        heal(actor, [ghost])
        state.add_log(f"{actor.name} banishes {ghost.label} with {card.label} and siphons it.")
        return
    state.add_log(f"{actor.name} banishes {ghost.label} with {card.label}.")
    dispose_banished(state, actor, ghost)
    if cap.draws_after_banish and actor.deck and not state.is_game_over:
        state.pending = PendingAction(PendingKind.PRIEST_DRAW, InputKind.YES_NO, actor.id)


def _panic_precheck(state, actor, card):
    require(bool(actor.deck), errors.ZONE_EMPTY, "Your deck is empty")
    require(has_ghost(actor), errors.ZONE_EMPTY, "You have no ghost")


def _panic_resolve(state, p):
    actor = actor_of(state, p)
    (owner, ghost), = picked_ghosts(state, p)
    flip = actor.deck.pop(0)
    if flip.is_joker:
        remove_ghost(owner, ghost)
        to_discard(state, flip)
        if ghost.suit != SPADES and not ghost.is_joker:
            heal(actor, [ghost])
        else:
            to_discard(state, ghost)
        state.add_log(f"{actor.name} panics and flips a joker: {ghost.label} is torn away.")
    elif flip.is_face:
        flip.haunted_by = None
        actor.shadow.append(flip)
        state.add_log(f"{actor.name} panics and flips {flip.label}. Hubris: it joins the shadow.")
    elif flip.value >= ghost.value:
        remove_ghost(owner, ghost)
        to_discard(state, ghost, flip)
        state.add_log(f"{actor.name} panics and flips {flip.label}, beating {ghost.label}.")
    else:
        flip.haunted_by = None
        actor.shadow.append(flip)
        state.add_log(f"{actor.name} panics and flips {flip.label}; it joins the shadow.")
    check_instant_possession(state, actor)


# ---------------------------------------------------------------------------
# registry and driver
# ---------------------------------------------------------------------------

EFFECTS: Dict[str, EffectSpec] = {
    EFFECT_EXCHANGE: EffectSpec(EFFECT_EXCHANGE, _exchange_resolve, _exchange_plan, _exchange_accept,
                                _exchange_precheck, pool=lambda s, p: list(s.discard)),
    EFFECT_GREED: EffectSpec(EFFECT_GREED, _greed_resolve, _greed_plan, _greed_accept),
    EFFECT_SCARE: EffectSpec(EFFECT_SCARE, _scare_resolve),
    EFFECT_DRAIN: EffectSpec(EFFECT_DRAIN, _drain_resolve, _target_plan, _drain_accept, _needs_neighbor),
    EFFECT_SALT: EffectSpec(EFFECT_SALT, _salt_resolve),
    EFFECT_SIGHT: EffectSpec(EFFECT_SIGHT, _sight_resolve, _sight_plan, _sight_accept, _needs_neighbor,
                             pool=_sight_pool),
    EFFECT_CLEANSE: EffectSpec(EFFECT_CLEANSE, _cleanse_resolve, _cleanse_plan, _cleanse_accept, _ghost_precheck),
    EFFECT_RECALL: EffectSpec(EFFECT_RECALL, _recall_resolve, _recall_plan, _recall_accept, _recall_precheck),
    EFFECT_POSSESS: EffectSpec(EFFECT_POSSESS, _possess_resolve, _possess_plan, _possess_accept,
                               _possess_precheck),
    EFFECT_REKINDLE: EffectSpec(EFFECT_REKINDLE, _rekindle_resolve),
    EFFECT_MIRROR: EffectSpec(EFFECT_MIRROR, _mirror_resolve, _target_plan, _mirror_accept, _needs_neighbor),
    EFFECT_MEDIUM: EffectSpec(EFFECT_MEDIUM, _medium_resolve, _medium_plan, _medium_accept,
                              pool=lambda s, p: list(s.discard), options=_medium_options),
    EFFECT_PURGE: EffectSpec(EFFECT_PURGE, _purge_resolve),
    EFFECT_ALARM: EffectSpec(EFFECT_ALARM, _alarm_resolve),
    'banish': EffectSpec('banish', _banish_resolve, _recall_plan, _banish_accept, _ghost_precheck),
    'panic': EffectSpec('panic', _panic_resolve, _recall_plan, _cleanse_accept, _panic_precheck,
                        needs_card=False),
}


def spec_for(pending: PendingAction) -> EffectSpec:
    from .abilities import ABILITIES

    name = pending.payload.get('effect')
    spec = ABILITIES.get(name) if pending.kind == PendingKind.CLASS_ABILITY else EFFECTS.get(name)
    if spec is None:
        raise GameError(errors.INTERNAL_ERROR, f"No resolver for {name!r}")
    return spec


def next_input(state: GameState, pending: PendingAction) -> Optional[InputKind]:
    spec = spec_for(pending)
    return spec.plan(state, pending) if spec.plan is not None else None


def continue_effect(state: GameState, pending: PendingAction):
    """Ask for the next input, or resolve once nothing more is needed."""
    spec = spec_for(pending)
    wanted = next_input(state, pending)
    if wanted is not None:
        pending.awaiting = wanted
        pending.options = spec.options(state, pending) if wanted == InputKind.OPTION and spec.options else []
        state.pending = pending
        return

    logger.debug("resolving %s for player %s", spec.name, pending.actor_id)
    state.pending = pending
    spec.resolve(state, pending)
    if state.is_game_over or state.pending is not pending or pending.interrupt is not None:
        return
    if spec.free_action:
        state.pending = None
    else:
        finish_action(state)


def accept_input(state: GameState, pending: PendingAction, kind: InputKind, value: Any):
    wanted = next_input(state, pending)
    if wanted != kind:
        raise GameError(errors.WRONG_INPUT, f"Expected {wanted.value if wanted else 'nothing'}, got {kind.value}")
    spec_for(pending).accept(state, pending, kind, value)
    continue_effect(state, pending)


def begin(state: GameState, actor: Player, kind: PendingKind, effect: str, card: Optional[Card] = None):
    """Start an effect for the actor, resolving at once when it needs no input."""
    pending = PendingAction(kind, InputKind.TARGET, actor.id, payload={'effect': effect})
    if card is not None:
        pending.card_uid = card.uid
        pending.card_index = actor.hand.index(card)
        pending.payload['rank'] = card.rank
    spec = spec_for(pending)
    if spec.precheck is not None:
        spec.precheck(state, actor, card)
    if kind == PendingKind.PANIC and len(actor.ghosts) == 1:
        pending.payload['ghosts'] = [[actor.id, actor.ghosts[0].uid]]
    continue_effect(state, pending)
