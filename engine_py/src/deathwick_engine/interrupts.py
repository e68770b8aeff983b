"""
Interrupt broker: the reactive decisions a haunt or an alarm must pass.

A haunt walks a fixed list of stages. A stage whose reactive condition holds
parks a PendingInterrupt on the pending action and returns; the answer either
aborts the haunt (the attacker's card goes to the discard and nothing else
moves) or resumes it at the next stage.
"""

import logging
from typing import Optional

from . import errors
from .classes import HookContext, capability
from .constants import (
    HAUNT_STAGES, SHIELD_RANK, WARLOCK_GHOST_VALUE, InputKind, InterruptKind,
    PendingKind,
)
from .effects import actor_of, played_card, spend_played_card, target_of
from .errors import GameError
from .evaluator import handle_death
from .models import GameState, PendingAction, PendingInterrupt, Player
from .scheduler import finish_action
from .seating import neighbor_list, other_neighbor, others_in_turn_order
from .zones import attach_ghost, find_in_hand, remove_ghost, to_discard

logger = logging.getLogger(__name__)


def shield_index(player: Player, exclude_uid: Optional[int] = None) -> Optional[int]:
    for i, c in enumerate(player.hand):
        if c.rank == SHIELD_RANK and c.uid != exclude_uid:
            return i
    return None


def has_shield(player: Player, exclude_uid: Optional[int] = None) -> bool:
    return player.salted or shield_index(player, exclude_uid) is not None


def spend_shield(state: GameState, player: Player):
    idx = shield_index(player)
    if idx is not None:
        to_discard(state, player.hand.pop(idx))
    else:
        player.salted = False


def _offer(state: GameState, pending: PendingAction, kind: InterruptKind, responder: Player) -> bool:
    """Park an interrupt unless this responder was already offered it for this attempt."""
    key = f"{kind.value}:{responder.id}"
    offered = pending.payload.setdefault('offered', [])
    if key in offered:
        return False
    offered.append(key)
    pending.interrupt = PendingInterrupt(kind, responder.id)
    logger.debug("interrupt %s offered to player %s", kind.value, responder.id)
    return True


# ---------------------------------------------------------------------------
# haunt
# ---------------------------------------------------------------------------

def begin_haunt(state: GameState, actor: Player, card_index: int):
    card = actor.hand[card_index]
    state.pending = PendingAction(PendingKind.HAUNT, InputKind.TARGET, actor.id,
                                  card_index=card_index, card_uid=card.uid)


def accept_haunt_target(state: GameState, pending: PendingAction, target_id):
    actor = actor_of(state, pending)
    target = state.get_player(target_id) if isinstance(target_id, int) else None
    if target is None or all(t.id != target.id for t in neighbor_list(state, actor)):
        raise GameError(errors.INVALID_TARGET, "You can only haunt a neighbour")
    pending.target_id = target.id
    pending.stage = HAUNT_STAGES[0]
    pending.payload['committed'] = True
    run_haunt(state, pending)


def _hex_stage(state, pending, actor, target, card) -> bool:
    if not capability(target).hex_cancel:
        return False
    if not any(c.rank == card.rank for c in target.hand):
        return False
    return _offer(state, pending, InterruptKind.HEX_CANCEL, target)


def _redirect_stage(state, pending, actor, target, card) -> bool:
    if not capability(target).redirect or not target.hand:
        return False
    onward = other_neighbor(state, target, actor)
    if onward is None or onward.id in (actor.id, target.id):
        return False
    if not _offer(state, pending, InterruptKind.REDIRECT, target):
        return False
    pending.payload['redirect_to'] = onward.id
    return True


def _discard_cancel_stage(state, pending, actor, target, card) -> bool:
    if not capability(target).discard_cancel or target.discard_cancel_used or not target.hand:
        return False
    return _offer(state, pending, InterruptKind.DISCARD_CANCEL, target)


def _duel_stage(state, pending, actor, target, card) -> bool:
    if capability(actor).silences_reactions or not has_shield(target):
        return False
    return _offer(state, pending, InterruptKind.CANCEL_DUEL, target)


def _wall_stage(state, pending, actor, target, card) -> bool:
    if not capability(target).wall_block or not target.walls:
        return False
    return _offer(state, pending, InterruptKind.WALL_BLOCK, target)


STAGE_CHECKS = {
    'hex': _hex_stage,
    'redirect': _redirect_stage,
    'discard_cancel': _discard_cancel_stage,
    'duel': _duel_stage,
    'wall_block': _wall_stage,
}


def _next_stage(pending: PendingAction):
    pending.stage = HAUNT_STAGES[HAUNT_STAGES.index(pending.stage) + 1]


def run_haunt(state: GameState, pending: PendingAction):
    """Walk the remaining stages until one suspends or the ghost lands."""
    actor = actor_of(state, pending)
    card = played_card(state, pending)
    while pending.stage != 'attach':
        target = target_of(state, pending)
        if STAGE_CHECKS[pending.stage](state, pending, actor, target, card):
            return
        _next_stage(pending)
    _attach(state, pending, actor)


def _attach(state: GameState, pending: PendingAction, actor: Player):
    target = target_of(state, pending)
    card = actor.hand.pop(find_in_hand(actor, pending.card_uid))
    if not card.is_number:
        card.value_override = WARLOCK_GHOST_VALUE
    state.add_log(f"{actor.name} haunts {target.name} with {card.label}.")
    attach_ghost(state, target, card, actor)
    if state.is_game_over:
        return
    ctx = HookContext(actor, card, target, action='haunt')
    reactive = capability(target).target_reactive
    if reactive is not None:
        reactive(state, ctx)
        if state.is_game_over:
            return
    post = capability(actor).actor_post
    if post is not None:
        post(state, ctx)
    if not state.is_game_over:
        finish_action(state)


def _abort(state: GameState, pending: PendingAction, reason: str):
    """The haunt is cancelled: only the attacker's card is spent."""
    spend_played_card(state, pending)
    pending.interrupt = None
    state.add_log(reason)
    finish_action(state)


def _resume(state: GameState, pending: PendingAction):
    pending.interrupt = None
    _next_stage(pending)
    run_haunt(state, pending)


def answer_yes_no(state: GameState, pending: PendingAction, answer: bool):
    it = pending.interrupt
    if it.kind == InterruptKind.ALARM_SHIELD:
        _answer_alarm(state, pending, answer)
        return

    actor = actor_of(state, pending)
    target = target_of(state, pending)

    if it.kind == InterruptKind.HEX_CANCEL:
        if not answer:
            _resume(state, pending)
            return
        card = played_card(state, pending)
        idx = next(i for i, c in enumerate(target.hand) if c.rank == card.rank)
        to_discard(state, target.hand.pop(idx))
        _abort(state, pending, f"{target.name} hexes the haunt away.")

    elif it.kind in (InterruptKind.REDIRECT, InterruptKind.DISCARD_CANCEL):
        if not answer:
            _resume(state, pending)
            return
        # the reaction is paid with a card of the responder's choosing
        it.awaiting = InputKind.CARD

    elif it.kind == InterruptKind.CANCEL_DUEL:
        _answer_duel(state, pending, actor, target, answer)

    elif it.kind == InterruptKind.WALL_BLOCK:
        if not answer:
            _resume(state, pending)
            return
        wall = target.walls[0]
        to_discard(state, remove_ghost(target, wall))
        _abort(state, pending, f"{target.name} trades a wall to stop the haunt.")


def _answer_duel(state: GameState, pending: PendingAction, actor: Player, target: Player, answer: bool):
    it = pending.interrupt
    if it.side == 'defender':
        if not answer:
            _resume(state, pending)
            return
        spend_shield(state, target)
        state.add_log(f"{target.name} throws salt at the haunt.")
        if shield_index(actor, exclude_uid=pending.card_uid) is not None:
            it.side = 'attacker'
            it.responder_id = actor.id
            return
        _abort(state, pending, f"{actor.name}'s haunt is salted away.")
    else:
        if not answer:
            _abort(state, pending, f"{actor.name}'s haunt is salted away.")
            return
        to_discard(state, actor.hand.pop(shield_index(actor, exclude_uid=pending.card_uid)))
        state.add_log(f"{actor.name} counters with salt of their own.")
        if has_shield(target):
            it.side = 'defender'
            it.responder_id = target.id
            return
        _resume(state, pending)


def answer_card(state: GameState, pending: PendingAction, index):
    it = pending.interrupt
    responder = state.players[it.responder_id]
    if not isinstance(index, int) or not 0 <= index < len(responder.hand):
        raise GameError(errors.INVALID_SELECTION, "No card at that position")
    paid = responder.hand.pop(index)
    to_discard(state, paid)

    if it.kind == InterruptKind.REDIRECT:
        onward = state.players[pending.payload.pop('redirect_to')]
        state.add_log(f"{responder.name} mimes the haunt onto {onward.name}.")
        pending.interrupt = None
        pending.target_id = onward.id
        pending.stage = HAUNT_STAGES[0]
        run_haunt(state, pending)
    else:
        responder.discard_cancel_used = True
        _abort(state, pending, f"{responder.name} slips unseen out of the haunt.")


# ---------------------------------------------------------------------------
# alarm
# ---------------------------------------------------------------------------

def start_alarm(state: GameState, pending: PendingAction):
    actor = actor_of(state, pending)
    spend_played_card(state, pending)
    pending.kind = PendingKind.ALARM
    pending.awaiting = InputKind.YES_NO
    pending.payload['queue'] = [p.id for p in others_in_turn_order(state, actor)]
    pending.payload['committed'] = True
    state.pending = pending
    state.add_log(f"{actor.name} summons the joker: BOO!")
    run_alarm(state, pending)


def run_alarm(state: GameState, pending: PendingAction):
    actor = actor_of(state, pending)
    queue = pending.payload['queue']
    while queue and not state.is_game_over:
        target = state.players[queue[0]]
        if target.eliminated:
            queue.pop(0)
            continue
        if not capability(actor).silences_reactions and has_shield(target):
            if _offer(state, pending, InterruptKind.ALARM_SHIELD, target):
                return
        queue.pop(0)
        alarm_hit(state, actor, target)
    if not state.is_game_over:
        finish_action(state)


def alarm_hit(state: GameState, actor: Player, target: Player):
    """Burn from the deck top until a number card turns up; it becomes a ghost."""
    while True:
        if not target.deck:
            state.last_attacker[target.id] = actor.id
            state.add_log(f"{target.name} burns through their whole deck.")
            handle_death(state, target)
            return
        card = target.deck.pop(0)
        if card.is_number:
            state.add_log(f"{target.name} is frightened; {card.label} becomes a ghost.")
            attach_ghost(state, target, card, actor)
            return
        to_discard(state, card)


def _answer_alarm(state: GameState, pending: PendingAction, answer: bool):
    actor = actor_of(state, pending)
    target = state.players[pending.interrupt.responder_id]
    pending.interrupt = None
    pending.payload['queue'].pop(0)
    if answer:
        spend_shield(state, target)
        state.add_log(f"{target.name} salts the alarm away.")
    else:
        alarm_hit(state, actor, target)
    if not state.is_game_over:
        run_alarm(state, pending)
