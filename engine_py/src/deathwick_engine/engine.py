"""
Public engine API.

Every operation takes a GameState plus discrete inputs and returns an
EngineResult. Operations work on a deep copy: a rejected operation returns
the original state untouched. After each successful operation the engine
runs the automatic steps of the turn cycle and lets simulated players act
until a human or remote decision is needed.
"""

import copy
import logging
import random
from typing import Any, Callable, List, Optional

from . import errors
from .abilities import ABILITIES
from .classes import CLASS_REGISTRY, capability, class_pool
from .constants import SEANCE_HEAL, SUITS, ControllerKind, InputKind, PendingKind, TurnPhase
from .effects import accept_input, begin, enforce_rejection
from .errors import GameError
from .interrupts import accept_haunt_target, answer_card, answer_yes_no, begin_haunt
from .models import EngineResult, GameState, Player
from .rules import RuleConfig, default_rules
from .scheduler import (
    begin_play, close_turn, complete_discard_down, end_turn, finish_action,
    resolve_oracle, start_turn,
)
from .shuffle import deal
from .validate import (
    validate_ability, validate_banish, validate_cast, validate_haunt,
    validate_input, validate_panic, validate_seance, validate_turn,
)
from .zones import draw, find_in_hand, heal, shuffle_deck, to_discard

logger = logging.getLogger(__name__)

# Upper bound on automatic steps per operation; an all-bot table plays a whole game
MAX_SETTLE_STEPS = 20000

CANCELLABLE = (PendingKind.HAUNT, PendingKind.BANISH, PendingKind.CAST,
               PendingKind.CLASS_ABILITY, PendingKind.PANIC)


def _run(state: GameState, op: Callable, *args, drive: bool = True) -> EngineResult:
    new_state = copy.deepcopy(state)
    try:
        op(new_state, *args)
        if drive:
            settle(new_state)
    except GameError as e:
        logger.debug("rejected %s: [%s] %s", op.__name__, e.code, e.message)
        return EngineResult.failure(state, e.code, e.message)
    new_state.increment_version()
    return EngineResult.ok(new_state)


def _player(state: GameState, player_id) -> Player:
    player = state.get_player(player_id) if isinstance(player_id, int) else None
    if player is None:
        raise GameError(errors.PLAYER_NOT_FOUND, f"No player {player_id}")
    return player


# ---------------------------------------------------------------------------
# setup
# ---------------------------------------------------------------------------

def create_game(rules: RuleConfig = default_rules, seed: Optional[int] = None) -> GameState:
    """Create an empty table in the SETUP phase."""
    return GameState(
        alternate_ruleset=rules.alternate_ruleset,
        hand_limit=rules.hand_limit,
        rule_config=rules,
        seed=seed,
        rng=random.Random(seed),
    )


def _add_player(state: GameState, name: str, kind):
    if state.phase != TurnPhase.SETUP:
        raise GameError(errors.WRONG_PHASE, "Players can only join before the game starts")
    try:
        kind = ControllerKind(kind)
    except ValueError:
        raise GameError(errors.INVALID_SETUP, f"Unknown controller kind {kind!r}")
    rules = state.rule_config
    if len(state.players) >= rules.max_players:
        raise GameError(errors.INVALID_SETUP, "The table is full")
    if kind == ControllerKind.SIMULATED and not rules.allow_bots:
        raise GameError(errors.INVALID_SETUP, "Simulated players are not allowed at this table")
    if not name or not name.strip():
        raise GameError(errors.INVALID_SETUP, "A player needs a name")
    player = Player(id=len(state.players), name=name.strip(), kind=kind)
    state.players.append(player)
    state.add_log(f"{player.name} takes a seat.")


def add_player(state: GameState, name: str, kind=ControllerKind.HUMAN) -> EngineResult:
    return _run(state, _add_player, name, kind, drive=False)


def _set_ruleset(state: GameState, alternate: bool):
    if state.phase not in (TurnPhase.SETUP, TurnPhase.CLASS_SELECTION):
        raise GameError(errors.WRONG_PHASE, "The ruleset is fixed once play begins")
    state.alternate_ruleset = bool(alternate)
    state.add_log("The dark ritual is invoked." if alternate else "The ritual follows the old rules.")


def set_ruleset(state: GameState, alternate: bool) -> EngineResult:
    return _run(state, _set_ruleset, alternate, drive=False)


def _start_game(state: GameState, first_player_id: Optional[int], seed: Optional[int] = None):
    if state.phase != TurnPhase.SETUP:
        raise GameError(errors.WRONG_PHASE, "The game has already started")
    rules = state.rule_config
    n = len(state.players)
    if not rules.validate_player_count(n):
        raise GameError(errors.INVALID_SETUP,
                        f"Need {rules.min_players}-{rules.max_players} players, have {n}")
    if first_player_id is not None and state.get_player(first_player_id) is None:
        raise GameError(errors.PLAYER_NOT_FOUND, f"No player {first_player_id}")

    if seed is not None:
        state.seed = seed
        state.rng = random.Random(seed)
    deal(state, rules)
    pool = class_pool(rules.uses_extended_classes(n))
    for p in state.players:
        state.class_offers[p.id] = state.rng.sample(pool, min(rules.class_offer_count, len(pool)))
    state.turn_index = first_player_id if first_player_id is not None else state.rng.randrange(n)
    state.concurrent_slot = 0
    state.phase = TurnPhase.CLASS_SELECTION
    state.add_log(f"{n} candles are dealt ({state.deal_size} cards).")


def start_game(state: GameState, first_player_id: Optional[int] = None,
               seed: Optional[int] = None) -> EngineResult:
    return _run(state, _start_game, first_player_id, seed)


def _choose_class(state: GameState, player_id: int, class_name: str, bound_suits: Optional[List[str]] = None):
    if state.phase != TurnPhase.CLASS_SELECTION:
        raise GameError(errors.WRONG_PHASE, "Classes are chosen before the first turn")
    player = _player(state, player_id)
    if player.class_name is not None:
        raise GameError(errors.ABILITY_USED, "You already chose a class")
    if class_name not in CLASS_REGISTRY:
        raise GameError(errors.UNKNOWN_CLASS, f"Unknown class {class_name!r}")
    if class_name not in state.class_offers.get(player.id, []):
        raise GameError(errors.INVALID_SELECTION, f"{class_name} was not offered to you")
    if CLASS_REGISTRY[class_name].binds_suits:
        suits = list(bound_suits or [])
        if len(suits) != 2 or len(set(suits)) != 2 or any(s not in SUITS for s in suits):
            raise GameError(errors.INVALID_SELECTION, "Bind exactly two different suits")
        player.bound_suits = suits
    player.class_name = class_name
    state.add_log(f"{player.name} becomes {class_name}.")


def choose_class(state: GameState, player_id: int, class_name: str,
                 bound_suits: Optional[List[str]] = None) -> EngineResult:
    return _run(state, _choose_class, player_id, class_name, bound_suits)


# ---------------------------------------------------------------------------
# actions
# ---------------------------------------------------------------------------

def _haunt(state: GameState, player_id: int, card_index: int):
    validate_haunt(state, player_id, card_index).raise_if_invalid()
    actor = state.players[player_id]
    if enforce_rejection(state, actor, card_index):
        return
    begin_haunt(state, actor, card_index)


def _cast(state: GameState, player_id: int, card_index: int):
    result = validate_cast(state, player_id, card_index)
    result.raise_if_invalid()
    actor = state.players[player_id]
    if enforce_rejection(state, actor, card_index):
        return
    card = actor.hand[card_index]
    state.add_log(f"{actor.name} {'summons' if not card.is_number else 'casts'} {card.label}.")
    begin(state, actor, PendingKind.CAST, result.effect, card)


def _banish(state: GameState, player_id: int, card_index: int):
    validate_banish(state, player_id, card_index).raise_if_invalid()
    actor = state.players[player_id]
    begin(state, actor, PendingKind.BANISH, 'banish', actor.hand[card_index])


def _use_class_ability(state: GameState, player_id: int, card_index: Optional[int]):
    validate_ability(state, player_id, card_index).raise_if_invalid()
    actor = state.players[player_id]
    key = capability(actor).ability
    card = actor.hand[card_index] if ABILITIES[key].needs_card else None
    begin(state, actor, PendingKind.CLASS_ABILITY, key, card)


def _seance(state: GameState, player_id: int, first: int, second: int):
    validate_seance(state, player_id, first, second).raise_if_invalid()
    actor = state.players[player_id]
    pair = [actor.hand[i] for i in (first, second)]
    for i in sorted((first, second), reverse=True):
        actor.hand.pop(i)
    to_discard(state, *pair)
    healed = [state.discard.pop(0) for _ in range(min(SEANCE_HEAL, len(state.discard)))]
    heal(actor, healed)
    state.add_log(f"{actor.name} holds a séance with a pair of {pair[0].rank}s and heals {len(healed)}.")
    finish_action(state)


def _flicker(state: GameState, player_id: int):
    validate_turn(state, player_id).raise_if_invalid()
    actor = state.players[player_id]
    heal(actor, actor.hand)
    actor.hand = []
    shuffle_deck(state, actor)
    drawn = min(3, len(actor.deck))
    draw(state, actor, drawn)
    state.add_log(f"{actor.name} flickers: hand into the candle, draws {drawn}.")
    finish_action(state)


def _panic(state: GameState, player_id: int):
    validate_panic(state, player_id).raise_if_invalid()
    begin(state, state.players[player_id], PendingKind.PANIC, 'panic')


def _pass_turn(state: GameState, player_id: int):
    validate_turn(state, player_id).raise_if_invalid()
    state.add_log(f"{state.players[player_id].name} waits.")
    finish_action(state)


def haunt(state: GameState, player_id: int, card_index: int) -> EngineResult:
    """Attach a number card from hand to a neighbour's shadow (target chosen next)."""
    return _run(state, _haunt, player_id, card_index)


def cast(state: GameState, player_id: int, card_index: int) -> EngineResult:
    """Play a card for its rank effect."""
    return _run(state, _cast, player_id, card_index)


def banish(state: GameState, player_id: int, card_index: int) -> EngineResult:
    """Beat one of your own ghosts with a hand card (ghost chosen next)."""
    return _run(state, _banish, player_id, card_index)


def use_class_ability(state: GameState, player_id: int, card_index: Optional[int] = None) -> EngineResult:
    return _run(state, _use_class_ability, player_id, card_index)


def seance(state: GameState, player_id: int, first: int, second: int) -> EngineResult:
    return _run(state, _seance, player_id, first, second)


def flicker(state: GameState, player_id: int) -> EngineResult:
    return _run(state, _flicker, player_id)


def panic(state: GameState, player_id: int) -> EngineResult:
    return _run(state, _panic, player_id)


def pass_turn(state: GameState, player_id: int) -> EngineResult:
    return _run(state, _pass_turn, player_id)


# ---------------------------------------------------------------------------
# resume inputs
# ---------------------------------------------------------------------------

def _card_still_held(state: GameState) -> bool:
    """A pending action whose played card left the hand fizzles."""
    pending = state.pending
    if pending.card_uid is None or pending.kind not in CANCELLABLE:
        return True
    actor = state.players[pending.actor_id]
    if find_in_hand(actor, pending.card_uid) is not None:
        return True
    state.add_log(f"{actor.name}'s action fizzles: the card is gone.")
    state.pending = None
    return False


def _provide(state: GameState, player_id: int, kind: InputKind, value: Any):
    try:
        kind = InputKind(kind)
    except ValueError:
        raise GameError(errors.WRONG_INPUT, f"Unknown input kind {kind!r}")
    if kind == InputKind.GHOST and isinstance(value, list):
        value = tuple(value)
    validate_input(state, player_id, kind).raise_if_invalid()
    if not _card_still_held(state):
        return
    pending = state.pending

    if pending.interrupt is not None:
        if kind == InputKind.YES_NO:
            answer_yes_no(state, pending, bool(value))
        else:
            answer_card(state, pending, value)
        return

    if pending.kind == PendingKind.HAUNT:
        accept_haunt_target(state, pending, value)
    elif pending.kind == PendingKind.ORACLE:
        resolve_oracle(state, bool(value))
    elif pending.kind == PendingKind.PRIEST_DRAW:
        actor = state.players[pending.actor_id]
        if value and draw(state, actor, 1):
            state.add_log(f"{actor.name} gives thanks and draws 1.")
        finish_action(state)
    elif pending.kind == PendingKind.DISCARD_DOWN:
        complete_discard_down(state, list(value or []))
    else:
        accept_input(state, pending, kind, value)


def provide_input(state: GameState, player_id: int, kind, value: Any) -> EngineResult:
    """Answer the pending input with a kind named at runtime (used by the network host)."""
    return _run(state, _provide, player_id, kind, value)


def provide_target(state: GameState, player_id: int, target_id: int) -> EngineResult:
    return _run(state, _provide, player_id, InputKind.TARGET, target_id)


def provide_ghost(state: GameState, player_id: int, owner_id: int, index: int) -> EngineResult:
    return _run(state, _provide, player_id, InputKind.GHOST, (owner_id, index))


def provide_yes_no(state: GameState, player_id: int, answer: bool) -> EngineResult:
    return _run(state, _provide, player_id, InputKind.YES_NO, answer)


def provide_card(state: GameState, player_id: int, index: int) -> EngineResult:
    return _run(state, _provide, player_id, InputKind.CARD, index)


def provide_cards(state: GameState, player_id: int, indices: List[int]) -> EngineResult:
    return _run(state, _provide, player_id, InputKind.CARDS, indices)


def provide_option(state: GameState, player_id: int, option: str) -> EngineResult:
    return _run(state, _provide, player_id, InputKind.OPTION, option)


def _cancel_pending(state: GameState, player_id: int):
    pending = state.pending
    if pending is None:
        raise GameError(errors.NO_PENDING_INPUT, "Nothing to cancel")
    if pending.actor_id != player_id:
        raise GameError(errors.NOT_YOUR_TURN, "Only the acting player can cancel")
    if (pending.kind not in CANCELLABLE or pending.interrupt is not None
            or pending.payload.get('committed')):
        raise GameError(errors.CANNOT_CANCEL, "This action can no longer be taken back")
    state.pending = None
    state.add_log(f"{state.players[player_id].name} thinks better of it.")


def cancel_pending(state: GameState, player_id: int) -> EngineResult:
    """Back out of a multi-step action before anything has moved."""
    return _run(state, _cancel_pending, player_id)


# ---------------------------------------------------------------------------
# automatic steps and simulated players
# ---------------------------------------------------------------------------

def _dispatch(state: GameState, player_id: int, action):
    t, d = action.type, action.data
    if t == 'choose_class':
        _choose_class(state, player_id, d['class_name'], d.get('bound_suits'))
    elif t == 'haunt':
        _haunt(state, player_id, d['card_index'])
    elif t == 'cast':
        _cast(state, player_id, d['card_index'])
    elif t == 'banish':
        _banish(state, player_id, d['card_index'])
    elif t == 'ability':
        _use_class_ability(state, player_id, d.get('card_index'))
    elif t == 'seance':
        _seance(state, player_id, d['first'], d['second'])
    elif t == 'flicker':
        _flicker(state, player_id)
    elif t == 'panic':
        _panic(state, player_id)
    elif t == 'pass':
        _pass_turn(state, player_id)
    elif t == 'input':
        _provide(state, player_id, d['kind'], d['value'])
    else:
        raise GameError(errors.WRONG_INPUT, f"Unknown action {t!r}")


def apply_bot_action(state: GameState, player_id: int, action) -> EngineResult:
    """Apply a BotAction as if the player had chosen it."""
    return _run(state, _dispatch, player_id, action)


def _commit(state: GameState, trial: GameState):
    state.__dict__.update(trial.__dict__)


def _fallback(state: GameState, player: Player):
    """Keep the game moving when a strategy produced an illegal decision."""
    from .bots.base import BotAction, candidate_inputs

    if state.phase == TurnPhase.CLASS_SELECTION and player.class_name is None:
        name = state.class_offers[player.id][0]
        suits = SUITS[:2] if CLASS_REGISTRY[name].binds_suits else None
        _choose_class(state, player.id, name, suits)
        return
    if state.pending is None:
        _pass_turn(state, player.id)
        return
    for kind, value in candidate_inputs(state, player):
        trial = copy.deepcopy(state)
        try:
            _dispatch(trial, player.id, BotAction.answer(kind, value))
        except GameError:
            continue
        _commit(state, trial)
        return
    try:
        _cancel_pending(state, player.id)
    except GameError:
        state.add_log(f"{player.name} falters and the action is lost.")
        finish_action(state)


def _bot_step(state: GameState, player: Player):
    from .bots.greedy import GreedyBot

    action = GreedyBot(player.id).choose_action(state)
    trial = copy.deepcopy(state)
    try:
        if action is None:
            raise GameError(errors.WRONG_INPUT, "The bot had nothing to say")
        _dispatch(trial, player.id, action)
    except GameError as e:
        logger.debug("bot %s chose %r which was rejected: %s", player.id, action, e.message)
        trial = copy.deepcopy(state)
        _fallback(trial, player)
    _commit(state, trial)


def settle(state: GameState):
    """Run automatic steps until a non-simulated decision is needed or the game ends."""
    for _ in range(MAX_SETTLE_STEPS):
        if state.is_game_over or state.phase == TurnPhase.SETUP:
            return
        pending = state.pending
        if pending is not None:
            responder = state.get_player(pending.responder_id)
            if responder is None or responder.eliminated:
                state.add_log("The action fades with its owner.")
                finish_action(state)
                continue
            if responder.is_simulated:
                _bot_step(state, responder)
                continue
            return

        if state.phase == TurnPhase.CLASS_SELECTION:
            waiting = [p for p in state.players if p.class_name is None]
            if not waiting:
                begin_play(state)
                continue
            bot = next((p for p in waiting if p.is_simulated), None)
            if bot is None:
                return
            _bot_step(state, bot)
        elif state.phase == TurnPhase.START_OF_TURN:
            start_turn(state)
        elif state.phase == TurnPhase.END:
            end_turn(state)
        elif state.phase == TurnPhase.ACTION:
            active = state.active_player
            if active.eliminated:
                close_turn(state)
            elif active.is_simulated:
                _bot_step(state, active)
            else:
                return
    logger.warning("settle stopped after %d steps", MAX_SETTLE_STEPS)


def run_simulated(state: GameState) -> EngineResult:
    """Let simulated players act until someone else must decide."""
    return _run(state, lambda s: None)
