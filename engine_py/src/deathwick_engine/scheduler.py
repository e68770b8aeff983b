"""
Turn scheduler: phases, start/end of turn and turn order.
"""

import logging
from typing import List

from .classes import capability, hand_limit
from .constants import InputKind, PendingKind, TurnPhase
from .evaluator import declare_game_over, handle_death, is_possessed
from .models import GameState, PendingAction, Player
from .zones import burn, draw, required_burn, to_discard

logger = logging.getLogger(__name__)


def slots_per_round(player_count: int) -> int:
    """Larger tables let two or three players act per step of the pointer."""
    if player_count < 6:
        return 1
    if player_count <= 8:
        return 2
    return 3


def slot_offset(player_count: int, slot: int) -> int:
    """Seats between the pointer and the given concurrent slot: floor(slot * n / slots)."""
    return (slot * player_count) // slots_per_round(player_count)


def current_turn_order_index(state: GameState) -> int:
    n = len(state.turn_order)
    if n == 0:
        return 0
    return (state.turn_index + slot_offset(n, state.concurrent_slot)) % n


def eligible_player_ids(state: GameState) -> List[int]:
    """The alive players who act at the current step of the turn pointer."""
    n = len(state.turn_order)
    ids = []
    for slot in range(slots_per_round(n)):
        pid = state.turn_order[(state.turn_index + slot_offset(n, slot)) % n]
        if not state.players[pid].eliminated and pid not in ids:
            ids.append(pid)
    return ids


def advance_turn(state: GameState):
    n = len(state.turn_order)
    state.concurrent_slot += 1
    if state.concurrent_slot >= slots_per_round(n):
        state.concurrent_slot = 0
        state.turn_index = (state.turn_index + 1) % n


def begin_play(state: GameState):
    """Every class is chosen; the first turn can start."""
    state.class_offers = {}
    state.phase = TurnPhase.START_OF_TURN
    state.add_log("The candles are lit.")


def _witness_duel(state: GameState) -> bool:
    if len(state.players) == 2 and any(capability(p).cannot_win for p in state.players):
        declare_game_over(state, None, "A witness in a two-player ritual: no one can win.")
        return True
    return False


def start_turn(state: GameState):
    """Pick the next alive player and run their start-of-turn steps."""
    if _witness_duel(state):
        return

    n = len(state.turn_order)
    for _ in range(n * slots_per_round(n)):
        pid = state.turn_order[current_turn_order_index(state)]
        if not state.players[pid].eliminated:
            break
        advance_turn(state)
    else:
        declare_game_over(state, None, "No one is left to take a turn.")
        return

    player = state.players[pid]
    state.active_player_id = player.id
    state.phase = TurnPhase.START_OF_TURN
    state.pending = None
    state.funeral_bell_triggered = False
    state.rejection_set_this_turn = False
    for p in state.players:
        p.discard_cancel_used = False
    player.occultist_bonus_used = False
    player.doomreader_used = False
    player.salted = False
    state.add_log(f"{player.name}'s turn.")
    logger.debug("turn start: player %s (index %s, slot %s)", pid, state.turn_index, state.concurrent_slot)

    if capability(player).peeks_deck_top and len(player.deck) > 1:
        state.pending = PendingAction(PendingKind.ORACLE, InputKind.YES_NO, player.id)
        return
    run_mandatory_steps(state)


def resolve_oracle(state: GameState, to_bottom: bool):
    player = state.active_player
    state.pending = None
    if to_bottom:
        player.deck.append(player.deck.pop(0))
        state.add_log(f"{player.name} foresees and buries the top of their deck.")
    run_mandatory_steps(state)


def run_mandatory_steps(state: GameState):
    """Mandatory burn then draw; running out of deck ends the turn in death."""
    player = state.active_player
    n = required_burn(player)
    if n:
        state.add_log(f"{player.name} burns {n}.")
        if not burn(state, player, n, mandatory=True):
            state.add_log(f"{player.name}'s candle burns out.")
            _die_and_close(state, player)
            return
    if not draw(state, player, 1):
        state.add_log(f"{player.name} has nothing left to draw.")
        _die_and_close(state, player)
        return
    state.phase = TurnPhase.ACTION


def _die_and_close(state: GameState, player: Player):
    handle_death(state, player)
    if state.is_game_over:
        return
    if player.eliminated:
        close_turn(state)
    else:
        state.phase = TurnPhase.ACTION


def finish_action(state: GameState):
    """The one action of the turn is done."""
    state.pending = None
    if not state.is_game_over:
        state.phase = TurnPhase.END


def end_turn(state: GameState):
    """END phase up to the hand-size check, which may suspend."""
    player = state.active_player
    if player is None or player.eliminated:
        close_turn(state)
        return
    if state.alternate_ruleset and not player.deck:
        state.add_log(f"{player.name}'s candle is spent.")
        handle_death(state, player)
        if state.is_game_over:
            return
        if player.eliminated:
            close_turn(state)
            return

    excess = len(player.hand) - hand_limit(state, player)
    if excess > 0:
        if player.is_simulated:
            dropped = player.hand[-excess:]
            del player.hand[-excess:]
            to_discard(state, *dropped)
            state.add_log(f"{player.name} discards {excess} down to the hand limit.")
        else:
            state.pending = PendingAction(PendingKind.DISCARD_DOWN, InputKind.CARDS, player.id,
                                          payload={'count': excess})
            return
    close_turn(state)


def complete_discard_down(state: GameState, indices: List[int]):
    from .errors import INVALID_SELECTION, GameError

    player = state.active_player
    count = state.pending.payload['count']
    if len(indices) != count or len(set(indices)) != count:
        raise GameError(INVALID_SELECTION, f"Choose exactly {count} different card(s)")
    if any(not isinstance(i, int) or not 0 <= i < len(player.hand) for i in indices):
        raise GameError(INVALID_SELECTION, "No card at that position")
    for i in sorted(indices, reverse=True):
        to_discard(state, player.hand.pop(i))
    state.pending = None
    state.add_log(f"{player.name} discards {count} down to the hand limit.")
    close_turn(state)


def close_turn(state: GameState):
    """End-of-turn death checks, then hand the turn on."""
    player = state.active_player
    if player is not None and not player.eliminated:
        if not player.deck and not state.alternate_ruleset:
            state.add_log(f"{player.name}'s candle is spent.")
            handle_death(state, player)
        elif is_possessed(player):
            state.add_log(f"{player.name} is possessed!")
            handle_death(state, player)
    if state.is_game_over:
        return
    state.pending = None
    advance_turn(state)
    state.phase = TurnPhase.START_OF_TURN
