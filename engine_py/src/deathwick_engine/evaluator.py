"""
Elimination, possession and victory.
"""

import logging
from collections import Counter
from typing import Iterable, Optional, Set

from .classes import capability
from .constants import POSSESSION_THRESHOLD, TurnPhase
from .models import Card, GameState, Player
from .seating import neighbor_list, neighbors
from .zones import burn, to_discard

logger = logging.getLogger(__name__)


def check_possession(shadow: Iterable[Card]) -> bool:
    """Three or more ghosts of one suit possess their owner. Walls and jokers don't count."""
    counts = Counter(c.suit for c in shadow if not c.is_wall and not c.is_joker)
    return any(n >= POSSESSION_THRESHOLD for n in counts.values())


def is_possessed(player: Player) -> bool:
    return check_possession(player.shadow)


def check_instant_possession(state: GameState, player: Player) -> bool:
    """Under the dark ritual a possessed shadow kills immediately."""
    if not state.alternate_ruleset or player.eliminated or state.is_game_over:
        return False
    if not is_possessed(player):
        return False
    state.add_log(f"{player.name} is possessed!")
    handle_death(state, player)
    return True


def declare_game_over(state: GameState, winner: Optional[Player], message: str):
    state.phase = TurnPhase.GAME_OVER
    state.pending = None
    state.winner_id = winner.id if winner is not None else None
    state.game_over_message = message
    state.add_log(message)
    logger.debug("game over: %s", message)


def check_victory(state: GameState) -> bool:
    """Declare the game over when at most one player is left standing."""
    if state.is_game_over:
        return True
    alive = state.alive_players()
    if len(alive) == 1:
        survivor = alive[0]
        if capability(survivor).cannot_win:
            declare_game_over(state, None, f"{survivor.name} stands alone but cannot win. No one wins.")
        else:
            declare_game_over(state, survivor, f"{survivor.name} is the last flame burning and wins!")
        return True
    if not alive:
        declare_game_over(state, None, "Every candle is out. No one wins.")
        return True
    return False


def _revive(state: GameState, player: Player):
    player.used_lich_revive = True
    player.eliminated = False
    for other in state.alive_players():
        if other.id == player.id:
            continue
        for _ in range(min(2, len(other.deck))):
            player.deck.append(other.deck.pop(0))
    to_discard(state, *player.hand)
    player.hand = []
    state.add_log(f"{player.name} refuses to stay dead and steals from every candle!")


def _salvage_shadow(state: GameState, player: Player, recipients, cascade: Set[int]):
    walls = player.walls
    ghosts = player.ghosts
    player.shadow = []
    to_discard(state, *walls)
    if not ghosts:
        return
    if not recipients:
        to_discard(state, *ghosts)
        return
    if len(recipients) == 1:
        recipients[0].shadow.extend(ghosts)
        state.add_log(f"{recipients[0].name} inherits {len(ghosts)} ghost(s) from {player.name}.")
    else:
        half = len(ghosts) // 2
        recipients[0].shadow.extend(ghosts[:half])
        recipients[1].shadow.extend(ghosts[half:2 * half])
        if len(ghosts) % 2:
            alive = state.alive_players()
            fewest = min(alive, key=lambda p: len(p.ghosts))
            fewest.shadow.append(ghosts[-1])
            if all(fewest.id != r.id for r in recipients):
                recipients = list(recipients) + [fewest]
        state.add_log(f"{player.name}'s ghosts scatter to their neighbours.")

    for r in recipients:
        if state.is_game_over:
            return
        if not r.eliminated and is_possessed(r):
            state.add_log(f"{r.name} is possessed by the scattered ghosts!")
            handle_death(state, r, cascade)


def handle_death(state: GameState, player: Player, cascade: Optional[Set[int]] = None) -> bool:
    """
    Eliminate a player and run every death trigger.

    Returns True when the game is over afterwards. `cascade` holds the ids
    already processed in this chain of deaths.
    """
    if cascade is None:
        cascade = set()
    if state.is_game_over:
        return True
    if player.eliminated or player.id in cascade:
        return False
    cascade.add(player.id)

    left, right = neighbors(state, player)
    around = neighbor_list(state, player)
    player.eliminated = True
    state.add_log(f"{player.name}'s flame goes out.")
    logger.debug("player %s eliminated", player.id)

    if capability(player).revives_once and not player.used_lich_revive:
        _revive(state, player)
        cascade.discard(player.id)
        return False

    for n in around:
        if capability(n).scavenges_on_death and state.discard:
            k = min(5, len(state.discard))
            picks = sorted(state.rng.sample(range(len(state.discard)), k), reverse=True)
            taken = [state.discard.pop(i) for i in picks]
            n.deck.extend(taken)
            state.add_log(f"{n.name} picks {k} card(s) from the dark.")

    digger = next((n for n in (left, right) if n is not None and capability(n).inherits_deck), None)
    if digger is not None and player.deck:
        digger.deck.extend(player.deck)
        state.add_log(f"{digger.name} digs up {len(player.deck)} card(s) from {player.name}'s deck.")
        player.deck = []

    if state.alternate_ruleset:
        _salvage_shadow(state, player, [p for p in around if not p.eliminated], cascade)
        if state.is_game_over:
            return True

    alive = state.alive_players()
    witnesses = [p for p in alive if capability(p).cannot_win]
    if len(alive) == 2 and len(witnesses) == 1:
        other = next(p for p in alive if p.id != witnesses[0].id)
        state.add_log(f"{witnesses[0].name} watches; {other.name} cannot bear it.")
        handle_death(state, other, cascade)
        if state.is_game_over:
            return True

    if not state.funeral_bell_triggered:
        bells = [p for p in state.alive_players() if capability(p).tolls_on_death]
        if bells:
            state.funeral_bell_triggered = True
            state.add_log("The funeral bell tolls; everyone burns 1.")
            for p in state.alive_players():
                if any(b.id == p.id for b in bells):
                    continue
                if not burn(state, p, 1):
                    handle_death(state, p, cascade)
                if state.is_game_over:
                    return True

    return check_victory(state)
