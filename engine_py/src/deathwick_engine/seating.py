"""
Seating topology over the alive players.
"""

from typing import List, NamedTuple, Optional

from .classes import capability
from .constants import PendingKind
from .models import GameState, PendingAction, Player


class Neighbors(NamedTuple):
    left: Optional[Player]
    right: Optional[Player]


def neighbors(state: GameState, player: Optional[Player]) -> Neighbors:
    """
    Left and right neighbours in roster order, skipping eliminated players.

    An eliminated or unknown player has none; so does the last one alive.
    With two alive, left and right are the same player.
    """
    if player is None or player.eliminated:
        return Neighbors(None, None)
    alive = state.alive_players()
    if len(alive) < 2:
        return Neighbors(None, None)
    i = next(k for k, p in enumerate(alive) if p.id == player.id)
    return Neighbors(alive[(i - 1) % len(alive)], alive[(i + 1) % len(alive)])


def neighbor_list(state: GameState, player: Optional[Player]) -> List[Player]:
    left, right = neighbors(state, player)
    result = []
    for p in (left, right):
        if p is not None and all(p.id != q.id for q in result):
            result.append(p)
    return result


def is_neighbor(state: GameState, player: Player, other: Player) -> bool:
    return any(p.id == other.id for p in neighbor_list(state, player))


def other_neighbor(state: GameState, player: Player, than: Player) -> Optional[Player]:
    """The neighbour of `player` on the side away from `than`."""
    left, right = neighbors(state, player)
    if left is None or left.id == right.id:
        return None
    if left.id == than.id:
        return right
    if right.id == than.id:
        return left
    return None


def valid_targets(state: GameState, actor: Player, pending: Optional[PendingAction] = None) -> List[Player]:
    """
    Players the actor may target. Neighbours by default; an occultist
    casting a possess may reach any other alive player.
    """
    if pending is not None and pending.kind == PendingKind.CAST and capability(actor).possess_any_player:
        card = pending.payload.get('rank')
        if card == '9':
            return [p for p in state.alive_players() if p.id != actor.id]
    return neighbor_list(state, actor)


def others_in_turn_order(state: GameState, actor: Player) -> List[Player]:
    """Every other alive player, in turn order starting after the actor."""
    order = state.turn_order or list(range(len(state.players)))
    if actor.id in order:
        start = order.index(actor.id)
        order = order[start + 1:] + order[:start]
    result = []
    for pid in order:
        p = state.players[pid]
        if p.id != actor.id and not p.eliminated:
            result.append(p)
    return result
