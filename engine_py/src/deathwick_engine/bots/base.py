"""
Base bot interface and utilities.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple

from ..constants import InputKind, PendingKind, TurnPhase
from ..models import GameState, Player


class BotAction:
    """Represents a bot decision: an action verb or an answer to a pending input."""

    def __init__(self, action_type: str, **kwargs):
        self.type = action_type
        self.data = kwargs

    def __repr__(self) -> str:
        return f"BotAction({self.type!r}, {self.data!r})"

    @classmethod
    def choose_class(cls, class_name: str, bound_suits: Optional[List[str]] = None) -> 'BotAction':
        return cls('choose_class', class_name=class_name, bound_suits=bound_suits)

    @classmethod
    def haunt(cls, card_index: int) -> 'BotAction':
        return cls('haunt', card_index=card_index)

    @classmethod
    def cast(cls, card_index: int) -> 'BotAction':
        return cls('cast', card_index=card_index)

    @classmethod
    def banish(cls, card_index: int) -> 'BotAction':
        return cls('banish', card_index=card_index)

    @classmethod
    def ability(cls, card_index: Optional[int] = None) -> 'BotAction':
        return cls('ability', card_index=card_index)

    @classmethod
    def seance(cls, first: int, second: int) -> 'BotAction':
        return cls('seance', first=first, second=second)

    @classmethod
    def flicker(cls) -> 'BotAction':
        return cls('flicker')

    @classmethod
    def panic(cls) -> 'BotAction':
        return cls('panic')

    @classmethod
    def pass_turn(cls) -> 'BotAction':
        return cls('pass')

    @classmethod
    def answer(cls, kind: InputKind, value: Any) -> 'BotAction':
        """Answer whatever input the pending action is waiting for."""
        return cls('input', kind=kind, value=value)


def candidate_inputs(state: GameState, player: Player) -> List[Tuple[InputKind, Any]]:
    """Every syntactically possible answer to the pending input, for this player."""
    from ..effects import spec_for
    from ..seating import neighbor_list, valid_targets

    pending = state.pending
    if pending is None or pending.responder_id != player.id:
        return []
    kind = pending.awaited_input

    if kind == InputKind.YES_NO:
        return [(kind, False), (kind, True)]
    if kind == InputKind.TARGET:
        actor = state.players[pending.actor_id]
        if pending.kind == PendingKind.HAUNT:
            targets = neighbor_list(state, actor)
        else:
            targets = valid_targets(state, actor, pending)
        return [(kind, t.id) for t in targets]
    if kind == InputKind.GHOST:
        owners = [player] + [p for p in state.alive_players() if p.id != player.id]
        return [(kind, (o.id, i)) for o in owners for i, c in enumerate(o.shadow) if not c.is_wall]
    if kind == InputKind.CARD:
        if pending.interrupt is not None:
            return [(kind, i) for i in range(len(player.hand))]
        pool = spec_for(pending).pool(state, pending)
        return [(kind, i) for i in range(len(pool))]
    if kind == InputKind.CARDS:
        count = pending.payload['count']
        n = len(player.hand)
        return [(kind, list(range(n - count, n)))]
    if kind == InputKind.OPTION:
        return [(kind, o) for o in pending.options]
    return []


class BaseBot(ABC):
    """Abstract base class for simulated opponents."""

    def __init__(self, player_id: int):
        self.player_id = player_id

    @abstractmethod
    def choose_action(self, state: GameState) -> Optional[BotAction]:
        """
        Choose a decision based on the current game state.

        Args:
            state: Current game state

        Returns:
            BotAction to take, or None if nothing is expected of this bot
        """
        pass

    def me(self, state: GameState) -> Player:
        return state.players[self.player_id]

    def is_my_turn(self, state: GameState) -> bool:
        return (state.phase == TurnPhase.ACTION and state.active_player_id == self.player_id
                and state.pending is None)

    def is_my_decision(self, state: GameState) -> bool:
        return state.pending is not None and state.pending.responder_id == self.player_id

    def needs_class(self, state: GameState) -> bool:
        return state.phase == TurnPhase.CLASS_SELECTION and self.me(state).class_name is None
