"""
Legality checks for player actions and resume inputs.
"""

from typing import Optional

from . import errors
from .classes import capability
from .constants import RANK_EFFECTS, InputKind, TurnPhase
from .errors import GameError
from .models import Card, GameState, Player
from .seating import neighbor_list


class ValidationResult:
    """Result of an action validation."""

    def __init__(
        self,
        valid: bool,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        effect: Optional[str] = None
    ):
        self.valid = valid
        self.error_code = error_code
        self.error_message = error_message
        self.effect = effect

    @classmethod
    def success(cls, effect: Optional[str] = None) -> 'ValidationResult':
        """Create a successful validation result."""
        return cls(valid=True, effect=effect)

    @classmethod
    def error(cls, error_code: str, error_message: str) -> 'ValidationResult':
        """Create an error validation result."""
        return cls(valid=False, error_code=error_code, error_message=error_message)

    def raise_if_invalid(self):
        if not self.valid:
            raise GameError(self.error_code, self.error_message)


def validate_turn(state: GameState, player_id: int) -> ValidationResult:
    """The player may start an action right now."""
    if state.is_game_over:
        return ValidationResult.error(errors.GAME_OVER, "The game is over")
    player = state.get_player(player_id)
    if player is None:
        return ValidationResult.error(errors.PLAYER_NOT_FOUND, f"No player {player_id}")
    if state.phase != TurnPhase.ACTION:
        return ValidationResult.error(errors.WRONG_PHASE, f"Actions are not allowed during {state.phase.value}")
    if state.active_player_id != player_id:
        return ValidationResult.error(errors.NOT_YOUR_TURN, "It is not your turn")
    if state.pending is not None:
        return ValidationResult.error(errors.ACTION_PENDING, "Finish the action in progress first")
    return ValidationResult.success()


def card_at(player: Player, index) -> Optional[Card]:
    if isinstance(index, int) and 0 <= index < len(player.hand):
        return player.hand[index]
    return None


def validate_haunt(state: GameState, player_id: int, card_index: int) -> ValidationResult:
    result = validate_turn(state, player_id)
    if not result.valid:
        return result
    player = state.players[player_id]
    card = card_at(player, card_index)
    if card is None:
        return ValidationResult.error(errors.INVALID_SELECTION, "No card at that position")
    if not card.is_number and not capability(player).haunts_with_faces:
        return ValidationResult.error(errors.INVALID_SELECTION, "Face cards and jokers must be summoned")
    if not neighbor_list(state, player):
        return ValidationResult.error(errors.INVALID_TARGET, "There is no one to haunt")
    return ValidationResult.success()


def _precheck(spec, state, player, card) -> ValidationResult:
    if spec.precheck is None:
        return ValidationResult.success(spec.name)
    try:
        spec.precheck(state, player, card)
    except GameError as e:
        return ValidationResult.error(e.code, e.message)
    return ValidationResult.success(spec.name)


def validate_cast(state: GameState, player_id: int, card_index: int) -> ValidationResult:
    from .effects import EFFECTS

    result = validate_turn(state, player_id)
    if not result.valid:
        return result
    player = state.players[player_id]
    card = card_at(player, card_index)
    if card is None:
        return ValidationResult.error(errors.INVALID_SELECTION, "No card at that position")
    return _precheck(EFFECTS[RANK_EFFECTS[card.rank]], state, player, card)


def validate_banish(state: GameState, player_id: int, card_index: int) -> ValidationResult:
    from .effects import EFFECTS

    result = validate_turn(state, player_id)
    if not result.valid:
        return result
    player = state.players[player_id]
    card = card_at(player, card_index)
    if card is None:
        return ValidationResult.error(errors.INVALID_SELECTION, "No card at that position")
    return _precheck(EFFECTS['banish'], state, player, card)


def validate_panic(state: GameState, player_id: int) -> ValidationResult:
    from .effects import EFFECTS

    result = validate_turn(state, player_id)
    if not result.valid:
        return result
    return _precheck(EFFECTS['panic'], state, state.players[player_id], None)


def validate_ability(state: GameState, player_id: int, card_index: Optional[int]) -> ValidationResult:
    from .abilities import ABILITIES

    result = validate_turn(state, player_id)
    if not result.valid:
        return result
    player = state.players[player_id]
    key = capability(player).ability
    if key is None:
        return ValidationResult.error(errors.NO_ABILITY, f"{player.class_name or 'You'} has no active ability")
    spec = ABILITIES[key]
    card = None
    if spec.needs_card:
        card = card_at(player, card_index)
        if card is None:
            return ValidationResult.error(errors.INVALID_SELECTION, "That ability needs a card from your hand")
    return _precheck(spec, state, player, card)


def validate_seance(state: GameState, player_id: int, first: int, second: int) -> ValidationResult:
    result = validate_turn(state, player_id)
    if not result.valid:
        return result
    player = state.players[player_id]
    a, b = card_at(player, first), card_at(player, second)
    if a is None or b is None or first == second:
        return ValidationResult.error(errors.INVALID_SELECTION, "Choose two different cards")
    if a.rank != b.rank:
        return ValidationResult.error(errors.INVALID_SELECTION, "A séance needs a pair of the same rank")
    return ValidationResult.success()


def validate_input(state: GameState, player_id: int, kind: InputKind) -> ValidationResult:
    """The pending action is waiting for this kind of input from this player."""
    if state.is_game_over:
        return ValidationResult.error(errors.GAME_OVER, "The game is over")
    pending = state.pending
    if pending is None:
        return ValidationResult.error(errors.NO_PENDING_INPUT, "Nothing is waiting for input")
    if pending.responder_id != player_id:
        return ValidationResult.error(errors.NOT_YOUR_TURN, "The decision belongs to another player")
    if pending.awaited_input != kind:
        return ValidationResult.error(errors.WRONG_INPUT,
                                      f"Waiting for {pending.awaited_input.value}, not {kind.value}")
    return ValidationResult.success()
