# engine_py/src/deathwick_engine/errors.py

class GameError(Exception):
    """Base exception for rule violations."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Specific error codes
INVALID_SETUP = "INVALID_SETUP"
PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
UNKNOWN_CLASS = "UNKNOWN_CLASS"
WRONG_PHASE = "WRONG_PHASE"
NOT_YOUR_TURN = "NOT_YOUR_TURN"
GAME_OVER = "GAME_OVER"
ACTION_PENDING = "ACTION_PENDING"
NO_PENDING_INPUT = "NO_PENDING_INPUT"
WRONG_INPUT = "WRONG_INPUT"
INVALID_SELECTION = "INVALID_SELECTION"
INVALID_TARGET = "INVALID_TARGET"
CARD_TOO_WEAK = "CARD_TOO_WEAK"
ZONE_EMPTY = "ZONE_EMPTY"
ABILITY_USED = "ABILITY_USED"
NO_ABILITY = "NO_ABILITY"
IMMUNE = "IMMUNE"
CANNOT_CANCEL = "CANNOT_CANCEL"
INTERNAL_ERROR = "INTERNAL_ERROR"
