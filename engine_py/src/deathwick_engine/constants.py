"""Card vocabulary, phases and effect names"""

from enum import Enum
from typing import Dict, List, Optional

RANKS = ['A', '2', '3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K']
FACE_RANKS = ['J', 'Q', 'K']
JOKER = 'JOKER'

SPADES = 'S'
HEARTS = 'H'
CLUBS = 'C'
DIAMONDS = 'D'
SUITS = [SPADES, HEARTS, CLUBS, DIAMONDS]
SUIT_SYMBOLS = {SPADES: '♠', HEARTS: '♥', CLUBS: '♣', DIAMONDS: '♦', None: '★'}

# Tie-break order for banishing a ghost of equal value
SUIT_TIER = {DIAMONDS: 1, CLUBS: 2, HEARTS: 3, SPADES: 4, None: 5}

RANK_VALUES: Dict[str, int] = {
    'A': 1, '2': 2, '3': 3, '4': 4, '5': 5, '6': 6, '7': 7, '8': 8, '9': 9,
    '10': 10, 'J': 11, 'Q': 12, 'K': 13, JOKER: 99,
}

SHIELD_RANK = '5'
WARLOCK_GHOST_VALUE = 10
POSSESSION_THRESHOLD = 3
SEANCE_HEAL = 4


class TurnPhase(str, Enum):
    SETUP = 'setup'
    CLASS_SELECTION = 'class_selection'
    START_OF_TURN = 'start_of_turn'
    ACTION = 'action'
    END = 'end'
    GAME_OVER = 'game_over'


class ControllerKind(str, Enum):
    HUMAN = 'human'
    SIMULATED = 'simulated'
    REMOTE = 'remote'


class PendingKind(str, Enum):
    HAUNT = 'haunt'
    BANISH = 'banish'
    CAST = 'cast'
    CLASS_ABILITY = 'class_ability'
    PANIC = 'panic'
    ALARM = 'alarm'
    ORACLE = 'oracle'
    PRIEST_DRAW = 'priest_draw'
    DISCARD_DOWN = 'discard_down'


class InputKind(str, Enum):
    TARGET = 'target'
    GHOST = 'ghost'
    YES_NO = 'yes_no'
    CARD = 'card'
    CARDS = 'cards'
    OPTION = 'option'


class InterruptKind(str, Enum):
    HEX_CANCEL = 'hex_cancel'
    REDIRECT = 'redirect'
    DISCARD_CANCEL = 'discard_cancel'
    CANCEL_DUEL = 'cancel_duel'
    WALL_BLOCK = 'wall_block'
    ALARM_SHIELD = 'alarm_shield'


# Stages a haunt passes through before the ghost is attached
HAUNT_STAGES = ['hex', 'redirect', 'discard_cancel', 'duel', 'wall_block', 'attach']

# Rank -> effect name for summoned cards
EFFECT_EXCHANGE = 'exchange'
EFFECT_GREED = 'greed'
EFFECT_SCARE = 'scare'
EFFECT_DRAIN = 'drain'
EFFECT_SALT = 'salt'
EFFECT_SIGHT = 'sight'
EFFECT_CLEANSE = 'cleanse'
EFFECT_RECALL = 'recall'
EFFECT_POSSESS = 'possess'
EFFECT_REKINDLE = 'rekindle'
EFFECT_MIRROR = 'mirror'
EFFECT_MEDIUM = 'medium'
EFFECT_PURGE = 'purge'
EFFECT_ALARM = 'alarm'

RANK_EFFECTS: Dict[str, str] = {
    'A': EFFECT_EXCHANGE,
    '2': EFFECT_GREED,
    '3': EFFECT_SCARE,
    '4': EFFECT_DRAIN,
    '5': EFFECT_SALT,
    '6': EFFECT_SIGHT,
    '7': EFFECT_CLEANSE,
    '8': EFFECT_RECALL,
    '9': EFFECT_POSSESS,
    '10': EFFECT_REKINDLE,
    'J': EFFECT_MIRROR,
    'Q': EFFECT_MEDIUM,
    'K': EFFECT_PURGE,
    JOKER: EFFECT_ALARM,
}

MEDIUM_EXHUME = 'exhume'
MEDIUM_REKINDLE = 'rekindle'
MEDIUM_OPTIONS = [MEDIUM_EXHUME, MEDIUM_REKINDLE]

# Doomreader suit rotation
SUIT_CYCLE: List[str] = [SPADES, HEARTS, CLUBS, DIAMONDS]


def suit_symbol(suit: Optional[str]) -> str:
    return SUIT_SYMBOLS.get(suit, '?')
