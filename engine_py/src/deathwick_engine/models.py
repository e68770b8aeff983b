"""Game models and data structures"""

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .rules import RuleConfig
from .constants import (
    FACE_RANKS, JOKER, RANK_VALUES, ControllerKind, InputKind, InterruptKind,
    PendingKind, TurnPhase, suit_symbol,
)


@dataclass
class Card:
    uid: int
    rank: str
    suit: Optional[str] = None
    joker_variant: Optional[int] = None
    is_wall: bool = False
    haunted_by: Optional[int] = None  # attacker id, provenance only
    value_override: Optional[int] = None

    @property
    def value(self) -> int:
        if self.value_override is not None:
            return self.value_override
        return RANK_VALUES[self.rank]

    @property
    def is_face(self) -> bool:
        return self.rank in FACE_RANKS

    @property
    def is_joker(self) -> bool:
        return self.rank == JOKER

    @property
    def is_number(self) -> bool:
        return not self.is_face and not self.is_joker

    @property
    def label(self) -> str:
        if self.is_joker:
            return f"JOKER{self.joker_variant or ''}"
        return f"{self.rank}{suit_symbol(self.suit)}"


@dataclass
class Player:
    id: int
    name: str
    kind: ControllerKind = ControllerKind.HUMAN
    class_name: Optional[str] = None
    hand: List[Card] = field(default_factory=list)
    deck: List[Card] = field(default_factory=list)  # index 0 is the top
    shadow: List[Card] = field(default_factory=list)
    salted: bool = False
    eliminated: bool = False
    bound_suits: List[str] = field(default_factory=list)
    used_mimic: bool = False
    used_lich_revive: bool = False
    discard_cancel_used: bool = False
    occultist_bonus_used: bool = False
    doomreader_used: bool = False

    @property
    def is_simulated(self) -> bool:
        return self.kind == ControllerKind.SIMULATED

    @property
    def ghosts(self) -> List[Card]:
        return [c for c in self.shadow if not c.is_wall]

    @property
    def walls(self) -> List[Card]:
        return [c for c in self.shadow if c.is_wall]


@dataclass
class PendingInterrupt:
    kind: InterruptKind
    responder_id: int
    awaiting: InputKind = InputKind.YES_NO
    side: str = 'defender'  # duel only: defender|attacker


@dataclass
class PendingAction:
    """A multi-step action waiting for one discrete input."""
    kind: PendingKind
    awaiting: InputKind
    actor_id: int
    card_index: Optional[int] = None
    card_uid: Optional[int] = None
    target_id: Optional[int] = None
    stage: Optional[str] = None
    options: List[str] = field(default_factory=list)
    payload: Dict[str, Any] = field(default_factory=dict)
    interrupt: Optional[PendingInterrupt] = None

    @property
    def responder_id(self) -> int:
        if self.interrupt is not None:
            return self.interrupt.responder_id
        return self.payload.get('responder_id', self.actor_id)

    @property
    def awaited_input(self) -> InputKind:
        if self.interrupt is not None:
            return self.interrupt.awaiting
        return self.awaiting


@dataclass
class LogEntry:
    seq: int
    text: str

    def __str__(self) -> str:
        return f"[{self.seq}] {self.text}"


@dataclass
class GameState:
    players: List[Player] = field(default_factory=list)
    discard: List[Card] = field(default_factory=list)  # last element is the top
    turn_order: List[int] = field(default_factory=list)
    turn_index: int = 0
    concurrent_slot: int = 0
    active_player_id: Optional[int] = None
    phase: TurnPhase = TurnPhase.SETUP
    pending: Optional[PendingAction] = None
    alternate_ruleset: bool = False
    hand_limit: int = 5
    last_attacker: Dict[int, int] = field(default_factory=dict)
    class_offers: Dict[int, List[str]] = field(default_factory=dict)
    rejection_rank: Optional[str] = None
    last_rejection_rank: Optional[str] = None
    rejection_set_this_turn: bool = False
    funeral_bell_triggered: bool = False
    deal_size: int = 0
    winner_id: Optional[int] = None
    game_over_message: Optional[str] = None
    log: List[LogEntry] = field(default_factory=list)
    log_seq: int = 0
    version: int = 0
    seed: Optional[int] = None
    rule_config: RuleConfig = field(default_factory=RuleConfig)
    rng: random.Random = field(default_factory=random.Random, repr=False)

    @property
    def is_game_over(self) -> bool:
        return self.phase == TurnPhase.GAME_OVER

    def get_player(self, player_id: Optional[int]) -> Optional[Player]:
        if player_id is None or not 0 <= player_id < len(self.players):
            return None
        return self.players[player_id]

    @property
    def active_player(self) -> Optional[Player]:
        return self.get_player(self.active_player_id)

    def alive_players(self) -> List[Player]:
        return [p for p in self.players if not p.eliminated]

    def add_log(self, text: str) -> LogEntry:
        self.log_seq += 1
        entry = LogEntry(seq=self.log_seq, text=text)
        self.log.append(entry)
        return entry

    def increment_version(self):
        self.version += 1

    def card_count(self) -> int:
        """Cards currently in play across every zone."""
        total = len(self.discard)
        for p in self.players:
            total += len(p.hand) + len(p.deck) + len(p.shadow)
        return total


@dataclass
class EngineResult:
    success: bool
    state: GameState
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, state: GameState) -> 'EngineResult':
        return cls(success=True, state=state)

    @classmethod
    def failure(cls, state: GameState, code: str, message: str) -> 'EngineResult':
        return cls(success=False, state=state, error_code=code, error_message=message)
