"""
WebSocket event models and validation.
"""

import time
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..constants import InputKind


class EventType(str, Enum):
    """Inbound event types."""
    JOIN = "join"
    ADD_BOT = "add_bot"
    SET_RULESET = "set_ruleset"
    START = "start"
    CHOOSE_CLASS = "choose_class"
    ACTION = "action"
    INPUT = "input"
    CANCEL = "cancel"
    REQUEST_STATE = "request_state"


class OutboundEventType(str, Enum):
    """Outbound event types."""
    JOIN_SUCCESS = "join_success"
    STATE_FULL = "state_full"
    ERROR = "error"


class ActionVerb(str, Enum):
    HAUNT = "haunt"
    CAST = "cast"
    BANISH = "banish"
    ABILITY = "ability"
    SEANCE = "seance"
    FLICKER = "flicker"
    PANIC = "panic"
    PASS = "pass"


class ErrorCode(str, Enum):
    """Transport-level error codes; rule rejections carry the engine's own codes."""
    INVALID_EVENT = "INVALID_EVENT"
    NOT_IN_ROOM = "NOT_IN_ROOM"
    INTERNAL = "INTERNAL"


# Inbound event models
class BaseEvent(BaseModel):
    """Base event model."""
    type: EventType


class JoinEvent(BaseEvent):
    """Join room event."""
    type: EventType = EventType.JOIN
    room_id: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=30)


class AddBotEvent(BaseEvent):
    """Seat a simulated player at the sender's table."""
    type: EventType = EventType.ADD_BOT
    name: str = Field(..., min_length=1, max_length=30)


class SetRulesetEvent(BaseEvent):
    type: EventType = EventType.SET_RULESET
    alternate: bool


class StartEvent(BaseEvent):
    """Start game event."""
    type: EventType = EventType.START
    seed: Optional[int] = None
    first_player_id: Optional[int] = None


class ChooseClassEvent(BaseEvent):
    type: EventType = EventType.CHOOSE_CLASS
    class_name: str = Field(..., min_length=1, max_length=50)
    bound_suits: Optional[List[str]] = Field(default=None, max_length=2)


class ActionEvent(BaseEvent):
    """Take the one action of the turn."""
    type: EventType = EventType.ACTION
    action: ActionVerb
    card_index: Optional[int] = None
    second_index: Optional[int] = None


class InputEvent(BaseEvent):
    """Answer the input a pending action is waiting for."""
    type: EventType = EventType.INPUT
    kind: InputKind
    value: Any = None


class CancelEvent(BaseEvent):
    type: EventType = EventType.CANCEL


class RequestStateEvent(BaseEvent):
    """Request full state event."""
    type: EventType = EventType.REQUEST_STATE


# Union type for all inbound events
InboundEvent = Union[
    JoinEvent,
    AddBotEvent,
    SetRulesetEvent,
    StartEvent,
    ChooseClassEvent,
    ActionEvent,
    InputEvent,
    CancelEvent,
    RequestStateEvent,
]


# Outbound event models
class JoinSuccessEvent(BaseModel):
    """Join success confirmation event."""
    type: OutboundEventType = OutboundEventType.JOIN_SUCCESS
    player_id: int
    timestamp: float


class StateFullEvent(BaseModel):
    """Full state event."""
    type: OutboundEventType = OutboundEventType.STATE_FULL
    state: Dict[str, Any]
    timestamp: float


class ErrorEvent(BaseModel):
    """Error event."""
    type: OutboundEventType = OutboundEventType.ERROR
    code: str
    message: str
    timestamp: float


EVENT_MAP = {
    EventType.JOIN: JoinEvent,
    EventType.ADD_BOT: AddBotEvent,
    EventType.SET_RULESET: SetRulesetEvent,
    EventType.START: StartEvent,
    EventType.CHOOSE_CLASS: ChooseClassEvent,
    EventType.ACTION: ActionEvent,
    EventType.INPUT: InputEvent,
    EventType.CANCEL: CancelEvent,
    EventType.REQUEST_STATE: RequestStateEvent,
}


def parse_inbound_event(data: Dict[str, Any]) -> InboundEvent:
    """
    Parse raw event data into appropriate event model.

    Raises:
        ValueError: If event type is invalid or data is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Event must be a JSON object")
    event_type = data.get("type")

    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    try:
        return EVENT_MAP[event_type](**data)
    except Exception as e:
        raise ValueError(f"Invalid event data: {str(e)}")


def create_error_event(code: str, message: str) -> ErrorEvent:
    """Create an error event."""
    return ErrorEvent(
        code=code.value if isinstance(code, ErrorCode) else code,
        message=message,
        timestamp=time.time()
    )


def create_join_success_event(player_id: int) -> JoinSuccessEvent:
    """Create a join success event."""
    return JoinSuccessEvent(
        player_id=player_id,
        timestamp=time.time()
    )


def create_state_full_event(state: Dict[str, Any]) -> StateFullEvent:
    """Create a full state event."""
    return StateFullEvent(
        state=state,
        timestamp=time.time()
    )
