"""
FastAPI WebSocket server hosting authoritative Deathwick tables.

The server owns every GameState. Clients send discrete intents; after each
accepted intent every connection at the table receives a full state
sanitized for its own seat.
"""

import logging
import os
from collections import defaultdict
from typing import Dict, Optional, Set

import orjson
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from .. import engine
from ..constants import ControllerKind, TurnPhase
from ..models import EngineResult, GameState
from ..rules import create_rules
from ..serialization import get_public_game_info, sanitize_state
from .events import (
    ActionEvent, ActionVerb, AddBotEvent, CancelEvent, ChooseClassEvent, ErrorCode,
    InputEvent, JoinEvent, RequestStateEvent, SetRulesetEvent, StartEvent,
    create_error_event, create_join_success_event, create_state_full_event,
    parse_inbound_event,
)

# Configure logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(title="Deathwick Engine", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global state
rooms: Dict[str, GameState] = {}
room_connections: Dict[str, Set[WebSocket]] = defaultdict(set)
connection_players: Dict[WebSocket, Optional[int]] = {}
connection_rooms: Dict[WebSocket, Optional[str]] = {}


class ConnectionManager:
    """Manages WebSocket connections and broadcasting."""

    async def connect(self, websocket: WebSocket, room_id: str, player_id: int):
        room_connections[room_id].add(websocket)
        connection_players[websocket] = player_id
        connection_rooms[websocket] = room_id
        logger.info("Player %s connected to room %s", player_id, room_id)

    def disconnect(self, websocket: WebSocket):
        player_id = connection_players.pop(websocket, None)
        room_id = connection_rooms.pop(websocket, None)

        if room_id and websocket in room_connections.get(room_id, ()):
            room_connections[room_id].remove(websocket)
            if not room_connections[room_id]:
                del room_connections[room_id]

        if player_id is not None:
            logger.info("Player %s disconnected from room %s", player_id, room_id)
        return player_id, room_id

    async def send(self, websocket: WebSocket, event) -> None:
        await websocket.send_text(event.model_dump_json())

    async def broadcast_state(self, room_id: str):
        """Send every connection at the table its own view of the state."""
        state = rooms.get(room_id)
        if state is None:
            return
        for websocket in list(room_connections.get(room_id, ())):
            viewer = connection_players.get(websocket)
            event = create_state_full_event(sanitize_state(state, viewer))
            try:
                await websocket.send_text(orjson.dumps(event.model_dump(mode="json")).decode())
            except Exception as e:
                logger.error("Error broadcasting to %s: %s", viewer, e)
                self.disconnect(websocket)


manager = ConnectionManager()


def rules_from_env():
    """Table rules for new rooms, overridable through DEATHWICK_* variables."""
    overrides = {}
    if os.getenv("DEATHWICK_ALTERNATE"):
        overrides["alternate_ruleset"] = os.getenv("DEATHWICK_ALTERNATE", "").lower() == "true"
    if os.getenv("DEATHWICK_ALLOW_BOTS"):
        overrides["allow_bots"] = os.getenv("DEATHWICK_ALLOW_BOTS", "").lower() == "true"
    if os.getenv("DEATHWICK_HAND_LIMIT"):
        overrides["hand_limit"] = int(os.environ["DEATHWICK_HAND_LIMIT"])
    return create_rules(**overrides)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "rooms": len(rooms),
        "connections": sum(len(conns) for conns in room_connections.values())
    }


@app.get("/rooms")
async def list_rooms():
    return {room_id: get_public_game_info(state) for room_id, state in rooms.items()}


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Main WebSocket endpoint."""
    await websocket.accept()
    logger.info("WebSocket connection accepted")
    try:
        while True:
            raw_data = await websocket.receive_text()
            try:
                event = parse_inbound_event(orjson.loads(raw_data))
                await handle_event(websocket, event)
            except (ValueError, orjson.JSONDecodeError) as e:
                await manager.send(websocket, create_error_event(ErrorCode.INVALID_EVENT, str(e)))
            except Exception:
                logger.exception("Error handling event")
                await manager.send(websocket, create_error_event(ErrorCode.INTERNAL, "Internal server error"))
    except WebSocketDisconnect:
        logger.info("WebSocket disconnected")
    finally:
        manager.disconnect(websocket)


async def handle_event(websocket: WebSocket, event) -> None:
    if isinstance(event, JoinEvent):
        await handle_join(websocket, event)
        return

    player_id = connection_players.get(websocket)
    room_id = connection_rooms.get(websocket)
    if player_id is None or room_id not in rooms:
        await manager.send(websocket, create_error_event(ErrorCode.NOT_IN_ROOM, "Join a room first"))
        return

    if isinstance(event, RequestStateEvent):
        await manager.send(websocket, create_state_full_event(sanitize_state(rooms[room_id], player_id)))
        return

    state = rooms[room_id]
    result = dispatch(state, player_id, event)
    await apply_result(websocket, room_id, result)


def dispatch(state: GameState, player_id: int, event) -> EngineResult:
    """Translate one client intent into an engine operation."""
    if isinstance(event, AddBotEvent):
        return engine.add_player(state, event.name, ControllerKind.SIMULATED)
    if isinstance(event, SetRulesetEvent):
        return engine.set_ruleset(state, event.alternate)
    if isinstance(event, StartEvent):
        return engine.start_game(state, event.first_player_id, event.seed)
    if isinstance(event, ChooseClassEvent):
        return engine.choose_class(state, player_id, event.class_name, event.bound_suits)
    if isinstance(event, InputEvent):
        return engine.provide_input(state, player_id, event.kind, event.value)
    if isinstance(event, CancelEvent):
        return engine.cancel_pending(state, player_id)
    if isinstance(event, ActionEvent):
        return dispatch_action(state, player_id, event)
    raise ValueError(f"Unhandled event type: {type(event)}")


def dispatch_action(state: GameState, player_id: int, event: ActionEvent) -> EngineResult:
    verb = event.action
    if verb in (ActionVerb.HAUNT, ActionVerb.CAST, ActionVerb.BANISH) and event.card_index is None:
        raise ValueError(f"{verb.value} needs card_index")
    if verb == ActionVerb.HAUNT:
        return engine.haunt(state, player_id, event.card_index)
    if verb == ActionVerb.CAST:
        return engine.cast(state, player_id, event.card_index)
    if verb == ActionVerb.BANISH:
        return engine.banish(state, player_id, event.card_index)
    if verb == ActionVerb.ABILITY:
        return engine.use_class_ability(state, player_id, event.card_index)
    if verb == ActionVerb.SEANCE:
        if event.card_index is None or event.second_index is None:
            raise ValueError("seance needs card_index and second_index")
        return engine.seance(state, player_id, event.card_index, event.second_index)
    if verb == ActionVerb.FLICKER:
        return engine.flicker(state, player_id)
    if verb == ActionVerb.PANIC:
        return engine.panic(state, player_id)
    return engine.pass_turn(state, player_id)


async def apply_result(websocket: WebSocket, room_id: str, result: EngineResult):
    if not result.success:
        await manager.send(websocket, create_error_event(result.error_code, result.error_message))
        return
    rooms[room_id] = result.state
    if result.state.phase == TurnPhase.GAME_OVER:
        logger.info("Room %s finished: %s", room_id, result.state.game_over_message)
    await manager.broadcast_state(room_id)


async def handle_join(websocket: WebSocket, event: JoinEvent) -> None:
    """Seat a remote player, creating the room on first join."""
    if connection_players.get(websocket) is not None:
        await manager.send(websocket, create_error_event(ErrorCode.INVALID_EVENT, "Already seated"))
        return

    room_id = event.room_id
    state = rooms.get(room_id) or engine.create_game(rules_from_env())
    result = engine.add_player(state, event.name, ControllerKind.REMOTE)
    if not result.success:
        await manager.send(websocket, create_error_event(result.error_code, result.error_message))
        return

    rooms[room_id] = result.state
    player_id = result.state.players[-1].id
    await manager.connect(websocket, room_id, player_id)
    await manager.send(websocket, create_join_success_event(player_id))
    await manager.broadcast_state(room_id)
