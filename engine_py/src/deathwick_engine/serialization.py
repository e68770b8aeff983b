"""
State serialization and sanitization utilities.

`snapshot` and `restore` round-trip a whole GameState, including a suspended
pending action and the random generator, through plain JSON-safe dicts.
`sanitize_state` builds what one viewer is allowed to see.
"""

import random
from dataclasses import asdict, fields
from typing import Any, Dict, Optional

from .constants import ControllerKind, InputKind, InterruptKind, PendingKind, TurnPhase
from .models import Card, GameState, LogEntry, PendingAction, PendingInterrupt, Player
from .rules import RuleConfig

SNAPSHOT_FORMAT = 1


def _card(card: Card) -> Dict[str, Any]:
    return asdict(card)


def _player(player: Player) -> Dict[str, Any]:
    data = {f.name: getattr(player, f.name) for f in fields(Player)
            if f.name not in ('hand', 'deck', 'shadow', 'kind')}
    data['kind'] = player.kind.value
    data['bound_suits'] = list(player.bound_suits)
    data['hand'] = [_card(c) for c in player.hand]
    data['deck'] = [_card(c) for c in player.deck]
    data['shadow'] = [_card(c) for c in player.shadow]
    return data


def _pending(pending: Optional[PendingAction]) -> Optional[Dict[str, Any]]:
    if pending is None:
        return None
    interrupt = None
    if pending.interrupt is not None:
        interrupt = {
            "kind": pending.interrupt.kind.value,
            "responder_id": pending.interrupt.responder_id,
            "awaiting": pending.interrupt.awaiting.value,
            "side": pending.interrupt.side,
        }
    return {
        "kind": pending.kind.value,
        "awaiting": pending.awaiting.value,
        "actor_id": pending.actor_id,
        "card_index": pending.card_index,
        "card_uid": pending.card_uid,
        "target_id": pending.target_id,
        "stage": pending.stage,
        "options": list(pending.options),
        "payload": _json_safe(pending.payload),
        "interrupt": interrupt,
    }


def _json_safe(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_json_safe(v) for v in value]
    return value


def snapshot(state: GameState) -> Dict[str, Any]:
    """Capture the complete game state as a JSON-safe dict."""
    version, internal, gauss = state.rng.getstate()
    return {
        "format": SNAPSHOT_FORMAT,
        "players": [_player(p) for p in state.players],
        "discard": [_card(c) for c in state.discard],
        "turn_order": list(state.turn_order),
        "turn_index": state.turn_index,
        "concurrent_slot": state.concurrent_slot,
        "active_player_id": state.active_player_id,
        "phase": state.phase.value,
        "pending": _pending(state.pending),
        "alternate_ruleset": state.alternate_ruleset,
        "hand_limit": state.hand_limit,
        "last_attacker": {str(k): v for k, v in state.last_attacker.items()},
        "class_offers": {str(k): list(v) for k, v in state.class_offers.items()},
        "rejection_rank": state.rejection_rank,
        "last_rejection_rank": state.last_rejection_rank,
        "rejection_set_this_turn": state.rejection_set_this_turn,
        "funeral_bell_triggered": state.funeral_bell_triggered,
        "deal_size": state.deal_size,
        "winner_id": state.winner_id,
        "game_over_message": state.game_over_message,
        "log": [{"seq": e.seq, "text": e.text} for e in state.log],
        "log_seq": state.log_seq,
        "version": state.version,
        "seed": state.seed,
        "rules": state.rule_config.model_dump(),
        "rng": [version, list(internal), gauss],
    }


def _restore_cards(items) -> list:
    return [Card(**c) for c in items]


def _restore_pending(data: Optional[Dict[str, Any]]) -> Optional[PendingAction]:
    if data is None:
        return None
    interrupt = None
    if data.get("interrupt"):
        i = data["interrupt"]
        interrupt = PendingInterrupt(
            kind=InterruptKind(i["kind"]),
            responder_id=i["responder_id"],
            awaiting=InputKind(i["awaiting"]),
            side=i["side"],
        )
    return PendingAction(
        kind=PendingKind(data["kind"]),
        awaiting=InputKind(data["awaiting"]),
        actor_id=data["actor_id"],
        card_index=data["card_index"],
        card_uid=data["card_uid"],
        target_id=data["target_id"],
        stage=data["stage"],
        options=list(data["options"]),
        payload=dict(data["payload"]),
        interrupt=interrupt,
    )


def restore(data: Dict[str, Any]) -> GameState:
    """Rebuild a GameState from `snapshot` output."""
    if data.get("format") != SNAPSHOT_FORMAT:
        raise ValueError(f"Unsupported snapshot format {data.get('format')!r}")

    players = []
    for p in data["players"]:
        fields_ = {k: v for k, v in p.items() if k not in ('hand', 'deck', 'shadow', 'kind')}
        player = Player(kind=ControllerKind(p["kind"]), **fields_)
        player.hand = _restore_cards(p["hand"])
        player.deck = _restore_cards(p["deck"])
        player.shadow = _restore_cards(p["shadow"])
        players.append(player)

    rng = random.Random()
    version, internal, gauss = data["rng"]
    rng.setstate((version, tuple(internal), gauss))

    return GameState(
        players=players,
        discard=_restore_cards(data["discard"]),
        turn_order=list(data["turn_order"]),
        turn_index=data["turn_index"],
        concurrent_slot=data["concurrent_slot"],
        active_player_id=data["active_player_id"],
        phase=TurnPhase(data["phase"]),
        pending=_restore_pending(data["pending"]),
        alternate_ruleset=data["alternate_ruleset"],
        hand_limit=data["hand_limit"],
        last_attacker={int(k): v for k, v in data["last_attacker"].items()},
        class_offers={int(k): list(v) for k, v in data["class_offers"].items()},
        rejection_rank=data["rejection_rank"],
        last_rejection_rank=data["last_rejection_rank"],
        rejection_set_this_turn=data["rejection_set_this_turn"],
        funeral_bell_triggered=data["funeral_bell_triggered"],
        deal_size=data["deal_size"],
        winner_id=data["winner_id"],
        game_over_message=data["game_over_message"],
        log=[LogEntry(**e) for e in data["log"]],
        log_seq=data["log_seq"],
        version=data["version"],
        seed=data["seed"],
        rule_config=RuleConfig(**data["rules"]),
        rng=rng,
    )


def sanitize_state(state: GameState, viewer_id: Optional[int] = None) -> Dict[str, Any]:
    """
    Sanitize game state for transmission to one client.

    Args:
        state: Game state to sanitize
        viewer_id: ID of the player viewing the state (to show their hand)

    Returns:
        Dictionary safe for JSON transmission. Hands and decks of other
        players are reduced to counts; shadows and the discard are public.
    """
    pending = state.pending
    sanitized = {
        "version": state.version,
        "phase": state.phase.value,
        "active_player_id": state.active_player_id,
        "turn_order": list(state.turn_order),
        "alternate_ruleset": state.alternate_ruleset,
        "rejection_rank": state.rejection_rank,
        "winner_id": state.winner_id,
        "game_over_message": state.game_over_message,
        "discard_count": len(state.discard),
        "discard_top": _card(state.discard[-1]) if state.discard else None,
        "players": [],
        "pending": None,
        "log": [str(e) for e in state.log[-20:]],
    }

    for player in state.players:
        entry = {
            "id": player.id,
            "name": player.name,
            "kind": player.kind.value,
            "class_name": player.class_name,
            "eliminated": player.eliminated,
            "salted": player.salted,
            "hand_count": len(player.hand),
            "deck_count": len(player.deck),
            "shadow": [_card(c) for c in player.shadow],
        }
        if player.id == viewer_id:
            entry["hand"] = [_card(c) for c in player.hand]
            entry["bound_suits"] = list(player.bound_suits)
            offers = state.class_offers.get(player.id)
            if offers:
                entry["class_offers"] = list(offers)
        sanitized["players"].append(entry)

    if pending is not None:
        public = {
            "kind": pending.kind.value,
            "actor_id": pending.actor_id,
            "responder_id": pending.responder_id,
            "awaiting": pending.awaited_input.value,
            "target_id": pending.target_id,
            "interrupt": pending.interrupt.kind.value if pending.interrupt else None,
        }
        if pending.responder_id == viewer_id:
            public["options"] = list(pending.options)
            public["pool"] = _pending_pool(state, pending)
            if pending.kind == PendingKind.DISCARD_DOWN:
                public["count"] = pending.payload.get("count")
        sanitized["pending"] = public

    return sanitized


def _pending_pool(state: GameState, pending: PendingAction):
    """Cards a CARD input picks from, shown only to the responder."""
    if pending.awaited_input != InputKind.CARD or pending.interrupt is not None:
        return None
    from .effects import spec_for

    if pending.kind not in (PendingKind.CAST, PendingKind.CLASS_ABILITY, PendingKind.BANISH, PendingKind.PANIC):
        return None
    spec = spec_for(pending)
    if spec.pool is None:
        return None
    return [_card(c) for c in spec.pool(state, pending)]


def get_public_game_info(state: GameState) -> Dict[str, Any]:
    """Get public information about a table for listings."""
    return {
        "phase": state.phase.value,
        "player_count": len(state.players),
        "max_players": state.rule_config.max_players,
        "players": [
            {"id": p.id, "name": p.name, "kind": p.kind.value, "eliminated": p.eliminated}
            for p in state.players
        ],
    }
