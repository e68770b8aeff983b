"""
Tests for snapshots and per-viewer state.
"""

import orjson

from deathwick_engine.constants import InterruptKind
from deathwick_engine.engine import (
    add_player, create_game, haunt, provide_target, provide_yes_no, start_game,
)
from deathwick_engine.serialization import (
    get_public_game_info, restore, sanitize_state, snapshot,
)
from deathwick_engine.shuffle import validate_deck_integrity


def mid_duel(table):
    state = table(3)
    table.hand(state, 0, '7H')
    table.hand(state, 1, '5D')
    state = haunt(state, 0, 0).state
    return provide_target(state, 0, 1).state


def test_snapshot_survives_json(table):
    state = mid_duel(table)
    data = orjson.loads(orjson.dumps(snapshot(state)))
    restored = restore(data)

    assert restored.pending.interrupt.kind == InterruptKind.CANCEL_DUEL
    assert restored.pending.responder_id == 1
    assert validate_deck_integrity(restored)
    assert snapshot(restored) == snapshot(state)


def test_restored_game_continues_identically(table):
    state = mid_duel(table)
    restored = restore(orjson.loads(orjson.dumps(snapshot(state))))

    left = provide_yes_no(state, 1, False).state
    right = provide_yes_no(restored, 1, False).state
    assert snapshot(left) == snapshot(right)


def test_restored_rng_deals_the_same():
    state = create_game(seed=11)
    for name in ("A", "B", "C"):
        state = add_player(state, name).state
    restored = restore(snapshot(state))

    left = start_game(state, 0).state
    right = start_game(restored, 0).state
    assert [c.uid for c in left.players[2].deck] == [c.uid for c in right.players[2].deck]
    assert left.class_offers == right.class_offers


def test_sanitize_hides_other_hands(table):
    state = table(3)
    table.hand(state, 0, '7H', '8H')
    table.hand(state, 1, 'KS')
    view = sanitize_state(state, 0)

    me, other = view["players"][0], view["players"][1]
    assert [c["rank"] for c in me["hand"]] == ['7', '8']
    assert "hand" not in other
    assert other["hand_count"] == 1
    assert other["deck_count"] == 10
    orjson.dumps(view)


def test_pending_details_go_to_the_responder(table):
    state = mid_duel(table)
    assert sanitize_state(state, 1)["pending"]["options"] is not None
    assert "options" not in sanitize_state(state, 0)["pending"]
    assert sanitize_state(state, 0)["pending"]["interrupt"] == InterruptKind.CANCEL_DUEL.value


def test_public_game_info(table):
    info = get_public_game_info(table(4))
    assert info["player_count"] == 4
    assert [p["name"] for p in info["players"]] == ["P0", "P1", "P2", "P3"]
