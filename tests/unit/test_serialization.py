"""Tests for GameState JSON serialization."""

import json
from datetime import datetime, timezone

from klondike_deals.model.deck import build_deck, deal_layout, make_game_state
from klondike_deals.model.schema import GameMode
from klondike_deals.model.serialization import (
    game_state_from_json,
    game_state_to_dict,
    game_state_to_json,
)


def make_state():
    tableau, stock = deal_layout(build_deck())
    start = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
    return make_game_state(tableau, stock, GameMode.SOLVABLE, start_time=start)


def test_dict_shape_matches_store_contract() -> None:
    data = game_state_to_dict(make_state())

    assert set(data) == {
        "tableau", "foundations", "stock", "waste",
        "isWon", "moves", "startTime", "gameMode",
    }
    assert set(data["foundations"]) == {"hearts", "diamonds", "clubs", "spades"}
    assert data["gameMode"] == "solvable"
    assert data["isWon"] is False

    top = data["tableau"][0][-1]
    assert top == {
        "id": "hearts-A",
        "suit": "hearts",
        "rank": "A",
        "color": "red",
        "faceUp": True,
    }


def test_json_round_trip() -> None:
    state = make_state()
    restored = game_state_from_json(game_state_to_json(state))

    assert restored == state


def test_json_is_plain() -> None:
    parsed = json.loads(game_state_to_json(make_state()))
    assert len(parsed["stock"]) == 24
    assert parsed["startTime"].startswith("2025-03-01T12:00:00")
