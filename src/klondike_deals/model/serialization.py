"""JSON serialization for GameState."""

import json
from datetime import datetime
from typing import Any, Dict, List

from klondike_deals.model.schema import GameMode, Rank, Suit, SUIT_ORDER
from klondike_deals.model.state import Card, GameState


def card_to_dict(card: Card) -> Dict[str, Any]:
    """Convert Card to dict (color included for consumers)."""
    return {
        "id": card.id,
        "suit": card.suit.value,
        "rank": card.rank.value,
        "color": card.color.value,
        "faceUp": card.face_up,
    }


def card_from_dict(data: Dict[str, Any]) -> Card:
    return Card(
        id=data["id"],
        suit=Suit(data["suit"]),
        rank=Rank(data["rank"]),
        face_up=data.get("faceUp", False),
    )


def _pile_to_list(pile: tuple[Card, ...]) -> List[Dict[str, Any]]:
    return [card_to_dict(card) for card in pile]


def _pile_from_list(items: List[Dict[str, Any]]) -> tuple[Card, ...]:
    return tuple(card_from_dict(item) for item in items)


def game_state_to_dict(state: GameState) -> Dict[str, Any]:
    """Convert GameState to the JSON shape the game-state store consumes."""
    return {
        "tableau": [_pile_to_list(column) for column in state.tableau],
        "foundations": {
            suit.value: _pile_to_list(pile)
            for suit, pile in zip(SUIT_ORDER, state.foundations)
        },
        "stock": _pile_to_list(state.stock),
        "waste": _pile_to_list(state.waste),
        "isWon": state.is_won,
        "moves": state.moves,
        "startTime": state.start_time.isoformat() if state.start_time else None,
        "gameMode": state.game_mode.value,
    }


def game_state_to_json(state: GameState, indent: int = 2) -> str:
    """Serialize GameState to JSON string."""
    return json.dumps(game_state_to_dict(state), indent=indent)


def game_state_from_dict(data: Dict[str, Any]) -> GameState:
    """Create GameState from dict."""
    foundations = data.get("foundations", {})
    start_time = data.get("startTime")
    return GameState(
        tableau=tuple(_pile_from_list(column) for column in data["tableau"]),
        foundations=tuple(_pile_from_list(foundations.get(suit.value, [])) for suit in SUIT_ORDER),
        stock=_pile_from_list(data["stock"]),
        waste=_pile_from_list(data.get("waste", [])),
        is_won=data.get("isWon", False),
        moves=data.get("moves", 0),
        start_time=datetime.fromisoformat(start_time) if start_time else None,
        game_mode=GameMode(data.get("gameMode", GameMode.RANDOM.value)),
    )


def game_state_from_json(json_str: str) -> GameState:
    """Deserialize GameState from JSON string."""
    return game_state_from_dict(json.loads(json_str))
