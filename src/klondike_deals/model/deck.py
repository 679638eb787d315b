"""Deck construction, shuffling and the classic triangular deal."""

from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple, TypeVar

from klondike_deals.model.schema import GameMode, Rank, Suit, TABLEAU_COLUMNS
from klondike_deals.model.state import Card, GameState, Pile, empty_foundations

T = TypeVar("T")


def build_deck() -> List[Card]:
    """Create the standard 52-card deck, face-down, suit by suit."""
    return [Card.of(rank, suit) for suit in Suit for rank in Rank]


def shuffle_deck(cards: Sequence[T], rng: random.Random) -> List[T]:
    """Shuffle into a new list with the injected RNG."""
    shuffled = list(cards)
    rng.shuffle(shuffled)
    return shuffled


def deal_layout(cards: Sequence[Card]) -> Tuple[List[List[Card]], List[Card]]:
    """Deal column i with i+1 cards (top card face-up); the rest is stock."""
    tableau: List[List[Card]] = [[] for _ in range(TABLEAU_COLUMNS)]
    index = 0
    for col in range(TABLEAU_COLUMNS):
        for row in range(col + 1):
            tableau[col].append(cards[index].copy_with(face_up=row == col))
            index += 1
    stock = [card.copy_with(face_up=False) for card in cards[index:]]
    return tableau, stock


def make_game_state(
    tableau: Sequence[Sequence[Card]],
    stock: Sequence[Card],
    mode: GameMode,
    start_time: Optional[datetime] = None,
) -> GameState:
    """Wrap a dealt layout as a fresh GameState."""
    columns: tuple[Pile, ...] = tuple(tuple(col) for col in tableau)
    return GameState(
        tableau=columns,
        foundations=empty_foundations(),
        stock=tuple(stock),
        waste=(),
        is_won=False,
        moves=0,
        start_time=start_time or datetime.now(timezone.utc),
        game_mode=mode,
    )
