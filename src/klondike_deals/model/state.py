"""Immutable Klondike state representation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional

from klondike_deals.model.schema import (
    Color, GameMode, Rank, Suit, SUIT_ORDER, SUIT_SIZE,
)


@dataclass(frozen=True)
class Card:
    """Immutable playing card.

    ``id`` is stable for the card's lifetime; flipping a card yields a new
    value with the same id.
    """

    id: str
    suit: Suit
    rank: Rank
    face_up: bool = False

    @classmethod
    def of(cls, rank: Rank, suit: Suit, face_up: bool = False) -> "Card":
        return cls(id=f"{suit.value}-{rank.value}", suit=suit, rank=rank, face_up=face_up)

    @property
    def color(self) -> Color:
        return self.suit.color

    def copy_with(self, **changes) -> "Card":  # type: ignore
        """Create new Card with changes."""
        current = {
            "id": self.id,
            "suit": self.suit,
            "rank": self.rank,
            "face_up": self.face_up,
        }
        current.update(changes)
        return Card(**current)

    def __str__(self) -> str:
        return f"{self.rank.value}{self.suit.value[0].upper()}"


Pile = tuple[Card, ...]


@dataclass(frozen=True)
class GameState:
    """Initial (or later) Klondike layout.

    Nested structures are tuples; ``foundations`` holds one pile per suit
    in ``SUIT_ORDER``.
    """

    tableau: tuple[Pile, ...]
    foundations: tuple[Pile, ...]
    stock: Pile
    waste: Pile
    is_won: bool = False
    moves: int = 0
    start_time: Optional[datetime] = None
    game_mode: GameMode = GameMode.RANDOM

    def foundation(self, suit: Suit) -> Pile:
        """Foundation pile for a suit."""
        return self.foundations[SUIT_ORDER.index(suit)]

    def foundations_by_suit(self) -> dict[Suit, Pile]:
        return {suit: self.foundations[i] for i, suit in enumerate(SUIT_ORDER)}

    def all_cards(self) -> Iterator[Card]:
        """Every card across tableau, foundations, stock and waste."""
        for column in self.tableau:
            yield from column
        for pile in self.foundations:
            yield from pile
        yield from self.stock
        yield from self.waste

    @property
    def card_count(self) -> int:
        return sum(1 for _ in self.all_cards())

    @property
    def foundation_count(self) -> int:
        return sum(len(pile) for pile in self.foundations)

    def copy_with(self, **changes) -> "GameState":  # type: ignore
        """Create a new state with specified changes."""
        current = {
            "tableau": self.tableau,
            "foundations": self.foundations,
            "stock": self.stock,
            "waste": self.waste,
            "is_won": self.is_won,
            "moves": self.moves,
            "start_time": self.start_time,
            "game_mode": self.game_mode,
        }
        current.update(changes)
        return GameState(**current)


def empty_foundations() -> tuple[Pile, ...]:
    return tuple(() for _ in SUIT_ORDER)


def check_win_condition(state: GameState) -> bool:
    """Game is won when every foundation holds a complete suit."""
    return all(len(pile) == SUIT_SIZE for pile in state.foundations)
