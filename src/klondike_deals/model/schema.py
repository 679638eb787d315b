"""Core card enumerations and rank ordering."""

from __future__ import annotations

from enum import Enum
from typing import Dict


class Rank(Enum):
    """Playing card ranks."""

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"


class Color(Enum):
    """Card colors."""

    RED = "red"
    BLACK = "black"


class Suit(Enum):
    """Playing card suits."""

    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    @property
    def color(self) -> Color:
        if self in (Suit.HEARTS, Suit.DIAMONDS):
            return Color.RED
        return Color.BLACK


class GameMode(Enum):
    """Deal advertisement modes."""

    RANDOM = "random"
    SOLVABLE = "solvable"
    UNSOLVABLE = "unsolvable"


RANK_VALUES: Dict[Rank, int] = {rank: i + 1 for i, rank in enumerate(Rank)}

SUIT_ORDER: tuple[Suit, ...] = tuple(Suit)

TABLEAU_COLUMNS = 7
DECK_SIZE = 52
SUIT_SIZE = 13


def rank_value(rank: Rank) -> int:
    """Numeric rank (A=1 ... K=13)."""
    return RANK_VALUES[rank]
