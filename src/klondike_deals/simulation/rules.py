"""Klondike move legality predicates.

All functions here are pure: they read their arguments and never mutate
them.
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional, Sequence

from klondike_deals.model.schema import Color, Rank, Suit, rank_value
from klondike_deals.model.state import Card

Foundations = Mapping[Suit, Sequence[Card]]

OPPOSITE_SUITS = {
    Color.RED: (Suit.CLUBS, Suit.SPADES),
    Color.BLACK: (Suit.HEARTS, Suit.DIAMONDS),
}


class SafetyPolicy(Enum):
    """Rule deciding whether a foundation move can strand a lower card."""

    MIN_OPPOSITE_PLUS_TWO = "min_opposite_plus_two"
    OPPOSITE_PLUS_ONE = "opposite_plus_one"


def can_place_on_foundation(pile: Sequence[Card], card: Card) -> bool:
    """Empty pile takes an Ace; otherwise same suit, one rank higher."""
    if not pile:
        return card.rank == Rank.ACE
    top = pile[-1]
    return top.suit == card.suit and rank_value(card.rank) == rank_value(top.rank) + 1


def can_move_to_foundation(card: Card, foundations: Foundations) -> bool:
    """Check the foundation for the card's own suit."""
    return can_place_on_foundation(foundations.get(card.suit, ()), card)


def can_place_on_tableau(dest_top: Optional[Card], moving: Card) -> bool:
    """Opposite color and one rank lower; an empty column takes only a King."""
    if dest_top is None:
        return moving.rank == Rank.KING
    return (
        moving.color != dest_top.color
        and rank_value(moving.rank) == rank_value(dest_top.rank) - 1
    )


def foundation_top_rank(foundations: Foundations, suit: Suit) -> int:
    """Rank value of a foundation top (0 when empty)."""
    pile = foundations.get(suit, ())
    return rank_value(pile[-1].rank) if pile else 0


def is_safe_foundation_move(
    card: Card,
    foundations: Foundations,
    policy: SafetyPolicy = SafetyPolicy.MIN_OPPOSITE_PLUS_TWO,
) -> bool:
    """Whether sending ``card`` up cannot strand an opposite-color card.

    Aces and twos are always safe.
    """
    value = rank_value(card.rank)
    if value <= 2:
        return True

    opposite = [foundation_top_rank(foundations, suit) for suit in OPPOSITE_SUITS[card.color]]
    if policy == SafetyPolicy.OPPOSITE_PLUS_ONE:
        return all(top >= value - 1 for top in opposite)
    return value <= min(opposite) + 2


def movable_run(column: Sequence[Card]) -> Optional[int]:
    """Start index of the face-up alternating run ending at the column top.

    Returns None for an empty column or a face-down top.
    """
    if not column or not column[-1].face_up:
        return None
    start = len(column) - 1
    while (
        start > 0
        and column[start - 1].face_up
        and can_place_on_tableau(column[start - 1], column[start])
    ):
        start -= 1
    return start
