"""Structural invariant checks for Klondike states."""

from __future__ import annotations

from typing import Iterable

from klondike_deals.model.schema import DECK_SIZE, SUIT_ORDER, rank_value
from klondike_deals.model.state import Card, GameState


class DeckIntegrityError(Exception):
    """A state violates a card-conservation or placement invariant.

    This is a programming error, never a "deal not solvable" outcome.
    """

    pass


def check_card_set(cards: Iterable[Card]) -> None:
    """Require exactly 52 cards with unique ids."""
    seen: set[str] = set()
    count = 0
    for card in cards:
        count += 1
        if card.id in seen:
            raise DeckIntegrityError(f"Duplicate card id: {card.id}")
        seen.add(card.id)
    if count != DECK_SIZE:
        raise DeckIntegrityError(f"Expected {DECK_SIZE} cards, found {count}")


def validate_game_state(state: GameState) -> None:
    """Raise DeckIntegrityError on the first broken invariant."""
    check_card_set(state.all_cards())

    for suit, pile in zip(SUIT_ORDER, state.foundations):
        for position, card in enumerate(pile):
            if card.suit != suit:
                raise DeckIntegrityError(f"{card.id} sits on the {suit.value} foundation")
            if rank_value(card.rank) != position + 1:
                raise DeckIntegrityError(
                    f"Foundation {suit.value} is not a gapless run from Ace at {card.id}"
                )
            if not card.face_up:
                raise DeckIntegrityError(f"Face-down card {card.id} on foundation")

    for card in state.waste:
        if not card.face_up:
            raise DeckIntegrityError(f"Face-down card {card.id} in waste")

    for card in state.stock:
        if card.face_up:
            raise DeckIntegrityError(f"Face-up card {card.id} in stock")

    for col, column in enumerate(state.tableau):
        if column and not column[-1].face_up:
            raise DeckIntegrityError(f"Tableau column {col} has a face-down top card")
