"""Tests for state invariant validation."""

import pytest
from klondike_deals.model.deck import build_deck, deal_layout, make_game_state
from klondike_deals.model.schema import GameMode, Rank, Suit
from klondike_deals.model.validation import DeckIntegrityError, validate_game_state


def fresh_state():
    tableau, stock = deal_layout(build_deck())
    return make_game_state(tableau, stock, GameMode.RANDOM)


def test_fresh_deal_is_valid() -> None:
    validate_game_state(fresh_state())


def test_missing_card_rejected() -> None:
    state = fresh_state()
    broken = state.copy_with(stock=state.stock[:-1])

    with pytest.raises(DeckIntegrityError, match="Expected 52"):
        validate_game_state(broken)


def test_duplicate_card_rejected() -> None:
    state = fresh_state()
    broken = state.copy_with(stock=state.stock[:-1] + (state.stock[0],))

    with pytest.raises(DeckIntegrityError, match="Duplicate"):
        validate_game_state(broken)


def test_foundation_gap_rejected() -> None:
    """A foundation must be a gapless run from the Ace."""
    state = fresh_state()
    two = next(c for c in state.all_cards() if c.rank == Rank.TWO and c.suit == Suit.HEARTS)
    tableau = tuple(tuple(c for c in col if c.id != two.id) for col in state.tableau)
    stock = tuple(c for c in state.stock if c.id != two.id)
    broken = state.copy_with(
        tableau=tableau,
        stock=stock,
        foundations=((two.copy_with(face_up=True),), (), (), ()),
    )

    with pytest.raises(DeckIntegrityError, match="gapless"):
        validate_game_state(broken)


def test_wrong_suit_on_foundation_rejected() -> None:
    state = fresh_state()
    ace = next(c for c in state.all_cards() if c.id == "spades-A")
    tableau = tuple(tuple(c for c in col if c.id != ace.id) for col in state.tableau)
    stock = tuple(c for c in state.stock if c.id != ace.id)
    broken = state.copy_with(
        tableau=tableau,
        stock=stock,
        foundations=((ace.copy_with(face_up=True),), (), (), ()),
    )

    with pytest.raises(DeckIntegrityError, match="hearts foundation"):
        validate_game_state(broken)


def test_face_down_waste_rejected() -> None:
    state = fresh_state()
    broken = state.copy_with(stock=state.stock[:-1], waste=(state.stock[-1],))

    with pytest.raises(DeckIntegrityError, match="waste"):
        validate_game_state(broken)


def test_face_down_tableau_top_rejected() -> None:
    state = fresh_state()
    column = state.tableau[0][:-1] + (state.tableau[0][-1].copy_with(face_up=False),)
    broken = state.copy_with(tableau=(column,) + state.tableau[1:])

    with pytest.raises(DeckIntegrityError, match="face-down top"):
        validate_game_state(broken)


def test_integrity_error_is_not_a_value_error() -> None:
    """Integrity failures are their own error type."""
    assert not issubclass(DeckIntegrityError, ValueError)
    assert issubclass(DeckIntegrityError, Exception)
