"""Tests for terminal rendering."""

from klondike_deals.display import HIDDEN, format_card, render_solver_result, render_state
from klondike_deals.model.deck import build_deck, deal_layout, make_game_state
from klondike_deals.model.schema import DECK_SIZE, GameMode, Rank, Suit
from klondike_deals.model.state import Card
from klondike_deals.simulation.solver import SolverResult, StopReason


def test_format_card_face_up():
    assert format_card(Card.of(Rank.ACE, Suit.HEARTS, face_up=True)) == "A♥"
    assert format_card(Card.of(Rank.TEN, Suit.SPADES, face_up=True)) == "10♠"


def test_format_card_hidden_unless_revealed():
    card = Card.of(Rank.QUEEN, Suit.CLUBS)
    assert format_card(card) == HIDDEN
    assert format_card(card, reveal=True) == "Q♣"


def test_render_fresh_deal():
    tableau, stock = deal_layout(build_deck())
    output = render_state(make_game_state(tableau, stock, GameMode.SOLVABLE))

    assert "Solvable deal" in output
    assert "Stock: 24 cards | Waste: --" in output
    assert "7: ## ## ## ## ## ## " in output
    assert "Stock (next draw first)" not in output


def test_render_reveal_shows_stock():
    tableau, stock = deal_layout(build_deck())
    output = render_state(make_game_state(tableau, stock, GameMode.RANDOM), reveal=True)

    assert HIDDEN not in output
    assert "Stock (next draw first): K♠" in output


def test_render_solver_result():
    result = SolverResult(
        foundation_count=4, iterations=10, recycles=1, moves=(), stop_reason=StopReason.NO_MOVES
    )
    assert render_solver_result(result) == (
        "Solver cleared 4/52 in 10 rounds (1 recycles, stopped: no_moves)"
    )
    assert f"/{DECK_SIZE} " in render_solver_result(result)
