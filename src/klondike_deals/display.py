"""Terminal display for Klondike states."""

from __future__ import annotations

from klondike_deals.model.schema import DECK_SIZE, SUIT_ORDER
from klondike_deals.model.state import Card, GameState
from klondike_deals.simulation.solver import SolverResult

# Unicode card symbols
SUIT_SYMBOLS = {"hearts": "♥", "diamonds": "♦", "clubs": "♣", "spades": "♠"}

HIDDEN = "##"


def format_card(card: Card, reveal: bool = False) -> str:
    """Format card with unicode suit symbol; face-down cards show as ##."""
    if not card.face_up and not reveal:
        return HIDDEN
    return f"{card.rank.value}{SUIT_SYMBOLS[card.suit.value]}"


def render_state(state: GameState, reveal: bool = False) -> str:
    """Render a state, hiding face-down cards unless ``reveal``."""
    lines: list[str] = []
    lines.append(f"=== {state.game_mode.value.capitalize()} deal ===")

    waste_top = format_card(state.waste[-1]) if state.waste else "--"
    lines.append(f"Stock: {len(state.stock)} cards | Waste: {waste_top}")

    foundation_parts = []
    for suit, pile in zip(SUIT_ORDER, state.foundations):
        top = pile[-1].rank.value if pile else "--"
        foundation_parts.append(f"{SUIT_SYMBOLS[suit.value]} {top}")
    lines.append("Foundations: " + "  ".join(foundation_parts))
    lines.append("")

    for col, column in enumerate(state.tableau):
        cards = " ".join(format_card(card, reveal) for card in column) or "(empty)"
        lines.append(f"{col + 1}: {cards}")

    if reveal and state.stock:
        # Next draw first
        upcoming = " ".join(format_card(card, reveal=True) for card in reversed(state.stock))
        lines.append("")
        lines.append(f"Stock (next draw first): {upcoming}")

    return "\n".join(lines)


def render_solver_result(result: SolverResult) -> str:
    """One-line summary of a solver run."""
    return (
        f"Solver cleared {result.foundation_count}/{DECK_SIZE} in {result.iterations} rounds "
        f"({result.recycles} recycles, stopped: {result.stop_reason.value})"
    )
