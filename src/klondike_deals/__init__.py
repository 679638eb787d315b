"""Klondike deal generation with heuristic solvability checks."""

from klondike_deals.model.schema import Color, GameMode, Rank, Suit
from klondike_deals.model.state import Card, GameState
from klondike_deals.model.validation import DeckIntegrityError, validate_game_state
from klondike_deals.simulation.solver import HeuristicSolver, SolverConfig, SolverResult, Verdict
from klondike_deals.generation.engine import (
    DealGenerator,
    DealOutcome,
    generate_first_game,
    generate_solvable_game,
    generate_unsolvable_game,
)

__all__ = [
    "Card",
    "Color",
    "DealGenerator",
    "DealOutcome",
    "DeckIntegrityError",
    "GameMode",
    "GameState",
    "HeuristicSolver",
    "Rank",
    "SolverConfig",
    "SolverResult",
    "Suit",
    "Verdict",
    "generate_first_game",
    "generate_solvable_game",
    "generate_unsolvable_game",
    "validate_game_state",
]
