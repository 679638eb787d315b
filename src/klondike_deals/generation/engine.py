"""Deal generation pipeline.

Every verified deal goes through the same loop: build a biased layout,
run the heuristic solver on it, keep the best-scoring candidate that
passes the strategy's verdict, and stop early once one is good enough.
When the budget runs out the strategy's fallback takes over, ending in a
plain shuffled deal so a game can always start.
"""

from __future__ import annotations

import logging
import os
import random
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, List, Optional

from klondike_deals.generation.layouts import Layout, build_layout, uniform_layout
from klondike_deals.generation.strategy import FIRST_GAME, SOLVABLE, DealStrategy
from klondike_deals.generation.unsolvable import unsolvable_layout
from klondike_deals.model.deck import build_deck, make_game_state
from klondike_deals.model.schema import GameMode
from klondike_deals.model.state import Card, GameState
from klondike_deals.model.validation import validate_game_state
from klondike_deals.simulation.solver import HeuristicSolver, SolverResult

logger = logging.getLogger(__name__)

MAX_ATTEMPTS_ENV = "KLONDIKE_MAX_ATTEMPTS"


def _attempts_from_env() -> Optional[int]:
    """Attempt cap from the environment; bad values are ignored."""
    raw = os.environ.get(MAX_ATTEMPTS_ENV)
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring {MAX_ATTEMPTS_ENV}={raw!r}: not an integer")
        return None
    if value < 1:
        logger.warning(f"Ignoring {MAX_ATTEMPTS_ENV}={raw!r}: must be at least 1")
        return None
    return value


@dataclass(frozen=True)
class DealOutcome:
    """A generated deal plus how it was obtained."""

    state: GameState
    strategy_name: str
    attempts: int
    score: Optional[int]
    solver_result: Optional[SolverResult]
    verified: bool
    fallback_used: bool


@dataclass
class _Candidate:
    tableau: List[List[Card]]
    stock: List[Card]
    score: int
    result: SolverResult


class DealGenerator:
    """Produces GameStates for every advertised mode.

    Randomness comes from one injected ``random.Random`` so a seed
    reproduces the whole sequence of deals.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        max_attempts: Optional[int] = None,
    ) -> None:
        """Initialize the generator.

        Args:
            seed: Seed for a private RNG (ignored when ``rng`` is given)
            rng: RNG to draw every shuffle from
            clock: Source of ``start_time`` for emitted states (default: UTC now)
            max_attempts: Cap on every strategy's attempt budget
                (default: $KLONDIKE_MAX_ATTEMPTS, else uncapped)
        """
        self.rng = rng if rng is not None else random.Random(seed)
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        if max_attempts is None:
            max_attempts = _attempts_from_env()
        self.max_attempts = max_attempts

    def _budget(self, strategy: DealStrategy) -> int:
        if self.max_attempts is None:
            return strategy.max_attempts
        return min(strategy.max_attempts, self.max_attempts)

    def _emit(self, layout: Layout, mode: GameMode) -> GameState:
        tableau, stock = layout
        state = make_game_state(tableau, stock, mode, start_time=self.clock())
        validate_game_state(state)
        return state

    def run(self, strategy: DealStrategy, mode: GameMode = GameMode.SOLVABLE) -> DealOutcome:
        """Run one strategy (and its fallbacks) to completion."""
        solver = HeuristicSolver(strategy.solver)
        budget = self._budget(strategy)
        best: Optional[_Candidate] = None
        attempts = 0

        while attempts < budget:
            attempts += 1
            tableau, stock = build_layout(strategy.bias, self.rng)
            result = solver.solve_layout(tableau, stock)

            if not result.is_solvable(strategy.verdict):
                continue

            score = strategy.weights.score(tableau, stock)
            if best is None or score > best.score:
                best = _Candidate(tableau, stock, score, result)
                logger.debug(
                    f"[{strategy.name}] attempt {attempts}: candidate scored {score} "
                    f"({result.foundation_count} cleared)"
                )

            if strategy.good_enough_score is not None and score >= strategy.good_enough_score:
                break

        if best is not None:
            logger.info(
                f"[{strategy.name}] using deal scored {best.score} after {attempts} attempts"
            )
            return DealOutcome(
                state=self._emit((best.tableau, best.stock), mode),
                strategy_name=strategy.name,
                attempts=attempts,
                score=best.score,
                solver_result=best.result,
                verified=True,
                fallback_used=False,
            )

        if strategy.fallback is not None:
            logger.warning(
                f"[{strategy.name}] no deal passed after {attempts} attempts, "
                f"falling back to '{strategy.fallback.name}'"
            )
            outcome = self.run(strategy.fallback, mode)
            return replace(outcome, attempts=attempts + outcome.attempts, fallback_used=True)

        logger.warning(
            f"[{strategy.name}] no deal passed after {attempts} attempts, "
            f"using an unverified shuffle"
        )
        return DealOutcome(
            state=self._emit(uniform_layout(build_deck(), self.rng), mode),
            strategy_name=strategy.name,
            attempts=attempts,
            score=None,
            solver_result=None,
            verified=False,
            fallback_used=True,
        )

    def random_outcome(self) -> DealOutcome:
        state = self._emit(uniform_layout(build_deck(), self.rng), GameMode.RANDOM)
        return DealOutcome(state, "random", 1, None, None, verified=False, fallback_used=False)

    def unsolvable_outcome(self) -> DealOutcome:
        state = self._emit(unsolvable_layout(self.rng), GameMode.UNSOLVABLE)
        logger.info("Dealt unsolvable layout (aces buried, not solver-checked)")
        return DealOutcome(state, "unsolvable", 1, None, None, verified=False, fallback_used=False)

    def deal(self, mode: GameMode, first_game: bool = False) -> DealOutcome:
        """Deal for a mode; a player's first game always gets the strict pipeline."""
        if first_game:
            return self.run(FIRST_GAME, GameMode.SOLVABLE)
        if mode == GameMode.SOLVABLE:
            return self.run(SOLVABLE, GameMode.SOLVABLE)
        if mode == GameMode.UNSOLVABLE:
            return self.unsolvable_outcome()
        return self.random_outcome()

    def generate(self, mode: GameMode, first_game: bool = False) -> GameState:
        return self.deal(mode, first_game).state

    def generate_solvable_game(self) -> GameState:
        """Loose-verified deal (>= 48 cards cleared by the solver)."""
        return self.run(SOLVABLE, GameMode.SOLVABLE).state

    def generate_first_game(self) -> GameState:
        """Strictly verified deal (all 52 cleared) for a brand-new player."""
        return self.run(FIRST_GAME, GameMode.SOLVABLE).state

    def generate_unsolvable_game(self) -> GameState:
        return self.unsolvable_outcome().state

    def generate_random_game(self) -> GameState:
        return self.random_outcome().state


def generate_solvable_game(seed: Optional[int] = None) -> GameState:
    return DealGenerator(seed=seed).generate_solvable_game()


def generate_first_game(seed: Optional[int] = None) -> GameState:
    return DealGenerator(seed=seed).generate_first_game()


def generate_unsolvable_game(seed: Optional[int] = None) -> GameState:
    return DealGenerator(seed=seed).generate_unsolvable_game()
