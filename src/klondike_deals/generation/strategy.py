"""Deal generation strategies.

One generator pipeline runs every kind of verified deal; what differs
between "solvable" and "first game" is captured here as data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Tuple

from klondike_deals.model.schema import Rank
from klondike_deals.model.state import Card
from klondike_deals.simulation.solver import (
    LOOSE_SOLVER,
    STRICT_SOLVER,
    SolverConfig,
    Verdict,
)


class LayoutBias(Enum):
    """How the shuffled deck is arranged before dealing."""

    UNIFORM = "uniform"          # Plain shuffle
    STRATIFIED = "stratified"    # Low tiers routed toward reachable slots
    ACES_ON_TOP = "aces_on_top"  # All Aces seated on columns 0-3, Twos next


@dataclass(frozen=True)
class ScoreWeights:
    """Bonus table for how reachable the low cards of a deal are.

    ``top_bonus`` holds ``(rank, points)`` pairs for column tops.
    ``stock_bonus`` holds ``(rank, points, decay)`` entries: a card at draw
    position ``i`` (0 = next card drawn) earns ``points - decay * i``.
    Tables are tuples so strategies stay hashable values.
    """

    base: int = 0
    top_bonus: Tuple[Tuple[Rank, int], ...] = ()
    stock_bonus: Tuple[Tuple[Rank, int, int], ...] = ()
    stock_window: int = 10

    def score(self, tableau: Sequence[Sequence[Card]], stock: Sequence[Card]) -> int:
        total = self.base
        top_bonus = dict(self.top_bonus)
        stock_bonus = {rank: (points, decay) for rank, points, decay in self.stock_bonus}
        for column in tableau:
            if column:
                total += top_bonus.get(column[-1].rank, 0)

        # Stock is drawn from its tail
        draw_order = list(reversed(stock))[: self.stock_window]
        for position, card in enumerate(draw_order):
            if card.rank in stock_bonus:
                points, decay = stock_bonus[card.rank]
                total += points - decay * position
        return total


@dataclass(frozen=True)
class DealStrategy:
    """Everything that parametrizes one generate-and-verify loop."""

    name: str
    bias: LayoutBias
    max_attempts: int
    solver: SolverConfig
    verdict: Verdict
    weights: ScoreWeights = field(default_factory=ScoreWeights)
    good_enough_score: Optional[int] = None  # None = never exit early
    fallback: Optional["DealStrategy"] = None  # None = plain shuffled deal


BASIC = DealStrategy(
    name="basic",
    bias=LayoutBias.UNIFORM,
    max_attempts=100,
    solver=LOOSE_SOLVER,
    verdict=Verdict.LOOSE,
    good_enough_score=0,
)

SOLVABLE = DealStrategy(
    name="solvable",
    bias=LayoutBias.STRATIFIED,
    max_attempts=300,
    solver=LOOSE_SOLVER,
    verdict=Verdict.LOOSE,
    weights=ScoreWeights(
        top_bonus=((Rank.ACE, 50), (Rank.TWO, 30), (Rank.THREE, 20)),
        stock_bonus=((Rank.ACE, 40, 2), (Rank.TWO, 25, 1)),
    ),
    good_enough_score=100,
    fallback=BASIC,
)

FIRST_GAME = DealStrategy(
    name="first_game",
    bias=LayoutBias.ACES_ON_TOP,
    max_attempts=500,
    solver=STRICT_SOLVER,
    verdict=Verdict.STRICT,
    weights=ScoreWeights(
        base=100,
        top_bonus=((Rank.TWO, 40), (Rank.THREE, 20)),
        stock_bonus=((Rank.TWO, 25, 0), (Rank.THREE, 15, 0)),
    ),
    good_enough_score=180,
    fallback=SOLVABLE,
)


def attempt_budget(strategy: DealStrategy) -> int:
    """Total attempts a strategy may spend, fallbacks included."""
    total = 0
    current: Optional[DealStrategy] = strategy
    while current is not None:
        total += current.max_attempts
        current = current.fallback
    return total
