"""Sampling and statistics for generated deals."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import numpy as np

from klondike_deals.generation.engine import DealGenerator, DealOutcome
from klondike_deals.model.schema import DECK_SIZE, GameMode
from klondike_deals.simulation.solver import LOOSE_SOLVER, STRICT_SOLVER, HeuristicSolver

logger = logging.getLogger(__name__)


@dataclass
class SamplingConfig:
    """Configuration for a batch of sampled deals."""

    num_deals: int = 20
    mode: GameMode = GameMode.SOLVABLE
    first_game: bool = False
    seed: Optional[int] = None
    max_attempts: Optional[int] = None  # Per-strategy cap, None = preset budgets


@dataclass
class SolvabilityStatistics:
    """Aggregate view of a batch of deals.

    ``cleared`` figures come from re-running the solver on every emitted
    deal, so they also cover unverified (fallback) deals.
    """

    num_deals: int
    mode: str
    first_game: bool
    mean_cleared: float
    std_cleared: float
    min_cleared: int
    median_cleared: float
    max_cleared: int
    loose_rate: float       # Share of deals with >= 48 cleared
    strict_rate: float      # Share of deals with all 52 cleared
    verified_rate: float
    fallback_rate: float
    mean_attempts: float
    p90_attempts: float


def sample_deals(config: SamplingConfig) -> List[DealOutcome]:
    """Generate ``num_deals`` deals from one seeded generator."""
    generator = DealGenerator(seed=config.seed, max_attempts=config.max_attempts)
    outcomes = []
    for i in range(config.num_deals):
        outcome = generator.deal(config.mode, first_game=config.first_game)
        logger.debug(
            f"Deal {i + 1}/{config.num_deals}: {outcome.strategy_name}, "
            f"{outcome.attempts} attempts, verified={outcome.verified}"
        )
        outcomes.append(outcome)
    return outcomes


def compute_statistics(
    outcomes: List[DealOutcome],
    mode: GameMode = GameMode.SOLVABLE,
    first_game: bool = False,
) -> SolvabilityStatistics:
    """Re-solve every deal and summarize with numpy."""
    if not outcomes:
        raise ValueError("Need at least one deal to summarize")

    solver = HeuristicSolver(STRICT_SOLVER if first_game else LOOSE_SOLVER)
    cleared = np.array([solver.solve(o.state).foundation_count for o in outcomes])
    attempts = np.array([o.attempts for o in outcomes])
    verified = np.array([o.verified for o in outcomes], dtype=bool)
    fallback = np.array([o.fallback_used for o in outcomes], dtype=bool)

    return SolvabilityStatistics(
        num_deals=len(outcomes),
        mode=mode.value,
        first_game=first_game,
        mean_cleared=float(np.mean(cleared)),
        std_cleared=float(np.std(cleared)),
        min_cleared=int(np.min(cleared)),
        median_cleared=float(np.median(cleared)),
        max_cleared=int(np.max(cleared)),
        loose_rate=float(np.mean(cleared >= 48)),
        strict_rate=float(np.mean(cleared == DECK_SIZE)),
        verified_rate=float(np.mean(verified)),
        fallback_rate=float(np.mean(fallback)),
        mean_attempts=float(np.mean(attempts)),
        p90_attempts=float(np.percentile(attempts, 90)),
    )


def print_summary(stats: SolvabilityStatistics) -> None:
    """Print human-readable solvability summary."""
    label = "first game" if stats.first_game else stats.mode
    print("\n" + "=" * 50)
    print(f"Solvability Report ({label}, {stats.num_deals} deals)")
    print("=" * 50)
    print(f"  Cleared: {stats.mean_cleared:.1f} +/- {stats.std_cleared:.1f} "
          f"(min {stats.min_cleared}, median {stats.median_cleared:.0f}, max {stats.max_cleared})")
    print(f"  Loose solvable (>=48): {stats.loose_rate:.0%}")
    print(f"  Strict solvable (52):  {stats.strict_rate:.0%}")
    print(f"  Verified: {stats.verified_rate:.0%}  Fallback: {stats.fallback_rate:.0%}")
    print(f"  Attempts: mean {stats.mean_attempts:.1f}, p90 {stats.p90_attempts:.0f}")


def save_json(stats: SolvabilityStatistics, output_path: Path) -> None:
    """Save statistics to JSON."""
    data = {
        "timestamp": datetime.now().isoformat(),
        "statistics": asdict(stats),
    }
    with open(output_path, "w") as f:
        json.dump(data, f, indent=2)
