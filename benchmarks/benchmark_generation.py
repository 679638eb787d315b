"""Benchmark deal generation and solver throughput."""

import random
import time

from klondike_deals.generation.engine import DealGenerator
from klondike_deals.model.deck import build_deck, deal_layout, shuffle_deck
from klondike_deals.model.schema import GameMode
from klondike_deals.simulation.solver import LOOSE_SOLVER, STRICT_SOLVER, HeuristicSolver


def benchmark_solver(num_deals: int = 100, strict: bool = False) -> dict:
    """Time the solver alone on plain shuffled deals."""
    solver = HeuristicSolver(STRICT_SOLVER if strict else LOOSE_SOLVER)
    layouts = [
        deal_layout(shuffle_deck(build_deck(), random.Random(seed)))
        for seed in range(num_deals)
    ]

    start_time = time.perf_counter()
    results = [solver.solve_layout(tableau, stock) for tableau, stock in layouts]
    total_duration_s = time.perf_counter() - start_time

    return {
        "total_deals": num_deals,
        "total_duration_s": total_duration_s,
        "avg_ms_per_solve": (total_duration_s * 1000) / num_deals,
        "avg_cleared": sum(r.foundation_count for r in results) / num_deals,
        "avg_iterations": sum(r.iterations for r in results) / num_deals,
    }


def benchmark_pipeline(num_deals: int = 10, first_game: bool = False) -> dict:
    """Time full generate-and-verify runs."""
    generator = DealGenerator(seed=0)

    start_time = time.perf_counter()
    outcomes = [generator.deal(GameMode.SOLVABLE, first_game=first_game) for _ in range(num_deals)]
    total_duration_s = time.perf_counter() - start_time

    return {
        "total_deals": num_deals,
        "total_duration_s": total_duration_s,
        "avg_ms_per_deal": (total_duration_s * 1000) / num_deals,
        "avg_attempts": sum(o.attempts for o in outcomes) / num_deals,
        "fallbacks": sum(1 for o in outcomes if o.fallback_used),
    }


def main():
    """Run solver and pipeline benchmarks."""
    print("=" * 60)
    print("DEAL GENERATION BENCHMARK")
    print("=" * 60)
    print()

    # Warm-up run
    print("Warming up...")
    benchmark_solver(num_deals=5)
    print()

    for strict in (False, True):
        label = "strict" if strict else "loose"
        res = benchmark_solver(num_deals=100, strict=strict)
        print(f"Solver ({label}, {res['total_deals']} shuffled deals):")
        print(f"  Avg per solve:  {res['avg_ms_per_solve']:.3f}ms")
        print(f"  Avg cleared:    {res['avg_cleared']:.1f}")
        print(f"  Avg iterations: {res['avg_iterations']:.1f}")
        print()

    for first_game in (False, True):
        label = "first game" if first_game else "solvable"
        res = benchmark_pipeline(num_deals=10, first_game=first_game)
        print(f"Pipeline ({label}, {res['total_deals']} deals):")
        print(f"  Total duration: {res['total_duration_s']:.3f}s")
        print(f"  Avg per deal:   {res['avg_ms_per_deal']:.1f}ms")
        print(f"  Avg attempts:   {res['avg_attempts']:.1f}")
        print(f"  Fallbacks:      {res['fallbacks']}")
        print()


if __name__ == "__main__":
    main()
