"""CLI command for dealing a single game."""

from __future__ import annotations

import logging

import click

from klondike_deals.display import render_solver_result, render_state
from klondike_deals.generation.engine import DealGenerator
from klondike_deals.model.schema import GameMode
from klondike_deals.model.serialization import game_state_to_json
from klondike_deals.simulation.solver import (
    LOOSE_SOLVER,
    STRICT_SOLVER,
    HeuristicSolver,
    Verdict,
)

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "-m", "--mode",
    type=click.Choice([mode.value for mode in GameMode]),
    default=GameMode.SOLVABLE.value,
    help="Kind of deal to generate",
)
@click.option("--first-game", is_flag=True, help="Deal a strictly verified first game")
@click.option("--seed", type=int, default=None, envvar="KLONDIKE_DEAL_SEED",
              help="Random seed for reproducibility")
@click.option("--max-attempts", type=int, default=None, help="Cap on attempts per strategy")
@click.option("--json", "as_json", is_flag=True, help="Print the GameState as JSON")
@click.option("--reveal", is_flag=True, help="Show face-down cards and stock order")
@click.option("--check", is_flag=True, help="Re-run the solver on the dealt game")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(
    mode: str,
    first_game: bool,
    seed: int | None,
    max_attempts: int | None,
    as_json: bool,
    reveal: bool,
    check: bool,
    verbose: bool,
):
    """Generate one Klondike deal."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO)

    generator = DealGenerator(seed=seed, max_attempts=max_attempts)
    outcome = generator.deal(GameMode(mode), first_game=first_game)

    if as_json:
        click.echo(game_state_to_json(outcome.state))
    else:
        click.echo(render_state(outcome.state, reveal=reveal))
        click.echo("")
        status = "verified" if outcome.verified else "unverified"
        click.echo(f"Strategy: {outcome.strategy_name} ({status}, {outcome.attempts} attempts)")

    if check:
        verdict = Verdict.STRICT if first_game else Verdict.LOOSE
        solver = HeuristicSolver(STRICT_SOLVER if first_game else LOOSE_SOLVER)
        result = solver.solve(outcome.state)
        click.echo(render_solver_result(result), err=as_json)
        label = "solvable" if result.is_solvable(verdict) else "not solvable"
        click.echo(f"Verdict ({verdict.name.lower()}): {label}", err=as_json)


if __name__ == "__main__":
    main()
