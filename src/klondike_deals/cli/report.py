"""CLI command for solvability statistics over many deals."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from klondike_deals.analysis.solvability_report import (
    SamplingConfig,
    compute_statistics,
    print_summary,
    save_json,
    sample_deals,
)
from klondike_deals.model.schema import GameMode

logger = logging.getLogger(__name__)


@click.command()
@click.option("-n", "--num-deals", type=int, default=20, help="Number of deals to sample")
@click.option(
    "-m", "--mode",
    type=click.Choice([mode.value for mode in GameMode]),
    default=GameMode.SOLVABLE.value,
)
@click.option("--first-game", is_flag=True, help="Sample the first-game pipeline")
@click.option("--seed", type=int, default=None, envvar="KLONDIKE_DEAL_SEED",
              help="Random seed for reproducibility")
@click.option("--max-attempts", type=int, default=None, help="Cap on attempts per strategy")
@click.option("-o", "--output", type=click.Path(), default=None, help="Write statistics JSON here")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(
    num_deals: int,
    mode: str,
    first_game: bool,
    seed: int | None,
    max_attempts: int | None,
    output: str | None,
    verbose: bool,
):
    """Sample generated deals and report how solvable they are."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    config = SamplingConfig(
        num_deals=num_deals,
        mode=GameMode(mode),
        first_game=first_game,
        seed=seed,
        max_attempts=max_attempts,
    )
    outcomes = sample_deals(config)
    stats = compute_statistics(outcomes, mode=config.mode, first_game=first_game)
    print_summary(stats)

    if output:
        save_json(stats, Path(output))
        click.echo(f"\nStatistics saved to {output}")


if __name__ == "__main__":
    main()
