"""CLI command for running planners over dealt games."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from klondike_sim.planners import PLANNERS, PlannerExhaustedError
from klondike_sim.report.display import BoardRenderer, format_summary
from klondike_sim.simulation.engine import GameEngine
from klondike_sim.simulation.runner import GameRecord, RunConfig, run_games, summarize

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration.

    Args:
        verbose: Enable verbose (DEBUG) logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )


def save_records(records: list[GameRecord], path: Path) -> None:
    """Write one JSON object per game."""
    with open(path, "w") as f:
        for record in records:
            f.write(json.dumps(record.to_dict()) + "\n")


@click.command()
@click.option(
    "-p", "--planner",
    type=click.Choice(sorted(PLANNERS) + ["all"]),
    default="all",
    help="Planner to run",
)
@click.option("-n", "--games", type=int, default=10, help="Number of games per planner")
@click.option("--start-seed", type=int, default=0, help="Seed of the first game")
@click.option("--max-moves", type=int, default=5000, help="Move limit before forced quit")
@click.option("--show-board", is_flag=True, help="Print each final board")
@click.option(
    "--results",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write per-game records as JSON lines",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(
    planner: str,
    games: int,
    start_seed: int,
    max_moves: int,
    show_board: bool,
    results: str | None,
    verbose: bool,
):
    """Deal games by increasing seeds and let planners play them out."""
    setup_logging(verbose)

    try:
        config = RunConfig(
            planners=sorted(PLANNERS) if planner == "all" else [planner],
            games=games,
            start_seed=start_seed,
            max_moves=max_moves,
        )
    except ValueError as e:
        raise click.BadParameter(str(e))

    renderer = BoardRenderer()

    def report(record: GameRecord, engine: GameEngine) -> None:
        outcome = "won" if record.won else "lost"
        click.echo(
            f"{record.planner} game {record.seed} {outcome} in {record.moves} moves (score {record.score})"
        )
        if show_board:
            click.echo(renderer.render_engine(engine))
            click.echo("")

    try:
        records = run_games(config, game_callback=report)
    except PlannerExhaustedError as e:
        logger.error(f"Aborting run: {e}")
        sys.exit(1)

    if records:
        click.echo("")
        click.echo(format_summary(summarize(records)))

    if results:
        save_records(records, Path(results))
        click.echo(f"\nResults saved to {results}")


if __name__ == "__main__":
    main()
