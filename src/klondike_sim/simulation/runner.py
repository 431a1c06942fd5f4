"""Drives planners through dealt games and aggregates the outcomes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from klondike_sim.core.actions import Quit
from klondike_sim.planners import create_planner
from klondike_sim.simulation.engine import MAX_SEED, GameEngine, MoveError

logger = logging.getLogger(__name__)


@dataclass
class RunConfig:
    """Configuration for a batch of games."""

    planners: List[str] = field(default_factory=lambda: ["greedy", "simple"])
    games: int = 10
    start_seed: int = 0
    max_moves: int = 5000  # Forced quit after this many accepted actions

    def __post_init__(self):
        """Validate ranges."""
        if self.games < 0:
            raise ValueError("games cannot be negative")
        if self.start_seed < 0:
            raise ValueError("start_seed cannot be negative")
        if self.start_seed + self.games > MAX_SEED:
            raise ValueError("Seeds must stay below 2**64")
        if self.max_moves < 1:
            raise ValueError("max_moves must be at least 1")


@dataclass(frozen=True)
class GameRecord:
    """Outcome of one planner playing one dealt game."""

    planner: str
    seed: int
    score: int
    won: bool
    moves: int
    rejected: int = 0

    def to_dict(self) -> dict:
        return {
            "planner": self.planner,
            "seed": self.seed,
            "score": self.score,
            "won": self.won,
            "moves": self.moves,
            "rejected": self.rejected,
        }


@dataclass(frozen=True)
class PlannerSummary:
    """Aggregated results for one planner."""

    planner: str
    games: int
    wins: int
    mean_score: float
    best_score: int
    mean_moves: float

    @property
    def win_rate(self) -> float:
        return self.wins / self.games if self.games else 0.0


def play_game(
    kind: str,
    seed: int,
    max_moves: int = 5000,
    engine: Optional[GameEngine] = None,
) -> GameRecord:
    """Play one game to completion with the named planner.

    Args:
        kind: Planner registry name
        seed: Deal seed
        max_moves: Accepted actions allowed before the planner is made to quit
        engine: Play this position instead of dealing from seed

    Returns:
        GameRecord for the finished game

    Raises:
        PlannerExhaustedError: If the planner runs out of untried actions
    """
    if engine is None:
        engine = GameEngine.deal(seed)
    planner = create_planner(kind, engine.observe())

    moves = 0
    rejected = 0
    while engine.is_running():
        if moves >= max_moves:
            logger.warning(f"{planner.name} seed {seed}: move limit {max_moves} reached, quitting")
            engine.act(Quit())
            moves += 1
            break

        action = planner.make_move()
        try:
            result = engine.act(action)
        except MoveError as e:
            # The planner remembers this attempt and will offer something else
            rejected += 1
            logger.debug(f"{planner.name} seed {seed}: {action} rejected ({e})")
            continue

        planner.update(action, result)
        moves += 1

    record = GameRecord(
        planner=planner.name,
        seed=seed,
        score=engine.score(),
        won=engine.is_won(),
        moves=moves,
        rejected=rejected,
    )
    outcome = "won" if record.won else "lost"
    logger.debug(f"{record.planner} game {seed} {outcome} in {moves} moves, score {record.score}")
    return record


def run_games(
    config: RunConfig,
    game_callback: Optional[Callable[[GameRecord, GameEngine], None]] = None,
) -> List[GameRecord]:
    """Play config.games consecutive seeds with every configured planner.

    Args:
        config: Batch configuration
        game_callback: Called after each game with its record and final engine

    Returns:
        One GameRecord per game, planners in configured order
    """
    records: List[GameRecord] = []
    for kind in config.planners:
        for seed in range(config.start_seed, config.start_seed + config.games):
            engine = GameEngine.deal(seed)
            record = play_game(kind, seed, max_moves=config.max_moves, engine=engine)
            records.append(record)
            if game_callback:
                game_callback(record, engine)
    logger.info(f"Played {len(records)} games with {len(config.planners)} planner(s)")
    return records


def summarize(records: List[GameRecord]) -> List[PlannerSummary]:
    """Per-planner statistics, in order of first appearance."""
    by_planner: dict[str, List[GameRecord]] = {}
    for record in records:
        by_planner.setdefault(record.planner, []).append(record)

    summaries = []
    for planner, games in by_planner.items():
        summaries.append(PlannerSummary(
            planner=planner,
            games=len(games),
            wins=sum(1 for g in games if g.won),
            mean_score=sum(g.score for g in games) / len(games),
            best_score=max(g.score for g in games),
            mean_moves=sum(g.moves for g in games) / len(games),
        ))
    return summaries
