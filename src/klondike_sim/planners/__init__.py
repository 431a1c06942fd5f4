"""Rule-based planners that choose moves from an observer view."""

from klondike_sim.planners.base import Planner, PlannerExhaustedError
from klondike_sim.planners.greedy import GreedyPlanner
from klondike_sim.planners.simple import SimplePlanner
from klondike_sim.simulation.observer import SolitaireObserver

PLANNERS: dict[str, type[Planner]] = {
    "greedy": GreedyPlanner,
    "simple": SimplePlanner,
}


def create_planner(kind: str, view: SolitaireObserver) -> Planner:
    """Build a planner by registry name."""
    try:
        planner_cls = PLANNERS[kind]
    except KeyError:
        raise ValueError(
            f"Unknown planner {kind!r}, expected one of {sorted(PLANNERS)}"
        ) from None
    return planner_cls(view)


__all__ = [
    "Planner",
    "PlannerExhaustedError",
    "GreedyPlanner",
    "SimplePlanner",
    "PLANNERS",
    "create_planner",
]
