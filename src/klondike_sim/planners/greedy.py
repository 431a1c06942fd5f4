"""A planner that plays greedy.

It scores Quit at -200, otherwise it would never turn the waste over.
"""

from dataclasses import dataclass
from typing import List
from klondike_sim.core.actions import Action, Quit, Take, Turnover
from klondike_sim.core.schema import Addr
from klondike_sim.planners.base import Planner
from klondike_sim.planners.candidates import foundation_builds, reveals, tableau_moves


FOUNDATION_PRIORITY = 10
REVEAL_PRIORITY = 5
TAKE_PRIORITY = 0
TURNOVER_PRIORITY = -100
QUIT_PRIORITY = -200


@dataclass(frozen=True)
class PrioritizedAction:
    """An action with the priority the greedy planner gave it."""

    priority: int
    action: Action


def move_priority(source: Addr, target: Addr) -> int:
    """Priority of a tableau move, mirroring the score it earns."""
    if source.is_foundation and target.is_depot:
        return -15
    if source.is_waste and target.is_foundation:
        return 10
    if source.is_waste and target.is_depot:
        return 5
    return 0


class GreedyPlanner(Planner):
    """Prefers whatever the scoring rules reward most right now."""

    @property
    def name(self) -> str:
        return "GreedyAi"

    def prioritized_actions(self) -> List[PrioritizedAction]:
        """All candidates with priorities, in generation order."""
        candidates: List[PrioritizedAction] = []

        for move in foundation_builds(self.view):
            candidates.append(PrioritizedAction(FOUNDATION_PRIORITY, move))

        for reveal in reveals(self.view):
            candidates.append(PrioritizedAction(REVEAL_PRIORITY, reveal))

        for move in tableau_moves(self.view):
            candidates.append(PrioritizedAction(move_priority(move.source, move.target), move))

        if self.view.talon_size != 0:
            candidates.append(PrioritizedAction(TAKE_PRIORITY, Take()))

        if self.view.waste and self.view.talon_size == 0:
            candidates.append(PrioritizedAction(TURNOVER_PRIORITY, Turnover()))

        candidates.append(PrioritizedAction(QUIT_PRIORITY, Quit()))
        return candidates

    def suggest_actions(self) -> List[Action]:
        """Candidates by descending priority; ties keep generation order."""
        if self.view.is_won():
            return [Quit()]
        ranked = sorted(self.prioritized_actions(), key=lambda p: p.priority, reverse=True)
        return [p.action for p in ranked]
