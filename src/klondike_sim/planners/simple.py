"""A simple planner following a fixed order of common solitaire advice."""

from typing import List
from klondike_sim.core.actions import Action, Quit, Take, Turnover
from klondike_sim.core.schema import Addr, Rank
from klondike_sim.planners.base import Planner
from klondike_sim.planners.candidates import foundation_builds, reveals, tableau_moves


# Waste cards below this rank stay off the columns until the first pass is done
LOW_CARD_LIMIT = Rank.FIVE


class SimplePlanner(Planner):
    """Foundations first, then reveals, then column building, then the talon."""

    @property
    def name(self) -> str:
        return "SimpleAi"

    def _allow_tableau_move(self, source: Addr, target: Addr) -> bool:
        if not (source.is_waste and target.is_depot and self.view.waste):
            return True
        _, rank = self.view.waste[-1]
        # A 2 in a column can only ever block other cards
        if rank == Rank.TWO:
            return False
        if rank < LOW_CARD_LIMIT and self.number_of_passes == 0:
            return False
        return True

    def suggest_actions(self) -> List[Action]:
        if self.view.is_won():
            return [Quit()]

        actions: List[Action] = []
        actions.extend(foundation_builds(self.view))
        actions.extend(reveals(self.view))
        actions.extend(tableau_moves(self.view, allow=self._allow_tableau_move))

        if self.view.talon_size != 0:
            actions.append(Take())

        if self.view.waste and self.view.talon_size == 0:
            actions.append(Turnover())

        actions.append(Quit())
        return actions
