"""Base class for rule-based planners."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

from klondike_sim.core.actions import Action, Turnover
from klondike_sim.core.schema import Rank, Suit
from klondike_sim.simulation.observer import SolitaireObserver

logger = logging.getLogger(__name__)


class PlannerExhaustedError(RuntimeError):
    """Every candidate action was already tried from the current view."""


class Planner(ABC):
    """A planner that picks one action at a time from its own view.

    Every (view, action) pair handed out is remembered and never handed
    out again, so the planner cannot loop forever on the same position.
    """

    def __init__(self, view: SolitaireObserver) -> None:
        self.view = view.copy()
        # Keyed by the canonical form of the view at the time
        self.seen_state_actions: set[tuple[tuple, Action]] = set()
        self.number_of_passes = 0

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name used in reports."""

    @abstractmethod
    def suggest_actions(self) -> list[Action]:
        """Candidate actions, most preferred first."""

    def make_move(self) -> Action:
        """Return the most preferred action not yet tried from this view."""
        state = self.view.canonical_key()
        for action in self.suggest_actions():
            key = (state, action)
            if key in self.seen_state_actions:
                continue
            self.seen_state_actions.add(key)
            if isinstance(action, Turnover):
                self.number_of_passes += 1
            logger.debug(f"{self.name} chose {action}")
            return action

        raise PlannerExhaustedError(f"{self.name} has no untried action left")

    def update(self, action: Action, result: Optional[tuple[Suit, Rank]]) -> None:
        """Advance the view with the result of an accepted action."""
        self.view.update(action, result)
