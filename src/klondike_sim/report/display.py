"""Terminal display for boards, views and run summaries."""

from __future__ import annotations

from typing import Optional, Sequence, Union

from klondike_sim.core.schema import Rank, Suit
from klondike_sim.simulation.engine import GameEngine
from klondike_sim.simulation.observer import SolitaireObserver
from klondike_sim.simulation.runner import PlannerSummary
from klondike_sim.simulation.state import Card, CardView, FaceUp


# Unicode card symbols
SUIT_SYMBOLS = {"H": "♥", "D": "♦", "C": "♣", "S": "♠"}
RANK_LABELS = {Rank.ACE: "A", Rank.JACK: "J", Rank.QUEEN: "Q", Rank.KING: "K"}
FACE_DOWN = "██"
EMPTY = "□"


def format_identity(suit: Suit, rank: Rank) -> str:
    label = RANK_LABELS.get(rank, str(int(rank)))
    return f"{label}{SUIT_SYMBOLS[suit.value]}"


def format_card(card: Union[Card, CardView, None]) -> str:
    """Format a card or card view with a unicode suit symbol."""
    if card is None:
        return EMPTY
    if not card.face_up:
        return FACE_DOWN
    return format_identity(card.suit, card.rank)  # type: ignore[union-attr]


def _format_top(top: Optional[tuple[Suit, Rank]]) -> str:
    return EMPTY if top is None else format_identity(*top)


class BoardRenderer:
    """Renders engine state or an observer view as text."""

    def render_engine(self, engine: GameEngine) -> str:
        """Render the full board, hidden cards shown face down."""
        lines = [
            f"Status: {engine.status.value}  Score: {engine.score()}",
            f"Talon: {engine.talon_size} cards",
            self._waste_line(len(engine.waste()), engine.waste()[-1] if engine.waste() else None),
            "Foundations: " + " ".join(
                format_card(f[-1]) if f else EMPTY for f in engine.foundations()
            ),
            "",
        ]
        for idx, column in enumerate(engine.columns()):
            lines.append(self._column_line(idx, column))
        return "\n".join(lines)

    def render_view(self, view: SolitaireObserver) -> str:
        """Render what a planner knows about the game."""
        top = FaceUp(*view.waste[-1]) if view.waste else None
        lines = [
            f"Talon: {view.talon_size} cards",
            self._waste_line(len(view.waste), top),
            "Foundations: " + " ".join(_format_top(t) for t in view.foundation_tops),
            "",
        ]
        for idx, column in enumerate(view.depots):
            lines.append(self._column_line(idx, column))
        return "\n".join(lines)

    def _waste_line(self, size: int, top: Union[Card, CardView, None]) -> str:
        if top is None:
            return "Waste: (empty)"
        return f"Waste: {size} cards, top {format_card(top)}"

    def _column_line(self, idx: int, column: Sequence[Union[Card, CardView]]) -> str:
        cards = " ".join(format_card(c) for c in column) if column else EMPTY
        return f"[{idx + 1}] {cards}"


def format_summary(summaries: Sequence[PlannerSummary]) -> str:
    """Fixed-width table of per-planner results."""
    header = f"{'Planner':<12}{'Games':>7}{'Wins':>6}{'Win %':>8}{'Avg score':>11}{'Best':>6}{'Avg moves':>11}"
    lines = [header, "-" * len(header)]
    for s in summaries:
        lines.append(
            f"{s.planner:<12}{s.games:>7}{s.wins:>6}{s.win_rate * 100:>7.1f}%"
            f"{s.mean_score:>11.1f}{s.best_score:>6}{s.mean_moves:>11.1f}"
        )
    return "\n".join(lines)
