"""Candidate move generation shared by the planners.

Candidates are generated from the observer view only, so they are
"legal-looking": the engine still has the final say.
"""

from typing import Callable, List, Optional
from klondike_sim.core.actions import Move, Reveal
from klondike_sim.core.schema import DEPOTS, DEPOTS_AND_WASTE, FOUNDATIONS, Addr
from klondike_sim.simulation.observer import SolitaireObserver
from klondike_sim.simulation.state import FaceUp


MoveFilter = Callable[[Addr, Addr], bool]


def foundation_builds(view: SolitaireObserver) -> List[Move]:
    """Single-card moves from the waste or a column onto a foundation."""
    moves: List[Move] = []
    for source in DEPOTS_AND_WASTE:
        card = view.card_at(source, 1)
        if not isinstance(card, FaceUp):
            continue
        for target in FOUNDATIONS:
            top = view.card_at(target, 1)
            if top is None:
                if card.rank.is_ace:
                    moves.append(Move(source, target, 1))
            elif isinstance(top, FaceUp):
                if card.suit == top.suit and card.rank == top.rank + 1:
                    moves.append(Move(source, target, 1))
    return moves


def reveals(view: SolitaireObserver) -> List[Reveal]:
    """Reveal every column whose top card is face down."""
    return [
        Reveal(DEPOTS[idx])
        for idx, depot in enumerate(view.depots)
        if depot and not depot[-1].face_up
    ]


def tableau_moves(view: SolitaireObserver, allow: Optional[MoveFilter] = None) -> List[Move]:
    """Face-up runs from the waste or a column onto another column.

    Args:
        view: Current view
        allow: Optional filter on (source, target); rejected pairs are skipped

    Returns:
        Moves ordered by source, then target, then run length
    """
    moves: List[Move] = []
    for source in DEPOTS_AND_WASTE:
        max_cards = view.n_takeable_cards(source)
        if max_cards == 0:
            continue
        for target in DEPOTS:
            if target == source:
                continue
            if allow is not None and not allow(source, target):
                continue
            dest = view.card_at(target, 1)
            # Shifting a whole column into an empty one changes nothing
            whole_column = source.is_depot and dest is None and max_cards == len(view.depots[source.index])
            for count in range(1, max_cards + 1):
                base = view.card_at(source, count)
                if not isinstance(base, FaceUp):
                    continue
                if dest is None:
                    if base.rank.is_king and not (whole_column and count == max_cards):
                        moves.append(Move(source, target, count))
                elif isinstance(dest, FaceUp):
                    if base.color != dest.color and base.rank == dest.rank - 1:
                        moves.append(Move(source, target, count))
    return moves
