"""The partial-information view planners play from."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from klondike_sim.core.actions import Action, Move, Quit, Reveal, Take, Turnover
from klondike_sim.core.schema import Addr, Rank, Suit
from klondike_sim.simulation.state import CardView, FaceDown, FaceUp


@dataclass(eq=False)
class SolitaireObserver:
    """Known information about a game.

    Hidden cards show up as FaceDown and the talon only as a count.
    Equality and hashing ignore which physical column or foundation
    holds a given stack, but keep card order inside each column.
    """

    talon_size: int = 0
    waste: list[tuple[Suit, Rank]] = field(default_factory=list)
    foundation_tops: list[Optional[tuple[Suit, Rank]]] = field(
        default_factory=lambda: [None] * 4
    )
    depots: list[list[CardView]] = field(default_factory=lambda: [[] for _ in range(7)])

    def copy(self) -> SolitaireObserver:
        return SolitaireObserver(
            talon_size=self.talon_size,
            waste=list(self.waste),
            foundation_tops=list(self.foundation_tops),
            depots=[list(d) for d in self.depots],
        )

    def canonical_key(self) -> tuple:
        """Hashable form with columns and foundation tops sorted."""
        depots = sorted(tuple(c.sort_key() for c in depot) for depot in self.depots)
        tops = sorted(
            (0, "", 0) if top is None else (1, top[0].value, int(top[1]))
            for top in self.foundation_tops
        )
        waste = tuple((suit.value, int(rank)) for suit, rank in self.waste)
        return (self.talon_size, waste, tuple(tops), tuple(depots))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SolitaireObserver):
            return NotImplemented
        return self.canonical_key() == other.canonical_key()

    def __hash__(self) -> int:
        return hash(self.canonical_key())

    def is_won(self) -> bool:
        return all(top is not None and top[1] == Rank.KING for top in self.foundation_tops)

    def n_takeable_cards(self, addr: Addr) -> int:
        """How many face-up cards can be picked up from a pile."""
        if addr.is_waste:
            return 1 if self.waste else 0
        if addr.is_foundation:
            return 1 if self.foundation_tops[addr.index] is not None else 0

        count = 0
        for card in reversed(self.depots[addr.index]):
            if not card.face_up:
                break
            count += 1
        return count

    def card_at(self, addr: Addr, depth: int) -> Optional[CardView]:
        """Card at a pile, depth 1 being the top card.

        Waste and foundations only expose their top card.
        """
        if depth < 1:
            return None
        if addr.is_waste:
            if depth == 1 and self.waste:
                return FaceUp(*self.waste[-1])
            return None
        if addr.is_foundation:
            top = self.foundation_tops[addr.index]
            if depth == 1 and top is not None:
                return FaceUp(*top)
            return None

        pile = self.depots[addr.index]
        if depth <= len(pile):
            return pile[len(pile) - depth]
        return None

    def update(self, action: Action, result: Optional[tuple[Suit, Rank]]) -> None:
        """Advance the view by an action the engine accepted.

        Args:
            action: The action that was applied
            result: The card the engine disclosed, for Take and Reveal

        Raises:
            ValueError: If the action and result don't fit this view
        """
        if isinstance(action, (Move, Turnover, Quit)) and result is not None:
            raise ValueError(f"{action} does not disclose a card")

        if isinstance(action, Move):
            self._apply_move(action)
        elif isinstance(action, Take):
            if result is None:
                raise ValueError("Take must disclose the drawn card")
            if self.talon_size == 0:
                raise ValueError("Cannot take from an empty talon")
            self.waste.append(result)
            self.talon_size -= 1
        elif isinstance(action, Turnover):
            if self.talon_size != 0 or not self.waste:
                raise ValueError("Turnover needs an empty talon and a non-empty waste")
            self.talon_size = len(self.waste)
            self.waste.clear()
        elif isinstance(action, Reveal):
            if result is None:
                raise ValueError("Reveal must disclose the revealed card")
            if not action.addr.is_depot:
                raise ValueError(f"Cannot reveal in {action.addr}")
            depot = self.depots[action.addr.index]
            if not depot or depot[-1].face_up:
                raise ValueError(f"No face-down card to reveal in {action.addr}")
            depot[-1] = FaceUp(*result)
        elif isinstance(action, Quit):
            pass
        else:
            raise ValueError(f"Unknown action {action!r}")

    def _apply_move(self, action: Move) -> None:
        source, target, count = action.source, action.target, action.count

        if source.is_depot and target.is_depot:
            from_depot = self.depots[source.index]
            if count > len(from_depot):
                raise ValueError(f"Cannot move {count} cards from {source}")
            split = len(from_depot) - count
            self.depots[target.index].extend(from_depot[split:])
            del from_depot[split:]
        elif source.is_depot and target.is_foundation and count == 1:
            if not self.depots[source.index]:
                raise ValueError(f"No card in {source}")
            card = self.depots[source.index].pop()
            if not isinstance(card, FaceUp):
                raise ValueError("Only face-up cards can go to a foundation")
            self.foundation_tops[target.index] = (card.suit, card.rank)
        elif source.is_foundation and target.is_depot and count == 1:
            top = self.foundation_tops[source.index]
            if top is None:
                raise ValueError(f"No card in {source}")
            suit, rank = top
            self.foundation_tops[source.index] = None if rank.is_ace else (suit, Rank(rank - 1))
            self.depots[target.index].append(FaceUp(suit, rank))
        elif source.is_waste and target.is_depot and count == 1:
            if not self.waste:
                raise ValueError("No card in the waste")
            self.depots[target.index].append(FaceUp(*self.waste.pop()))
        elif source.is_waste and target.is_foundation and count == 1:
            if not self.waste:
                raise ValueError("No card in the waste")
            self.foundation_tops[target.index] = self.waste.pop()
        elif source.is_foundation and target.is_foundation and count == 1:
            top = self.foundation_tops[source.index]
            if top is None:
                raise ValueError(f"No card in {source}")
            suit, rank = top
            self.foundation_tops[source.index] = None if rank.is_ace else (suit, Rank(rank - 1))
            self.foundation_tops[target.index] = top
        else:
            raise ValueError(f"Illegal move {action}")
