"""Immutable card values."""

from dataclasses import dataclass, replace
from typing import Union
from klondike_sim.core.schema import Color, Rank, Suit


@dataclass(frozen=True)
class FaceUp:
    """A card whose identity is visible."""

    suit: Suit
    rank: Rank

    @property
    def face_up(self) -> bool:
        return True

    @property
    def color(self) -> Color:
        return self.suit.color

    def sort_key(self) -> tuple[int, str, int]:
        return (1, self.suit.value, int(self.rank))


@dataclass(frozen=True)
class FaceDown:
    """Placeholder for a card whose identity is hidden."""

    @property
    def face_up(self) -> bool:
        return False

    def sort_key(self) -> tuple[int, str, int]:
        return (0, "", 0)


CardView = Union[FaceUp, FaceDown]


@dataclass(frozen=True)
class Card:
    """Immutable playing card with its face state."""

    suit: Suit
    rank: Rank
    face_up: bool = False

    @property
    def color(self) -> Color:
        return self.suit.color

    def revealed(self) -> "Card":
        """Return this card turned face up."""
        return replace(self, face_up=True)

    def hidden(self) -> "Card":
        """Return this card turned face down."""
        return replace(self, face_up=False)

    def identity(self) -> tuple[Suit, Rank]:
        return (self.suit, self.rank)

    def view(self) -> CardView:
        """What an observer is allowed to see of this card."""
        if self.face_up:
            return FaceUp(self.suit, self.rank)
        return FaceDown()

    def __str__(self) -> str:
        if self.face_up:
            return f"{self.suit.value}{int(self.rank):02d}"
        return "##"
