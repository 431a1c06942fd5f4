"""Core card and pile enumerations."""

from __future__ import annotations

from enum import Enum, IntEnum


class Color(Enum):
    """Card colors."""

    RED = "red"
    BLACK = "black"


class Suit(Enum):
    """Playing card suits."""

    HEARTS = "H"
    DIAMONDS = "D"
    CLUBS = "C"
    SPADES = "S"

    @property
    def color(self) -> Color:
        if self in (Suit.HEARTS, Suit.DIAMONDS):
            return Color.RED
        return Color.BLACK


class Rank(IntEnum):
    """Playing card ranks, Ace low.

    Rank(14) and Rank(0) raise ValueError.
    """

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    @property
    def is_ace(self) -> bool:
        return self is Rank.ACE

    @property
    def is_king(self) -> bool:
        return self is Rank.KING


class Addr(Enum):
    """Addressable piles on the table.

    The talon is not addressable: it is only drawn from or rebuilt
    from the waste as a whole.
    """

    WASTE = "waste"
    FOUNDATION_1 = "foundation_1"
    FOUNDATION_2 = "foundation_2"
    FOUNDATION_3 = "foundation_3"
    FOUNDATION_4 = "foundation_4"
    DEPOT_1 = "depot_1"
    DEPOT_2 = "depot_2"
    DEPOT_3 = "depot_3"
    DEPOT_4 = "depot_4"
    DEPOT_5 = "depot_5"
    DEPOT_6 = "depot_6"
    DEPOT_7 = "depot_7"

    @property
    def is_waste(self) -> bool:
        return self is Addr.WASTE

    @property
    def is_foundation(self) -> bool:
        return self.value.startswith("foundation")

    @property
    def is_depot(self) -> bool:
        return self.value.startswith("depot")

    @property
    def index(self) -> int:
        """Position of this pile inside its own group."""
        if self.is_waste:
            return 0
        return int(self.value.rsplit("_", 1)[1]) - 1

    def __str__(self) -> str:
        return self.value


FOUNDATIONS: tuple[Addr, ...] = (
    Addr.FOUNDATION_1,
    Addr.FOUNDATION_2,
    Addr.FOUNDATION_3,
    Addr.FOUNDATION_4,
)

DEPOTS: tuple[Addr, ...] = (
    Addr.DEPOT_1,
    Addr.DEPOT_2,
    Addr.DEPOT_3,
    Addr.DEPOT_4,
    Addr.DEPOT_5,
    Addr.DEPOT_6,
    Addr.DEPOT_7,
)

DEPOTS_AND_WASTE: tuple[Addr, ...] = DEPOTS + (Addr.WASTE,)

# Deck order before shuffling
DECK_SUITS: tuple[Suit, ...] = (Suit.HEARTS, Suit.CLUBS, Suit.DIAMONDS, Suit.SPADES)
