"""Actions a player can submit to the game engine."""

from dataclasses import dataclass
from typing import Union
from klondike_sim.core.schema import Addr


@dataclass(frozen=True)
class Take:
    """Draw the top talon card onto the waste, face up."""

    def __str__(self) -> str:
        return "take"


@dataclass(frozen=True)
class Turnover:
    """Turn the waste over to form a new talon."""

    def __str__(self) -> str:
        return "turnover"


@dataclass(frozen=True)
class Reveal:
    """Flip the face-down top card of a depot."""

    addr: Addr

    def __str__(self) -> str:
        return f"reveal {self.addr}"


@dataclass(frozen=True)
class Move:
    """Move cards between piles.

    Only depot-to-depot moves may carry more than one card.
    """

    source: Addr
    target: Addr
    count: int = 1

    def __str__(self) -> str:
        return f"move {self.count} {self.source} -> {self.target}"


@dataclass(frozen=True)
class Quit:
    """Stop playing the game."""

    def __str__(self) -> str:
        return "quit"


Action = Union[Take, Turnover, Reveal, Move, Quit]
