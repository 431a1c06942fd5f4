"""Klondike game engine.

The engine owns every pile and is the only authority on legality and
score. Planners never touch it directly: they read a SolitaireObserver
and hand back actions.

Invariant: between calls to act() the game is always valid, meaning
 - all 52 cards are present exactly once
 - talon cards are face down
 - face-up cards in a column alternate colors and decrease by one
 - foundations hold ascending runs of one suit starting at the ace
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Optional, Sequence

from klondike_sim.core.actions import Action, Move, Quit, Reveal, Take, Turnover
from klondike_sim.core.schema import DECK_SUITS, Addr, Rank, Suit
from klondike_sim.simulation.observer import SolitaireObserver
from klondike_sim.simulation.state import Card

logger = logging.getLogger(__name__)

NUM_FOUNDATIONS = 4
NUM_DEPOTS = 7
MAX_SEED = 2**64


class MoveError(Exception):
    """An action was rejected. The game state is unchanged."""


class IllegalMoveError(MoveError):
    """The action breaks a rule of the game."""

    def __init__(self, description: str) -> None:
        super().__init__(description)
        self.description = description


class NoCardToMoveError(MoveError):
    """The source pile holds no card to move."""

    def __init__(self) -> None:
        super().__init__("Found no card to move")


class UnspecifiedMoveError(MoveError):
    """Catch-all rejection."""

    def __init__(self) -> None:
        super().__init__("Unspecified move error")


class GameStatus(Enum):
    """Whether the game is running, and if not, how it ended."""

    RUNNING = "running"
    WON = "won"
    LOST = "lost"


def shuffled_deck(seed: int) -> list[Card]:
    """A 52-card deck, face down, shuffled deterministically from seed."""
    deck = [Card(suit=suit, rank=rank) for suit in DECK_SUITS for rank in Rank]
    rng = random.Random(seed)
    rng.shuffle(deck)
    return deck


class GameEngine:
    """Game state with methods to observe it and to act on it."""

    def __init__(
        self,
        talon: Sequence[Card] = (),
        waste: Sequence[Card] = (),
        columns: Optional[Sequence[Sequence[Card]]] = None,
        foundations: Optional[Sequence[Sequence[Card]]] = None,
        status: GameStatus = GameStatus.RUNNING,
        score: int = 0,
    ) -> None:
        """Build an engine from explicit piles.

        Use GameEngine.deal() for a real game; this constructor exists for
        setting up specific positions.
        """
        columns = columns if columns is not None else [[] for _ in range(NUM_DEPOTS)]
        foundations = (
            foundations if foundations is not None
            else [[] for _ in range(NUM_FOUNDATIONS)]
        )
        if len(columns) != NUM_DEPOTS:
            raise ValueError(f"Expected {NUM_DEPOTS} columns, got {len(columns)}")
        if len(foundations) != NUM_FOUNDATIONS:
            raise ValueError(f"Expected {NUM_FOUNDATIONS} foundations, got {len(foundations)}")
        if score < 0:
            raise ValueError("Score cannot be negative")

        self._talon: list[Card] = list(talon)
        self._waste: list[Card] = list(waste)
        self._columns: list[list[Card]] = [list(c) for c in columns]
        self._foundations: list[list[Card]] = [list(f) for f in foundations]
        self._status = status
        self._score = score

    @classmethod
    def deal(cls, seed: int) -> GameEngine:
        """Deal a new game.

        Column i (1-based) gets i cards, only the last face up. The rest
        of the deck becomes the talon.
        """
        if isinstance(seed, bool) or not isinstance(seed, int) or not 0 <= seed < MAX_SEED:
            raise ValueError(f"Seed must be an integer in [0, 2**64), got {seed!r}")

        pack = iter(shuffled_deck(seed))
        columns: list[list[Card]] = []
        for size in range(1, NUM_DEPOTS + 1):
            column = [next(pack) for _ in range(size)]
            column[-1] = column[-1].revealed()
            columns.append(column)

        logger.debug(f"Dealt game with seed {seed}")
        return cls(talon=list(pack), columns=columns)

    # Queries

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def talon_size(self) -> int:
        return len(self._talon)

    def score(self) -> int:
        return self._score

    def is_running(self) -> bool:
        """Are we still playing?"""
        return self._status == GameStatus.RUNNING

    def is_won(self) -> bool:
        return self._status == GameStatus.WON

    def talon(self) -> tuple[Card, ...]:
        return tuple(self._talon)

    def waste(self) -> tuple[Card, ...]:
        return tuple(self._waste)

    def columns(self) -> tuple[tuple[Card, ...], ...]:
        return tuple(tuple(c) for c in self._columns)

    def foundations(self) -> tuple[tuple[Card, ...], ...]:
        return tuple(tuple(f) for f in self._foundations)

    def all_cards(self) -> list[Card]:
        """Every card on the table, in no particular order."""
        cards = self._talon + self._waste
        for pile in self._columns + self._foundations:
            cards.extend(pile)
        return cards

    def observe(self) -> SolitaireObserver:
        """Snapshot of what a player is allowed to see."""
        return SolitaireObserver(
            talon_size=len(self._talon),
            waste=[c.identity() for c in self._waste],
            foundation_tops=[f[-1].identity() if f else None for f in self._foundations],
            depots=[[c.view() for c in column] for column in self._columns],
        )

    def clone(self) -> GameEngine:
        return GameEngine(
            talon=self._talon,
            waste=self._waste,
            columns=self._columns,
            foundations=self._foundations,
            status=self._status,
            score=self._score,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameEngine):
            return NotImplemented
        return (
            self._talon == other._talon
            and self._waste == other._waste
            and self._columns == other._columns
            and self._foundations == other._foundations
            and self._status == other._status
            and self._score == other._score
        )

    __hash__ = None  # type: ignore[assignment]

    # Acting

    def act(self, action: Action) -> Optional[tuple[Suit, Rank]]:
        """Validate and apply one action.

        Returns the card disclosed by Take and Reveal, None otherwise.
        Raises a MoveError subclass if the action is rejected, in which
        case neither the piles nor the score have changed.
        """
        if not self.is_running():
            raise IllegalMoveError(f"The game is over ({self._status.value})")

        if isinstance(action, Take):
            result: Optional[tuple[Suit, Rank]] = self._take()
        elif isinstance(action, Turnover):
            self._turnover()
            result = None
        elif isinstance(action, Reveal):
            result = self._reveal(action.addr)
        elif isinstance(action, Move):
            self._move_cards(action.source, action.target, action.count)
            result = None
        elif isinstance(action, Quit):
            self._status = GameStatus.LOST
            result = None
        else:
            raise IllegalMoveError(f"Unknown action {action!r}")

        self._score_action(action)
        logger.debug(f"Applied {action}, score {self._score}")
        return result

    def _score_action(self, action: Action) -> None:
        """Update the score after a successful action."""
        if isinstance(action, Move):
            source, target = action.source, action.target
            if source.is_waste and target.is_foundation:
                self._score += 10
            elif source.is_waste and target.is_depot:
                self._score += 5
            elif source.is_depot and target.is_foundation:
                self._score += 10
            elif source.is_foundation and target.is_depot:
                self._score = max(0, self._score - 15)
        elif isinstance(action, Reveal):
            self._score += 5
        elif isinstance(action, Turnover):
            self._score = max(0, self._score - 100)

    def _pile(self, addr: Addr) -> list[Card]:
        if addr.is_waste:
            return self._waste
        if addr.is_foundation:
            return self._foundations[addr.index]
        return self._columns[addr.index]

    def _take(self) -> tuple[Suit, Rank]:
        if not self._talon:
            raise UnspecifiedMoveError()
        card = self._talon.pop().revealed()
        self._waste.append(card)
        return card.identity()

    def _turnover(self) -> None:
        if self._talon or not self._waste:
            raise UnspecifiedMoveError()
        self._talon = [c.hidden() for c in reversed(self._waste)]
        self._waste = []

    def _reveal(self, addr: Addr) -> tuple[Suit, Rank]:
        if not addr.is_depot:
            raise IllegalMoveError("Cannot reveal cards in this pile")
        column = self._columns[addr.index]
        if not column:
            raise NoCardToMoveError()
        if column[-1].face_up:
            raise IllegalMoveError("Top card is already face up")
        column[-1] = column[-1].revealed()
        return column[-1].identity()

    def _move_cards(self, source: Addr, target: Addr, count: int) -> None:
        if count < 1:
            raise IllegalMoveError("Must move at least one card")
        if (source.is_waste or source.is_foundation) and count != 1:
            raise IllegalMoveError(f"Can only move one card from {source}")
        if source == target:
            raise IllegalMoveError("Cannot move a pile onto itself")
        if target.is_waste:
            raise IllegalMoveError("Cannot move cards to the waste")
        if target.is_foundation:
            if count != 1:
                raise IllegalMoveError("Can only move one card to a foundation")
            self._move_to_foundation(source, target)
        else:
            self._move_to_depot(source, target, count)

    def _move_to_foundation(self, source: Addr, target: Addr) -> None:
        from_pile = self._pile(source)
        to_pile = self._pile(target)
        if not from_pile:
            raise NoCardToMoveError()
        card = from_pile[-1]
        if not card.face_up:
            raise IllegalMoveError("Cannot move a face-down card")

        if not to_pile:
            if not card.rank.is_ace:
                raise IllegalMoveError("Cannot place non-ace on empty foundation")
        elif card.rank.is_ace:
            raise IllegalMoveError("Cannot place ace on non-empty foundation")
        else:
            top = to_pile[-1]
            if top.suit != card.suit or card.rank != top.rank + 1:
                raise IllegalMoveError(
                    "Card must be the same suit and one higher than the foundation top"
                )

        to_pile.append(from_pile.pop())
        if all(len(f) == len(Rank) for f in self._foundations):
            self._status = GameStatus.WON
            logger.info("All foundations complete, game won")

    def _move_to_depot(self, source: Addr, target: Addr, count: int) -> None:
        from_pile = self._pile(source)
        to_pile = self._pile(target)
        if not from_pile:
            raise NoCardToMoveError()
        if len(from_pile) < count:
            raise IllegalMoveError(f"Not enough cards in {source} to move {count}")

        split = len(from_pile) - count
        run = from_pile[split:]
        if not all(c.face_up for c in run):
            raise IllegalMoveError("Can only move face-up cards")

        base = run[0]
        if not to_pile:
            if not base.rank.is_king:
                raise IllegalMoveError("Only a king can be placed on an empty column")
        else:
            top = to_pile[-1]
            if not top.face_up:
                raise IllegalMoveError(f"Top card of {target} is face down")
            if base.color == top.color or base.rank != top.rank - 1:
                raise IllegalMoveError(
                    "Card must be the opposite color and one lower than the column top"
                )

        del from_pile[split:]
        to_pile.extend(run)
