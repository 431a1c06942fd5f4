"""Tests for the Klondike game engine."""

import pytest
from klondike_sim.core.actions import Move, Quit, Reveal, Take, Turnover
from klondike_sim.core.schema import Addr, Rank, Suit
from klondike_sim.simulation.engine import (
    GameEngine,
    GameStatus,
    IllegalMoveError,
    MoveError,
    NoCardToMoveError,
    UnspecifiedMoveError,
)
from klondike_sim.simulation.state import FaceDown, FaceUp, Card


def up(suit: Suit, rank: Rank) -> Card:
    return Card(suit, rank, face_up=True)


def down(suit: Suit, rank: Rank) -> Card:
    return Card(suit, rank)


def columns(*piles: list) -> list:
    """Seven columns, the given ones first."""
    return list(piles) + [[] for _ in range(7 - len(piles))]


def foundations_up_to(rank: Rank) -> list:
    """Four foundations, one per suit, complete up to rank."""
    return [
        [up(suit, r) for r in Rank if r <= rank]
        for suit in (Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES)
    ]


class TestDeal:
    """Tests for dealing a new game."""

    def test_same_seed_same_deal(self):
        """Dealing twice with one seed gives identical games."""
        assert GameEngine.deal(42) == GameEngine.deal(42)

    def test_different_seeds_differ(self):
        """Different seeds shuffle differently."""
        assert GameEngine.deal(0) != GameEngine.deal(1)

    def test_layout(self):
        """Column i holds i cards with only the last face up."""
        engine = GameEngine.deal(7)

        for size, column in enumerate(engine.columns(), start=1):
            assert len(column) == size
            assert column[-1].face_up
            assert not any(c.face_up for c in column[:-1])

        assert engine.talon_size == 52 - 28
        assert not any(c.face_up for c in engine.talon())
        assert engine.waste() == ()
        assert all(f == () for f in engine.foundations())
        assert engine.score() == 0
        assert engine.is_running()
        assert not engine.is_won()

    def test_full_deck(self):
        """All 52 distinct cards are dealt."""
        cards = GameEngine.deal(3).all_cards()

        assert len(cards) == 52
        assert len({c.identity() for c in cards}) == 52

    @pytest.mark.parametrize("seed", [-1, 2**64, "7", 1.5, True])
    def test_invalid_seed(self, seed):
        """Seeds must be unsigned 64-bit integers."""
        with pytest.raises(ValueError):
            GameEngine.deal(seed)

    def test_largest_seed(self):
        """The top of the seed range is accepted."""
        assert GameEngine.deal(2**64 - 1).is_running()


class TestTalon:
    """Tests for Take and Turnover."""

    def test_take_moves_top_card_face_up(self):
        """Take draws the last talon card onto the waste."""
        engine = GameEngine(talon=[down(Suit.CLUBS, Rank.TWO), down(Suit.HEARTS, Rank.NINE)])

        result = engine.act(Take())

        assert result == (Suit.HEARTS, Rank.NINE)
        assert engine.waste() == (up(Suit.HEARTS, Rank.NINE),)
        assert engine.talon() == (down(Suit.CLUBS, Rank.TWO),)
        assert engine.score() == 0

    def test_take_from_empty_talon(self):
        """Drawing from an empty talon is rejected."""
        engine = GameEngine(waste=[up(Suit.CLUBS, Rank.TWO)])

        with pytest.raises(UnspecifiedMoveError):
            engine.act(Take())

    def test_turnover_reverses_waste(self):
        """Turnover rebuilds the talon face down so the first drawn card comes back first."""
        engine = GameEngine(talon=[
            down(Suit.CLUBS, Rank.TWO),
            down(Suit.HEARTS, Rank.NINE),
            down(Suit.SPADES, Rank.FOUR),
        ])
        drawn = [engine.act(Take()) for _ in range(3)]

        assert engine.act(Turnover()) is None
        assert engine.waste() == ()
        assert engine.talon_size == 3
        assert not any(c.face_up for c in engine.talon())
        assert [engine.act(Take()) for _ in range(3)] == drawn

    def test_turnover_requires_empty_talon(self):
        engine = GameEngine(
            talon=[down(Suit.CLUBS, Rank.TWO)],
            waste=[up(Suit.HEARTS, Rank.NINE)],
        )

        with pytest.raises(UnspecifiedMoveError):
            engine.act(Turnover())

    def test_turnover_requires_waste(self):
        with pytest.raises(UnspecifiedMoveError):
            GameEngine().act(Turnover())

    def test_turnover_score_floors_at_zero(self):
        """Turning over below 100 points never goes negative."""
        engine = GameEngine(waste=[up(Suit.SPADES, Rank.TWO)])

        engine.act(Turnover())

        assert engine.score() == 0

    def test_turnover_costs_100(self):
        engine = GameEngine(waste=[up(Suit.SPADES, Rank.TWO)], score=130)

        engine.act(Turnover())

        assert engine.score() == 30


class TestReveal:
    """Tests for Reveal."""

    def test_reveal_flips_top_card(self):
        engine = GameEngine(columns=columns([down(Suit.CLUBS, Rank.FIVE)]))

        result = engine.act(Reveal(Addr.DEPOT_1))

        assert result == (Suit.CLUBS, Rank.FIVE)
        assert engine.columns()[0] == (up(Suit.CLUBS, Rank.FIVE),)
        assert engine.score() == 5

    @pytest.mark.parametrize("addr", [Addr.WASTE, Addr.FOUNDATION_1])
    def test_reveal_outside_depots(self, addr):
        """Only columns hold cards to reveal."""
        engine = GameEngine(waste=[up(Suit.CLUBS, Rank.FIVE)])

        with pytest.raises(IllegalMoveError):
            engine.act(Reveal(addr))

    def test_reveal_empty_column(self):
        with pytest.raises(NoCardToMoveError):
            GameEngine().act(Reveal(Addr.DEPOT_4))

    def test_reveal_face_up_card(self):
        engine = GameEngine(columns=columns([up(Suit.CLUBS, Rank.FIVE)]))

        with pytest.raises(IllegalMoveError):
            engine.act(Reveal(Addr.DEPOT_1))


class TestMoveToFoundation:
    """Tests for building on foundations."""

    def test_ace_on_empty_foundation(self):
        engine = GameEngine(waste=[up(Suit.HEARTS, Rank.ACE)])

        assert engine.act(Move(Addr.WASTE, Addr.FOUNDATION_1)) is None
        assert engine.foundations()[0] == (up(Suit.HEARTS, Rank.ACE),)
        assert engine.score() == 10

    def test_non_ace_on_empty_foundation(self):
        engine = GameEngine(waste=[up(Suit.HEARTS, Rank.TWO)])

        with pytest.raises(IllegalMoveError):
            engine.act(Move(Addr.WASTE, Addr.FOUNDATION_1))

    def test_ace_on_non_empty_foundation(self):
        engine = GameEngine(
            waste=[up(Suit.HEARTS, Rank.ACE)],
            foundations=[[up(Suit.SPADES, Rank.ACE)], [], [], []],
        )

        with pytest.raises(IllegalMoveError):
            engine.act(Move(Addr.WASTE, Addr.FOUNDATION_1))

    def test_successor_of_same_suit(self):
        engine = GameEngine(
            columns=columns([up(Suit.SPADES, Rank.TWO)]),
            foundations=[[up(Suit.SPADES, Rank.ACE)], [], [], []],
        )

        engine.act(Move(Addr.DEPOT_1, Addr.FOUNDATION_1))

        assert engine.foundations()[0][-1] == up(Suit.SPADES, Rank.TWO)
        assert engine.columns()[0] == ()
        assert engine.score() == 10

    @pytest.mark.parametrize("card", [
        up(Suit.CLUBS, Rank.TWO),     # wrong suit
        up(Suit.SPADES, Rank.THREE),  # skips a rank
    ])
    def test_non_successor_rejected(self, card):
        engine = GameEngine(
            waste=[card],
            foundations=[[up(Suit.SPADES, Rank.ACE)], [], [], []],
        )

        with pytest.raises(IllegalMoveError):
            engine.act(Move(Addr.WASTE, Addr.FOUNDATION_1))

    def test_empty_source(self):
        with pytest.raises(NoCardToMoveError):
            GameEngine().act(Move(Addr.WASTE, Addr.FOUNDATION_1))

    def test_face_down_card_cannot_move(self):
        engine = GameEngine(columns=columns([down(Suit.HEARTS, Rank.ACE)]))

        with pytest.raises(IllegalMoveError):
            engine.act(Move(Addr.DEPOT_1, Addr.FOUNDATION_1))

    def test_only_one_card_to_foundation(self):
        engine = GameEngine(columns=columns([
            up(Suit.SPADES, Rank.TWO), up(Suit.HEARTS, Rank.ACE),
        ]))

        with pytest.raises(IllegalMoveError):
            engine.act(Move(Addr.DEPOT_1, Addr.FOUNDATION_1, 2))


class TestMoveToDepot:
    """Tests for building in the columns."""

    def test_king_onto_empty_column(self):
        engine = GameEngine(waste=[up(Suit.HEARTS, Rank.KING)])

        engine.act(Move(Addr.WASTE, Addr.DEPOT_3))

        assert engine.columns()[2] == (up(Suit.HEARTS, Rank.KING),)
        assert engine.score() == 5

    def test_non_king_onto_empty_column(self):
        engine = GameEngine(waste=[up(Suit.HEARTS, Rank.QUEEN)])

        with pytest.raises(IllegalMoveError):
            engine.act(Move(Addr.WASTE, Addr.DEPOT_3))

    def test_queen_of_clubs_onto_king_of_hearts(self):
        engine = GameEngine(columns=columns(
            [up(Suit.HEARTS, Rank.KING)],
            [up(Suit.CLUBS, Rank.QUEEN)],
        ))

        engine.act(Move(Addr.DEPOT_2, Addr.DEPOT_1))

        assert engine.columns()[0] == (up(Suit.HEARTS, Rank.KING), up(Suit.CLUBS, Rank.QUEEN))
        assert engine.columns()[1] == ()
        assert engine.score() == 0

    def test_same_color_rejected(self):
        engine = GameEngine(columns=columns(
            [up(Suit.SPADES, Rank.KING)],
            [up(Suit.CLUBS, Rank.QUEEN)],
        ))

        with pytest.raises(IllegalMoveError):
            engine.act(Move(Addr.DEPOT_2, Addr.DEPOT_1))

    def test_wrong_rank_rejected(self):
        engine = GameEngine(columns=columns(
            [up(Suit.HEARTS, Rank.KING)],
            [up(Suit.CLUBS, Rank.JACK)],
        ))

        with pytest.raises(IllegalMoveError):
            engine.act(Move(Addr.DEPOT_2, Addr.DEPOT_1))

    def test_move_run(self):
        """Several face-up cards move together, keeping their order."""
        engine = GameEngine(columns=columns(
            [up(Suit.SPADES, Rank.KING)],
            [down(Suit.DIAMONDS, Rank.FIVE), up(Suit.HEARTS, Rank.QUEEN), up(Suit.CLUBS, Rank.JACK)],
        ))

        engine.act(Move(Addr.DEPOT_2, Addr.DEPOT_1, 2))

        assert engine.columns()[0] == (
            up(Suit.SPADES, Rank.KING), up(Suit.HEARTS, Rank.QUEEN), up(Suit.CLUBS, Rank.JACK),
        )
        assert engine.columns()[1] == (down(Suit.DIAMONDS, Rank.FIVE),)

    def test_run_with_face_down_card_rejected(self):
        engine = GameEngine(columns=columns(
            [],
            [down(Suit.DIAMONDS, Rank.KING), up(Suit.CLUBS, Rank.QUEEN)],
        ))

        with pytest.raises(IllegalMoveError):
            engine.act(Move(Addr.DEPOT_2, Addr.DEPOT_1, 2))

    def test_not_enough_cards(self):
        engine = GameEngine(columns=columns([], [up(Suit.CLUBS, Rank.KING)]))

        with pytest.raises(IllegalMoveError):
            engine.act(Move(Addr.DEPOT_2, Addr.DEPOT_1, 2))

    def test_face_down_destination_rejected(self):
        engine = GameEngine(columns=columns(
            [down(Suit.HEARTS, Rank.KING)],
            [up(Suit.CLUBS, Rank.QUEEN)],
        ))

        with pytest.raises(IllegalMoveError):
            engine.act(Move(Addr.DEPOT_2, Addr.DEPOT_1))

    def test_foundation_to_depot_penalty(self):
        engine = GameEngine(
            columns=columns([up(Suit.SPADES, Rank.EIGHT)]),
            foundations=[[up(Suit.HEARTS, r) for r in Rank if r <= Rank.SEVEN], [], [], []],
            score=20,
        )

        engine.act(Move(Addr.FOUNDATION_1, Addr.DEPOT_1))

        assert engine.score() == 5
        assert engine.foundations()[0][-1] == up(Suit.HEARTS, Rank.SIX)

    def test_foundation_to_depot_floors_at_zero(self):
        engine = GameEngine(
            columns=columns([up(Suit.SPADES, Rank.TWO)]),
            foundations=[[up(Suit.HEARTS, Rank.ACE)], [], [], []],
            score=10,
        )

        engine.act(Move(Addr.FOUNDATION_1, Addr.DEPOT_1))

        assert engine.score() == 0


class TestMoveRules:
    """Tests for rules common to every move."""

    def test_can_only_move_one_from_waste(self):
        engine = GameEngine.deal(0)
        before = engine.clone()

        with pytest.raises(IllegalMoveError):
            engine.act(Move(Addr.WASTE, Addr.DEPOT_3, 2))
        assert engine == before

    def test_can_only_move_one_from_foundation(self):
        engine = GameEngine(
            columns=columns([up(Suit.SPADES, Rank.THREE)]),
            foundations=[[up(Suit.HEARTS, Rank.ACE), up(Suit.HEARTS, Rank.TWO)], [], [], []],
        )

        with pytest.raises(IllegalMoveError):
            engine.act(Move(Addr.FOUNDATION_1, Addr.DEPOT_1, 2))

    def test_cannot_move_to_waste(self):
        engine = GameEngine(columns=columns([up(Suit.SPADES, Rank.THREE)]))

        with pytest.raises(IllegalMoveError):
            engine.act(Move(Addr.DEPOT_1, Addr.WASTE))

    def test_cannot_move_zero_cards(self):
        engine = GameEngine(columns=columns([], [up(Suit.SPADES, Rank.KING)]))

        with pytest.raises(IllegalMoveError):
            engine.act(Move(Addr.DEPOT_2, Addr.DEPOT_1, 0))

    def test_cannot_move_onto_itself(self):
        engine = GameEngine(columns=columns([up(Suit.SPADES, Rank.KING)]))

        with pytest.raises(IllegalMoveError):
            engine.act(Move(Addr.DEPOT_1, Addr.DEPOT_1))

    def test_failed_act_leaves_state_unchanged(self):
        engine = GameEngine(
            waste=[up(Suit.HEARTS, Rank.QUEEN)],
            columns=columns([up(Suit.HEARTS, Rank.KING)]),
            score=40,
        )
        before = engine.clone()

        with pytest.raises(MoveError):
            engine.act(Move(Addr.WASTE, Addr.DEPOT_1))

        assert engine == before
        assert engine.score() == 40


class TestScoring:
    """Tests for score bookkeeping."""

    def test_score_when_moving_cards(self):
        """Waste to foundation, reveal, depot to foundation scores 10 + 5 + 10."""
        engine = GameEngine(
            waste=[up(Suit.HEARTS, Rank.ACE)],
            columns=columns([down(Suit.SPADES, Rank.TWO)]),
            foundations=[[], [up(Suit.SPADES, Rank.ACE)], [], []],
        )

        engine.act(Move(Addr.WASTE, Addr.FOUNDATION_1))
        engine.act(Reveal(Addr.DEPOT_1))
        engine.act(Move(Addr.DEPOT_1, Addr.FOUNDATION_2))

        assert engine.score() == 25

    def test_take_and_quit_score_nothing(self):
        engine = GameEngine(talon=[down(Suit.SPADES, Rank.TWO)], score=7)

        engine.act(Take())
        engine.act(Quit())

        assert engine.score() == 7


class TestStatus:
    """Tests for the game state machine."""

    def test_win_on_last_king(self):
        """The game is won when the fourth foundation completes."""
        kings = [[up(s, Rank.KING)] for s in (Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES)]
        engine = GameEngine(columns=columns(*kings), foundations=foundations_up_to(Rank.QUEEN))

        for i in range(3):
            engine.act(Move(Addr(f"depot_{i + 1}"), Addr(f"foundation_{i + 1}")))
            assert not engine.is_won()
            assert engine.is_running()

        engine.act(Move(Addr.DEPOT_4, Addr.FOUNDATION_4))

        assert engine.is_won()
        assert not engine.is_running()
        assert engine.status == GameStatus.WON
        assert engine.score() == 40

    def test_quit_loses(self):
        engine = GameEngine.deal(5)

        assert engine.act(Quit()) is None

        assert engine.status == GameStatus.LOST
        assert not engine.is_running()
        assert not engine.is_won()

    def test_no_actions_after_game_over(self):
        engine = GameEngine.deal(5)
        engine.act(Quit())

        with pytest.raises(IllegalMoveError):
            engine.act(Take())

    def test_constructor_validation(self):
        with pytest.raises(ValueError):
            GameEngine(columns=[[]])
        with pytest.raises(ValueError):
            GameEngine(foundations=[[], []])
        with pytest.raises(ValueError):
            GameEngine(score=-1)


class TestObserve:
    """Tests for the observer snapshot."""

    def test_observe_hides_face_down_cards(self):
        engine = GameEngine.deal(11)
        view = engine.observe()

        assert view.talon_size == 24
        assert view.waste == []
        assert view.foundation_tops == [None, None, None, None]
        for size, (depot, column) in enumerate(zip(view.depots, engine.columns()), start=1):
            assert len(depot) == size
            assert all(c == FaceDown() for c in depot[:-1])
            assert depot[-1] == FaceUp(column[-1].suit, column[-1].rank)

    def test_observe_is_a_snapshot(self):
        engine = GameEngine(talon=[down(Suit.SPADES, Rank.TWO)])
        view = engine.observe()

        engine.act(Take())

        assert view.talon_size == 1
        assert view.waste == []
