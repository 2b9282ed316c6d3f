import random

import pytest

from minichess.game.board import BoardState, Move
from minichess.game.puzzle import (
    GOAL_SQUARES,
    QUEEN_START_SQUARES,
    GoalTracker,
    make_starting_position,
    validate_move,
)


def board_with(*records):
    return BoardState(
        [{"type": t, "color": c, "coordinates": list(sq)} for t, c, sq in records],
        board_size=4,
    )


class TestStartingPosition:
    @pytest.mark.parametrize("seed", [0, 1, 7, 42])
    def test_layout(self, seed):
        position = make_starting_position(random.Random(seed))
        queens = [p for p in position if p.type == "q"]

        assert len(position) == 15
        assert len(queens) == 1
        assert queens[0].coordinates in QUEEN_START_SQUARES
        assert len({p.coordinates for p in position}) == 15
        assert sum(1 for p in position if p.color == "b") == 7
        assert sum(1 for p in position if p.color == "w") == 8
        BoardState(position, board_size=4)

    def test_seed_is_reproducible(self):
        assert make_starting_position(random.Random(5)) == make_starting_position(random.Random(5))


class TestValidateMove:
    def test_step_patterns(self):
        board = board_with(
            ("r", "w", (0, 0)),
            ("b", "w", (3, 0)),
            ("n", "b", (3, 3)),
            ("k", "b", (0, 3)),
            ("q", "w", (1, 1)),
        )
        view = board.view()

        assert validate_move(Move((0, 0), (0, 1)), view)
        assert not validate_move(Move((0, 0), (0, 2)), view)
        assert validate_move(Move((3, 0), (2, 1)), view)
        assert not validate_move(Move((3, 0), (2, 0)), view)
        assert validate_move(Move((3, 3), (1, 2)), view)
        assert not validate_move(Move((3, 3), (2, 2)), view)
        assert validate_move(Move((0, 3), (1, 2)), view)
        assert validate_move(Move((1, 1), (2, 2)), view)
        assert not validate_move(Move((1, 1), (3, 1)), view)

    def test_cannot_land_on_occupied_square(self):
        board = board_with(("q", "w", (1, 1)), ("n", "b", (0, 0)))
        assert not validate_move(Move((1, 1), (0, 0)), board.view())

    def test_empty_start_and_pawns_are_rejected(self):
        board = board_with(("p", "w", (1, 1)))
        assert not validate_move(Move((2, 2), (2, 3)), board.view())
        assert not validate_move(Move((1, 1), (0, 1)), board.view())


class TestGoalTracker:
    def test_reports_goals_and_wins_once(self):
        board = board_with(("q", "w", (1, 1)), ("n", "b", (2, 2)))
        goals, wins = [], []
        tracker = GoalTracker(board.view(), on_goal=goals.append, on_win=lambda: wins.append(True))

        path = [(0, 0), (0, 1), (0, 2), (0, 3), (1, 3), (2, 3), (3, 3), (3, 2), (3, 1), (3, 0), (2, 0), (1, 0), (0, 0)]
        current = (1, 1)
        for square in path:
            move = Move(current, square)
            board.apply_move(move)
            tracker(move)
            current = square

        assert goals == [(0, 0), (0, 3), (3, 3), (3, 0), (0, 0)]
        assert tracker.solved
        assert wins == [True]
        assert tracker.reached == set(GOAL_SQUARES)

    def test_ignores_other_pieces_on_goals(self):
        board = board_with(("q", "w", (1, 1)), ("n", "b", (2, 2)))
        goals = []
        tracker = GoalTracker(board.view(), on_goal=goals.append)

        move = Move((2, 2), (3, 3))
        board.apply_move(move)
        tracker(move)

        assert goals == []
        assert not tracker.solved
