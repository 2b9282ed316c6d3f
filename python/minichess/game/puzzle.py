"""Corner-queen puzzle built on top of :mod:`minichess.game.board`.

A white queen starts somewhere off the corners of a crowded 4x4 board and has
to visit all four corners. Every piece moves a single step of its own kind
and may only land on empty squares.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Dict, FrozenSet, List, Optional, Set, Tuple

from ..geometry import Coordinates, all_squares, as_coordinates, same_square
from .board import BoardView, Move, Piece, PlacedPiece


LOG = logging.getLogger("minichess.puzzle")

PUZZLE_SIZE = 4

GOAL_SQUARES: Tuple[Coordinates, ...] = ((0, 0), (0, 3), (3, 0), (3, 3))

QUEEN_START_SQUARES: Tuple[Coordinates, ...] = (
    (0, 1), (0, 2),
    (1, 0), (1, 1), (1, 2), (1, 3),
    (2, 0), (2, 1), (2, 2), (2, 3),
    (3, 1), (3, 2),
)

_ORTHOGONAL = frozenset({(0, 1), (1, 0), (0, -1), (-1, 0)})
_DIAGONAL = frozenset({(1, 1), (1, -1), (-1, -1), (-1, 1)})
_KNIGHT = frozenset({(1, 2), (-1, 2), (-1, -2), (1, -2), (2, 1), (-2, 1), (-2, -1), (2, -1)})

ALLOWED_STEPS: Dict[str, FrozenSet[Tuple[int, int]]] = {
    "r": _ORTHOGONAL,
    "b": _DIAGONAL,
    "n": _KNIGHT,
    "k": _ORTHOGONAL | _DIAGONAL,
    "q": _ORTHOGONAL | _DIAGONAL,
}


def _crowd() -> List[Piece]:
    pieces: List[Piece] = []
    for color in ("b", "w"):
        pieces += [Piece("r", color), Piece("r", color)]
        pieces += [Piece("n", color), Piece("n", color)]
        pieces += [Piece("b", color), Piece("b", color)]
        pieces.append(Piece("k", color))
    return pieces


def make_starting_position(rng: Optional[random.Random] = None) -> List[PlacedPiece]:
    """Queen on a random non-corner square, the crowd shuffled around it."""

    rng = rng or random.Random()
    queen_square = rng.choice(QUEEN_START_SQUARES)
    result = [PlacedPiece("q", "w", queen_square)]

    remaining = [sq for sq in all_squares(PUZZLE_SIZE) if not same_square(sq, queen_square)]
    rng.shuffle(remaining)
    for piece in _crowd():
        result.append(PlacedPiece(piece.type, piece.color, remaining.pop()))
    return result


def validate_move(move: Move, board: BoardView) -> bool:
    if board.get_piece(move.end) is not None:
        return False

    mover = board.get_piece(move.start)
    if mover is None:
        return False

    steps = ALLOWED_STEPS.get(mover.type)
    if steps is None:
        return False

    delta = (move.end[0] - move.start[0], move.end[1] - move.start[1])
    return delta in steps


class GoalTracker:
    """Move listener that records which corners the queen has reached."""

    def __init__(
        self,
        board: BoardView,
        goals: Tuple[Coordinates, ...] = GOAL_SQUARES,
        on_goal: Optional[Callable[[Coordinates], None]] = None,
        on_win: Optional[Callable[[], None]] = None,
    ) -> None:
        self._board = board
        self.goals = tuple(as_coordinates(goal) for goal in goals)
        self.reached: Set[Coordinates] = set()
        self.announced = False
        self._on_goal = on_goal
        self._on_win = on_win

    @property
    def solved(self) -> bool:
        return len(self.reached) == len(self.goals)

    def is_goal(self, coord: Coordinates) -> bool:
        return any(same_square(goal, coord) for goal in self.goals)

    def __call__(self, move: Move) -> None:
        landed = self._board.get_piece(move.end)
        if landed is None or landed.type != "q" or not self.is_goal(move.end):
            return

        self.reached.add(move.end)
        LOG.info("Queen reached %s (%d/%d)", move.end, len(self.reached), len(self.goals))
        if self._on_goal is not None:
            self._on_goal(move.end)

        if self.solved and not self.announced:
            self.announced = True
            LOG.info("All goals reached")
            if self._on_win is not None:
                self._on_win()


__all__ = [
    "ALLOWED_STEPS",
    "GOAL_SQUARES",
    "GoalTracker",
    "PUZZLE_SIZE",
    "QUEEN_START_SQUARES",
    "make_starting_position",
    "validate_move",
]
