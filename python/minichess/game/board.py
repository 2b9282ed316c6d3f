from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ..geometry import Coordinates, as_coordinates, in_bounds, same_square


LOG = logging.getLogger("minichess.board")

PIECE_TYPES = ("k", "q", "r", "b", "n", "p")
COLORS = ("w", "b", "a", "s", "p", "r", "o", "y", "g", "c", "n", "v")

KING = "k"
BLACK = "b"

# King start column and the secondary relocation for each landing column
COMPOSITE_START_COLUMN = 4
COMPOSITE_RELOCATIONS: Dict[int, Tuple[int, int]] = {
    2: (0, 3),
    6: (7, 5),
}


class EmptySquareError(ValueError):
    pass


class _CompositeMismatch(RuntimeError):
    pass


def _check_piece(kind: str, color: str) -> None:
    if kind not in PIECE_TYPES:
        raise ValueError(f"Unknown piece type: {kind!r}")
    if color not in COLORS:
        raise ValueError(f"Unknown piece color: {color!r}")


@dataclass(frozen=True)
class Piece:
    type: str
    color: str

    def __post_init__(self) -> None:
        _check_piece(self.type, self.color)

    @property
    def symbol(self) -> str:
        return self.type if self.color == BLACK else self.type.upper()


@dataclass(frozen=True)
class PlacedPiece:
    type: str
    color: str
    coordinates: Coordinates

    def __post_init__(self) -> None:
        _check_piece(self.type, self.color)
        object.__setattr__(self, "coordinates", as_coordinates(self.coordinates))

    @property
    def piece(self) -> Piece:
        return Piece(self.type, self.color)

    @property
    def symbol(self) -> str:
        return self.piece.symbol

    @classmethod
    def from_record(cls, record: Union["PlacedPiece", Mapping[str, Any]]) -> "PlacedPiece":
        if isinstance(record, PlacedPiece):
            return record
        try:
            return cls(type=record["type"], color=record["color"], coordinates=record["coordinates"])
        except KeyError as exc:
            raise ValueError(f"Placement record is missing {exc.args[0]!r}: {record!r}") from exc

    def to_record(self) -> Dict[str, Any]:
        return {"type": self.type, "color": self.color, "coordinates": list(self.coordinates)}


@dataclass(frozen=True)
class Move:
    start: Coordinates
    end: Coordinates

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", as_coordinates(self.start))
        object.__setattr__(self, "end", as_coordinates(self.end))


@dataclass(frozen=True)
class MoveResult:
    move: Move
    applied: bool = True
    captured: Optional[Piece] = None
    secondary: Optional[Move] = None


Position = Tuple[PlacedPiece, ...]
RenderCallback = Callable[[Position], None]
PlacementInput = Iterable[Union[PlacedPiece, Mapping[str, Any]]]


class BoardView:
    """Read-only window onto a :class:`BoardState` handed to rule callbacks."""

    def __init__(self, board: "BoardState") -> None:
        self._board = board

    @property
    def board_size(self) -> int:
        return self._board.board_size

    def get_piece(self, coord: Coordinates) -> Optional[PlacedPiece]:
        return self._board.get_piece(coord)

    def pieces(self) -> Position:
        return self._board.pieces()

    def ascii(self) -> str:
        return self._board.ascii()

    def __len__(self) -> int:
        return len(self._board)


class BoardState:
    """Authoritative piece placement for a square board.

    The board performs no legality checks; whoever calls :meth:`apply_move`
    has already decided the move is allowed. ``render`` is called with a
    copy of the placement after every committed move.
    """

    def __init__(
        self,
        position: PlacementInput = (),
        board_size: int = 8,
        strict: bool = False,
        composite_moves: Optional[bool] = None,
        render: Optional[RenderCallback] = None,
    ) -> None:
        if board_size < 1:
            raise ValueError(f"board_size must be positive, got {board_size}")
        self._board_size = board_size
        self._strict = strict
        self._composite = board_size == 8 if composite_moves is None else composite_moves
        self._render = render
        self._pieces: List[PlacedPiece] = []

        # Deep copy so later play never touches the caller's records
        for record in copy.deepcopy(list(position)):
            placed = PlacedPiece.from_record(record)
            if not in_bounds(placed.coordinates, board_size):
                raise ValueError(f"Piece outside the board: {placed}")
            if self.get_piece(placed.coordinates) is not None:
                raise ValueError(f"Two pieces on {placed.coordinates}")
            self._pieces.append(placed)

    @property
    def board_size(self) -> int:
        return self._board_size

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def composite_enabled(self) -> bool:
        return self._composite

    def set_renderer(self, render: Optional[RenderCallback]) -> None:
        self._render = render

    def __len__(self) -> int:
        return len(self._pieces)

    def pieces(self) -> Position:
        return tuple(self._pieces)

    def view(self) -> BoardView:
        return BoardView(self)

    def to_records(self) -> List[Dict[str, Any]]:
        return [piece.to_record() for piece in self._pieces]

    def get_piece(self, coord: Coordinates) -> Optional[PlacedPiece]:
        return next((p for p in self._pieces if same_square(p.coordinates, coord)), None)

    def remove_piece(self, coord: Coordinates) -> Optional[Piece]:
        # The no-shared-square invariant means at most one match
        for index, placed in enumerate(self._pieces):
            if same_square(placed.coordinates, coord):
                del self._pieces[index]
                return placed.piece
        return None

    def ascii(self) -> str:
        grid = [["."] * self._board_size for _ in range(self._board_size)]
        for placed in self._pieces:
            row, col = placed.coordinates
            grid[row][col] = placed.symbol
        return "\n".join(" ".join(row) for row in grid)

    def is_composite(self, move: Move) -> bool:
        if not self._composite:
            return False
        piece = self.get_piece(move.start)
        return (
            piece is not None
            and piece.type == KING
            and move.start[1] == COMPOSITE_START_COLUMN
            and move.end[1] in COMPOSITE_RELOCATIONS
        )

    def apply_move(self, move: Move) -> MoveResult:
        """Apply ``move`` and any secondary move it triggers, then re-render."""

        snapshot = list(self._pieces)
        try:
            result = self._apply(move)
        except _CompositeMismatch as exc:
            self._pieces = snapshot
            LOG.error("Unreachable composite move %s: %s", move, exc)
            return MoveResult(move=move, applied=False)
        except EmptySquareError:
            self._pieces = snapshot
            raise

        self.render()
        return result

    def render(self) -> None:
        if self._render is not None:
            self._render(self.pieces())

    def _apply(self, move: Move) -> MoveResult:
        composite = self.is_composite(move)

        if self._strict and self.get_piece(move.start) is None:
            raise EmptySquareError(f"No piece on {move.start}")

        piece = self.remove_piece(move.start)
        captured = self.remove_piece(move.end)
        if piece is None:
            LOG.warning("Applying %s from an empty square; nothing is placed", move)
        else:
            self._pieces.append(PlacedPiece(piece.type, piece.color, move.end))

        secondary = None
        if composite:
            secondary = self._secondary_move(move)
            self._apply(secondary)

        if captured is not None:
            LOG.debug("%s captured %s", move, captured)
        return MoveResult(move=move, captured=captured, secondary=secondary)

    @staticmethod
    def _secondary_move(move: Move) -> Move:
        row = move.start[0]
        try:
            start_col, end_col = COMPOSITE_RELOCATIONS[move.end[1]]
        except KeyError as exc:
            raise _CompositeMismatch(f"landing column {move.end[1]}") from exc
        return Move(start=(row, start_col), end=(row, end_col))


__all__ = [
    "BLACK",
    "BoardState",
    "BoardView",
    "COLORS",
    "EmptySquareError",
    "KING",
    "Move",
    "MoveResult",
    "PIECE_TYPES",
    "Piece",
    "PlacedPiece",
    "Position",
    "RenderCallback",
]
