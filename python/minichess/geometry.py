"""Square coordinates and pixel geometry for square boards.

Coordinates are ``(row, column)`` pairs. Records coming from callers may hold
them as lists, so every comparison goes through :func:`same_square` instead of
relying on container equality.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple


Coordinates = Tuple[int, int]
Pixel = Tuple[int, int]


def same_square(a: Sequence[int], b: Sequence[int]) -> bool:
    """Return ``True`` when both row and column match."""

    return a[0] == b[0] and a[1] == b[1]


def as_coordinates(value: Sequence[int]) -> Coordinates:
    # Normalise lists and other sequences to a tuple
    if len(value) != 2:
        raise ValueError(f"Coordinates need exactly two components: {value!r}")
    return int(value[0]), int(value[1])


def in_bounds(coord: Sequence[int], board_size: int) -> bool:
    return 0 <= coord[0] < board_size and 0 <= coord[1] < board_size


def is_light(coord: Sequence[int]) -> bool:
    return (coord[0] + coord[1]) % 2 == 0


def all_squares(board_size: int) -> Iterator[Coordinates]:
    """Iterate over every square row by row."""

    for row in range(board_size):
        for col in range(board_size):
            yield row, col


@dataclass(frozen=True)
class BoardGeometry:
    """Maps board squares to screen pixels.

    Attributes
    ----------
    board_size:
        Number of rows (and columns) on the board.
    cell_size:
        Edge length of one square in pixels.
    origin:
        Pixel position of the top-left corner of square ``(0, 0)``.
    """

    board_size: int
    cell_size: int
    origin: Pixel = (0, 0)

    @property
    def extent(self) -> int:
        return self.board_size * self.cell_size

    def cell_rect(self, coord: Sequence[int]) -> Tuple[int, int, int, int]:
        # (left, top, width, height)
        ox, oy = self.origin
        return (
            ox + coord[1] * self.cell_size,
            oy + coord[0] * self.cell_size,
            self.cell_size,
            self.cell_size,
        )

    def cell_center(self, coord: Sequence[int]) -> Pixel:
        left, top, size, _ = self.cell_rect(coord)
        return left + size // 2, top + size // 2

    def cell_at(self, pos: Pixel) -> Optional[Coordinates]:
        """Return the square under ``pos`` or ``None`` when off the board."""

        ox, oy = self.origin
        x, y = pos
        if x < ox or y < oy:
            return None
        col = (x - ox) // self.cell_size
        row = (y - oy) // self.cell_size
        if in_bounds((row, col), self.board_size):
            return int(row), int(col)
        return None
