"""Pointer drag state machine that turns a press-move-release gesture into a move.

The controller knows nothing about pygame. It talks to a :class:`BoardSurface`
for hit-testing and drag visuals, and to a :class:`PointerHub` for the
application-wide move/release stream, so a drag keeps tracking after the
pointer leaves the board.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Tuple

from ..game.board import BoardState, BoardView, EmptySquareError, Move, PlacedPiece, Position
from ..geometry import Coordinates, Pixel


LOG = logging.getLogger("minichess.drag")

PRIMARY_BUTTON = 1

DRAGGED_CELL_CLASS = "is-being-dragged"
DRAG_MODE_CLASS = "drag-mode"


class MoveValidator(Protocol):
    def __call__(self, move: Move, board: BoardView) -> bool: ...


class MoveListener(Protocol):
    def __call__(self, move: Move) -> None: ...


class Ghost(Protocol):
    def move_to(self, pos: Pixel) -> None: ...

    def remove(self) -> None: ...


class BoardSurface(Protocol):
    def cell_at(self, pos: Pixel) -> Optional[Coordinates]: ...

    def add_cell_class(self, coord: Coordinates, name: str) -> None: ...

    def remove_cell_class(self, coord: Coordinates, name: str) -> None: ...

    def add_root_class(self, name: str) -> None: ...

    def remove_root_class(self, name: str) -> None: ...

    def create_ghost(self, piece: PlacedPiece, pos: Pixel) -> Ghost: ...

    def render_position(self, pieces: Position) -> None: ...


MoveHandler = Callable[[Pixel], None]


class PointerHub:
    """Application-wide pointer stream; handlers subscribe for the length of a drag."""

    def __init__(self) -> None:
        self._subscribers: List[Tuple[MoveHandler, MoveHandler]] = []

    def subscribe(self, on_move: MoveHandler, on_up: MoveHandler) -> Callable[[], None]:
        entry = (on_move, on_up)
        self._subscribers.append(entry)

        def unsubscribe() -> None:
            if entry in self._subscribers:
                self._subscribers.remove(entry)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def dispatch_move(self, pos: Pixel) -> None:
        for on_move, _ in list(self._subscribers):
            on_move(pos)

    def dispatch_up(self, pos: Pixel) -> None:
        # Copy first: an up handler unsubscribes itself
        for _, on_up in list(self._subscribers):
            on_up(pos)


@dataclass(frozen=True)
class DragSession:
    origin: Coordinates
    piece: PlacedPiece
    ghost: Ghost
    remove_listeners: Callable[[], None]


class DragController:
    def __init__(
        self,
        board: BoardState,
        surface: BoardSurface,
        pointer: PointerHub,
        validator: Optional[MoveValidator] = None,
        listener: Optional[MoveListener] = None,
    ) -> None:
        self._board = board
        self._surface = surface
        self._pointer = pointer
        self._validator = validator
        self._listener = listener
        self.session: Optional[DragSession] = None

    @property
    def is_dragging(self) -> bool:
        return self.session is not None

    def set_validator(self, validator: Optional[MoveValidator]) -> None:
        self._validator = validator

    def set_listener(self, listener: Optional[MoveListener]) -> None:
        self._listener = listener

    def pointer_down(self, cell: Coordinates, pos: Pixel, button: int = PRIMARY_BUTTON) -> bool:
        """Start a drag from ``cell``; returns ``True`` when a session began."""

        if self.session is not None or button != PRIMARY_BUTTON:
            return False

        piece = self._board.get_piece(cell)
        if piece is None:
            return False

        self._surface.add_cell_class(cell, DRAGGED_CELL_CLASS)
        self._surface.add_root_class(DRAG_MODE_CLASS)
        ghost = self._surface.create_ghost(piece, pos)
        remove_listeners = self._pointer.subscribe(self._on_pointer_move, self._on_pointer_up)

        self.session = DragSession(
            origin=piece.coordinates,
            piece=piece,
            ghost=ghost,
            remove_listeners=remove_listeners,
        )
        LOG.debug("Drag started at %s (%s)", cell, piece.symbol)
        return True

    def _on_pointer_move(self, pos: Pixel) -> None:
        if self.session is None:
            return
        self.session.ghost.move_to(pos)

    def _on_pointer_up(self, pos: Pixel) -> None:
        session = self.session
        if session is None:
            return

        try:
            self._surface.remove_cell_class(session.origin, DRAGGED_CELL_CLASS)
            self._surface.remove_root_class(DRAG_MODE_CLASS)
            session.ghost.remove()
        finally:
            session.remove_listeners()
            self.session = None

        drop = self._surface.cell_at(pos)
        if drop is None:
            LOG.debug("Dropped outside the board")
            return

        self.submit(Move(start=session.origin, end=drop))

    def submit(self, move: Move) -> bool:
        """Validate and commit ``move``; returns whether it was applied."""

        if not self._accepts(move):
            LOG.debug("Rejected %s", move)
            return False

        try:
            result = self._board.apply_move(move)
        except EmptySquareError as exc:
            LOG.debug("Refused %s: %s", move, exc)
            return False
        if not result.applied:
            return False

        if self._listener is not None:
            self._listener(move)
        return True

    def _accepts(self, move: Move) -> bool:
        if self._validator is None:
            return True
        return bool(self._validator(move, self._board.view()))


__all__ = [
    "BoardSurface",
    "DRAGGED_CELL_CLASS",
    "DRAG_MODE_CLASS",
    "DragController",
    "DragSession",
    "Ghost",
    "MoveListener",
    "MoveValidator",
    "PRIMARY_BUTTON",
    "PointerHub",
]
