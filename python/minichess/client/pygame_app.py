"""Pygame front-end: a draggable chessboard and the corner-queen puzzle."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

try:
    import pygame
except ImportError as exc:  # pragma: no cover - handled at runtime
    raise SystemExit(
        "Pygame is required for the graphical client. Install it with 'pip install pygame'."
    ) from exc

from ..config import BoardConfig, add_board_arguments, config_from_args
from ..game.board import BoardState, BoardView, Move, MoveResult, PlacedPiece, PlacementInput, Position
from ..game.puzzle import GOAL_SQUARES, PUZZLE_SIZE, GoalTracker, make_starting_position, validate_move
from ..geometry import BoardGeometry, Coordinates, Pixel, all_squares, as_coordinates, is_light
from .drag import DRAG_MODE_CLASS, DRAGGED_CELL_CLASS, DragController, MoveListener, MoveValidator, PointerHub


LOG = logging.getLogger("minichess.client")


# ---------------------------------------------------------------------------
# Rendering configuration
# ---------------------------------------------------------------------------

FPS = 30
MARGIN = 40
FOOTER = 90

BACKGROUND = (250, 250, 250)
LIGHT_SQUARE = (240, 217, 181)
DARK_SQUARE = (181, 136, 99)
BOARD_OUTLINE = (38, 50, 56)
DRAG_OUTLINE = (255, 152, 0)
UNREACHED_GOAL = (255, 193, 7)
REACHED_GOAL = (129, 199, 132, 150)
DRAGGED_CELL = (0, 0, 0, 40)
TEXT_COLOR = (33, 33, 33)
BANNER_COLOR = (94, 53, 177)

PIECE_COLORS: Dict[str, Tuple[int, int, int]] = {
    "w": (250, 250, 250),
    "b": (33, 33, 33),
    "a": (158, 158, 158),
    "s": (176, 190, 197),
    "p": (233, 30, 99),
    "r": (211, 47, 47),
    "o": (245, 124, 0),
    "y": (251, 192, 45),
    "g": (46, 125, 50),
    "c": (0, 172, 193),
    "n": (26, 35, 126),
    "v": (123, 31, 162),
}
PIECE_OUTLINE = (38, 50, 56)


class BoardConstructionError(RuntimeError):
    pass


def _glyph_color(color: str) -> Tuple[int, int, int]:
    r, g, b = PIECE_COLORS.get(color, (120, 120, 120))
    return (33, 33, 33) if (r * 299 + g * 587 + b * 114) // 1000 > 150 else (250, 250, 250)


@dataclass
class PygameGhost:
    view: "PygameBoardView"
    piece: PlacedPiece
    center: Pixel

    def move_to(self, pos: Pixel) -> None:
        self.center = pos

    def remove(self) -> None:
        self.view.drop_ghost(self)


class PygameBoardView:
    """Paints squares, pieces and drag visuals onto a pygame surface.

    Squares carry a set of state classes (``is-being-dragged``,
    ``unreached-goal``, ...) that decide how they are decorated, and the
    board as a whole carries root classes such as ``drag-mode``.
    """

    def __init__(self, surface: Optional[pygame.Surface], geometry: BoardGeometry) -> None:
        if surface is None:
            raise BoardConstructionError("Root surface not found")
        self.surface = surface
        self.geometry = geometry
        self.root_classes: Set[str] = set()
        self.cell_classes: Dict[Coordinates, Set[str]] = {sq: set() for sq in all_squares(geometry.board_size)}
        self.pieces: Dict[Coordinates, PlacedPiece] = {}
        self.ghost: Optional[PygameGhost] = None
        self._font: Optional[pygame.font.Font] = None

    # ------------------------------------------------------------------
    # Surface protocol used by the drag controller
    # ------------------------------------------------------------------
    def cell_at(self, pos: Pixel) -> Optional[Coordinates]:
        return self.geometry.cell_at(pos)

    def add_cell_class(self, coord: Coordinates, name: str) -> None:
        self.cell_classes[as_coordinates(coord)].add(name)

    def remove_cell_class(self, coord: Coordinates, name: str) -> None:
        self.cell_classes[as_coordinates(coord)].discard(name)

    def add_root_class(self, name: str) -> None:
        self.root_classes.add(name)

    def remove_root_class(self, name: str) -> None:
        self.root_classes.discard(name)

    def create_ghost(self, piece: PlacedPiece, pos: Pixel) -> PygameGhost:
        self.ghost = PygameGhost(view=self, piece=piece, center=pos)
        return self.ghost

    def drop_ghost(self, ghost: PygameGhost) -> None:
        if self.ghost is ghost:
            self.ghost = None

    def render_position(self, pieces: Position) -> None:
        # Clear every square, then place the new position
        self.pieces = {}
        for placed in pieces:
            self.pieces[placed.coordinates] = placed

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------
    def draw(self) -> None:
        geo = self.geometry
        for coord in all_squares(geo.board_size):
            rect = pygame.Rect(geo.cell_rect(coord))
            pygame.draw.rect(self.surface, LIGHT_SQUARE if is_light(coord) else DARK_SQUARE, rect)
            self._decorate(coord, rect)

            placed = self.pieces.get(coord)
            if placed is not None and DRAGGED_CELL_CLASS not in self.cell_classes[coord]:
                self._draw_piece(placed, rect.center)

        outline = DRAG_OUTLINE if DRAG_MODE_CLASS in self.root_classes else BOARD_OUTLINE
        ox, oy = geo.origin
        pygame.draw.rect(self.surface, outline, pygame.Rect(ox, oy, geo.extent, geo.extent), width=3)

        if self.ghost is not None:
            self._draw_piece(self.ghost.piece, self.ghost.center)

    def _decorate(self, coord: Coordinates, rect: pygame.Rect) -> None:
        classes = self.cell_classes[coord]
        if "reached-goal" in classes:
            self._tint(rect, REACHED_GOAL)
        elif "unreached-goal" in classes:
            pygame.draw.rect(self.surface, UNREACHED_GOAL, rect.inflate(-6, -6), width=4)
        if DRAGGED_CELL_CLASS in classes:
            self._tint(rect, DRAGGED_CELL)

    def _tint(self, rect: pygame.Rect, rgba: Tuple[int, int, int, int]) -> None:
        overlay = pygame.Surface(rect.size, pygame.SRCALPHA)
        overlay.fill(rgba)
        self.surface.blit(overlay, rect.topleft)

    def _draw_piece(self, piece: PlacedPiece, center: Pixel) -> None:
        radius = self.geometry.cell_size * 2 // 5
        pygame.draw.circle(self.surface, PIECE_COLORS.get(piece.color, (120, 120, 120)), center, radius)
        pygame.draw.circle(self.surface, PIECE_OUTLINE, center, radius, 3)

        if self._font is None:
            pygame.font.init()
            self._font = pygame.font.Font(None, self.geometry.cell_size // 2)
        glyph = self._font.render(piece.type.upper(), True, _glyph_color(piece.color))
        self.surface.blit(glyph, glyph.get_rect(center=center))


class Chessboard:
    """A :class:`BoardState` wired to a pygame view and a drag controller."""

    def __init__(
        self,
        position: PlacementInput,
        surface: Optional[pygame.Surface],
        board_size: int = 8,
        cell_size: int = 100,
        origin: Pixel = (0, 0),
        strict: bool = False,
        composite_moves: Optional[bool] = None,
    ) -> None:
        # Raises before any board state exists
        self.view = PygameBoardView(surface, BoardGeometry(board_size, cell_size, origin))
        self.pointer = PointerHub()
        self.state = BoardState(
            position,
            board_size=board_size,
            strict=strict,
            composite_moves=composite_moves,
            render=self.view.render_position,
        )
        self.controller = DragController(self.state, self.view, self.pointer)
        self.state.render()

    @classmethod
    def from_config(
        cls,
        position: PlacementInput,
        surface: Optional[pygame.Surface],
        config: BoardConfig,
        origin: Pixel = (0, 0),
    ) -> "Chessboard":
        return cls(
            position,
            surface,
            board_size=config.board_size,
            cell_size=config.cell_size,
            origin=origin,
            strict=config.strict,
            composite_moves=config.composite_enabled,
        )

    @property
    def board_size(self) -> int:
        return self.state.board_size

    def set_move_validator(self, validator: Optional[MoveValidator]) -> None:
        self.controller.set_validator(validator)

    def set_move_listener(self, listener: Optional[MoveListener]) -> None:
        self.controller.set_listener(listener)

    def get_piece(self, coord: Coordinates) -> Optional[PlacedPiece]:
        return self.state.get_piece(coord)

    def board_view(self) -> BoardView:
        return self.state.view()

    def move(self, move: Move) -> MoveResult:
        return self.state.apply_move(move)

    def ascii(self) -> str:
        return self.state.ascii()

    def square_classes(self, coord: Coordinates) -> Set[str]:
        return set(self.view.cell_classes[as_coordinates(coord)])

    def add_square_class(self, coord: Coordinates, name: str) -> None:
        self.view.add_cell_class(coord, name)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEBUTTONDOWN:
            cell = self.view.cell_at(event.pos)
            if cell is not None:
                self.controller.pointer_down(cell, event.pos, event.button)
        elif event.type == pygame.MOUSEMOTION:
            self.pointer.dispatch_move(event.pos)
        elif event.type == pygame.MOUSEBUTTONUP:
            self.pointer.dispatch_up(event.pos)

    def draw(self) -> None:
        self.view.draw()


@dataclass
class Button:
    label: str
    rect: pygame.Rect

    def draw(self, surface: pygame.Surface, font: pygame.font.Font, hovered: bool) -> None:
        base_color = (33, 150, 243)
        color = tuple(min(c + 40, 255) for c in base_color) if hovered else base_color
        pygame.draw.rect(surface, color, self.rect, border_radius=6)
        pygame.draw.rect(surface, (13, 71, 161), self.rect, width=2, border_radius=6)
        text_surf = font.render(self.label, True, (255, 255, 255))
        surface.blit(text_surf, text_surf.get_rect(center=self.rect.center))

    def contains(self, pos: Tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


class CornerQueenApp:
    def __init__(self, config: BoardConfig) -> None:
        pygame.init()
        pygame.display.set_caption("Corner Queen")
        extent = config.board_size * config.cell_size
        self.width = max(extent + 2 * MARGIN, 360)
        self.height = extent + MARGIN + FOOTER
        self.screen = pygame.display.set_mode((self.width, self.height))
        self.clock = pygame.time.Clock()

        self.font_small = pygame.font.Font(None, 24)
        self.font_large = pygame.font.Font(None, 40)

        self.config = config
        self.rng = random.Random(config.seed)
        self.buttons = [Button("New Game", pygame.Rect(MARGIN, self.height - 65, 140, 45))]
        self.message: Optional[str] = None
        self.solved = False
        self.moves = 0
        self.reset()

    # ------------------------------------------------------------------
    # Game flow helpers
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self.board = Chessboard.from_config(
            make_starting_position(self.rng),
            self.screen,
            self.config,
            origin=((self.width - self.config.board_size * self.config.cell_size) // 2, MARGIN // 2),
        )
        for goal in GOAL_SQUARES:
            self.board.add_square_class(goal, "unreached-goal")

        self.tracker = GoalTracker(self.board.board_view(), on_goal=self._on_goal, on_win=self._on_win)
        self.board.set_move_validator(validate_move)
        self.board.set_move_listener(self._on_move)
        self.message = None
        self.solved = False
        self.moves = 0

    def _on_move(self, move: Move) -> None:
        self.moves += 1
        self.message = f"Moved {move.start} → {move.end}"
        self.tracker(move)

    def _on_goal(self, square: Coordinates) -> None:
        self.board.add_square_class(square, "reached-goal")

    def _on_win(self) -> None:
        self.solved = True
        LOG.info("Puzzle solved in %d moves", self.moves)

    # ------------------------------------------------------------------
    # Rendering helpers
    # ------------------------------------------------------------------
    def draw(self) -> None:
        self.screen.fill(BACKGROUND)
        self.board.draw()

        mouse_pos = pygame.mouse.get_pos()
        for button in self.buttons:
            button.draw(self.screen, self.font_small, button.contains(mouse_pos))

        status = f"Corners: {len(self.tracker.reached)}/{len(self.tracker.goals)}  Moves: {self.moves}"
        text = self.font_small.render(status, True, TEXT_COLOR)
        self.screen.blit(text, (MARGIN + 160, self.height - 55))

        if self.solved:
            banner = self.font_large.render("Congratulations!", True, BANNER_COLOR)
            self.screen.blit(banner, banner.get_rect(center=(self.width // 2, self.height - 95)))
        elif self.message:
            msg = self.font_small.render(self.message, True, BANNER_COLOR)
            self.screen.blit(msg, (MARGIN + 160, self.height - 30))

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    def run(self) -> None:
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif (
                    event.type == pygame.MOUSEBUTTONDOWN
                    and event.button == 1
                    and any(button.contains(event.pos) for button in self.buttons)
                ):
                    self.reset()
                else:
                    self.board.handle_event(event)

            self.draw()
            pygame.display.flip()
            self.clock.tick(FPS)

        pygame.quit()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Drag the queen into every corner")
    add_board_arguments(parser)
    parser.add_argument("--cell-size", type=int, default=None, help="Square size in pixels")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    config = config_from_args(args)
    if config.board_size != PUZZLE_SIZE:
        parser.error(f"the puzzle is played on a {PUZZLE_SIZE}x{PUZZLE_SIZE} board")
    CornerQueenApp(config).run()
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution
    sys.exit(main())
