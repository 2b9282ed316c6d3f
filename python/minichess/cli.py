"""Command-line interface for the corner-queen puzzle."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import Callable, List, Optional

from .config import BoardConfig, add_board_arguments, config_from_args
from .game.board import BoardState, Move
from .game.puzzle import PUZZLE_SIZE, GoalTracker, make_starting_position, validate_move


def _render_board(state: BoardState, out: Callable[[str], None]) -> None:
    out("\n    " + " ".join(str(col) for col in range(state.board_size)))
    for row, line in enumerate(state.ascii().splitlines()):
        out(f"{row:2}  {line}")
    out("")


def parse_move(text: str) -> Optional[Move]:
    """Parse ``"r c r c"`` (commas allowed) into a move, or ``None``."""

    parts = text.replace(",", " ").split()
    if len(parts) != 4:
        return None
    try:
        r1, c1, r2, c2 = (int(part) for part in parts)
    except ValueError:
        return None
    return Move(start=(r1, c1), end=(r2, c2))


def play(
    config: BoardConfig,
    read: Callable[[str], str] = input,
    out: Callable[[str], None] = print,
) -> int:
    state = BoardState(
        make_starting_position(random.Random(config.seed)),
        board_size=config.board_size,
        strict=config.strict,
        composite_moves=config.composite_enabled,
    )
    messages: List[str] = []
    tracker = GoalTracker(
        state.view(),
        on_goal=lambda square: messages.append(f"Corner {square} reached!"),
        on_win=lambda: messages.append("Congratulations! The queen visited every corner."),
    )

    out("Move pieces one step at a time onto empty squares.")
    out("Get the queen (Q) into all four corners. Enter 'q' to quit.")

    moves = 0
    while not tracker.solved:
        _render_board(state, out)
        try:
            text = read("Move (row col row col): ").strip()
        except EOFError:
            break

        if text.lower() in {"q", "quit", "exit"}:
            break

        move = parse_move(text)
        if move is None:
            out("Please enter four numbers, e.g. '1 1 0 0'.")
            continue

        if not validate_move(move, state.view()):
            out("Illegal move. Try again.")
            continue

        state.apply_move(move)
        moves += 1
        tracker(move)
        for message in messages:
            out(message)
        messages.clear()

    if tracker.solved:
        _render_board(state, out)
        out(f"Solved in {moves} moves.")
    out("Thanks for playing!")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Corner-queen puzzle in the terminal")
    add_board_arguments(parser)
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    config = config_from_args(args)
    if config.board_size != PUZZLE_SIZE:
        parser.error(f"the puzzle is played on a {PUZZLE_SIZE}x{PUZZLE_SIZE} board")
    return play(config)


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    sys.exit(main())
