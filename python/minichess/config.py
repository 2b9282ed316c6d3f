"""Runtime configuration shared by the pygame and text front-ends."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_BOARD_SIZE = 8
PUZZLE_BOARD_SIZE = 4
DEFAULT_CELL_SIZE = 100


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class BoardConfig:
    board_size: int = DEFAULT_BOARD_SIZE
    strict: bool = False
    # None lets the board decide (enabled only on 8x8)
    composite_moves: Optional[bool] = None
    cell_size: int = DEFAULT_CELL_SIZE
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.board_size < 1:
            raise ConfigError(f"board_size must be positive, got {self.board_size}")
        if self.cell_size < 8:
            raise ConfigError(f"cell_size too small: {self.cell_size}")

    @property
    def composite_enabled(self) -> bool:
        if self.composite_moves is None:
            return self.board_size == 8
        return self.composite_moves


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def add_board_arguments(parser: argparse.ArgumentParser, default_size: int = PUZZLE_BOARD_SIZE) -> None:
    parser.add_argument(
        "--board-size",
        type=int,
        default=None,
        help=f"Board edge length (default: $MINICHESS_BOARD_SIZE or {default_size})",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the starting position")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject moves that start on an empty square instead of proceeding",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level")


def config_from_args(args: argparse.Namespace, default_size: int = PUZZLE_BOARD_SIZE) -> BoardConfig:
    board_size = args.board_size
    if board_size is None:
        board_size = _env_int("MINICHESS_BOARD_SIZE", default_size)

    cell_size = getattr(args, "cell_size", None)
    if cell_size is None:
        cell_size = _env_int("MINICHESS_CELL_SIZE", DEFAULT_CELL_SIZE)

    return BoardConfig(
        board_size=board_size,
        strict=bool(getattr(args, "strict", False)),
        cell_size=cell_size,
        seed=args.seed,
    )


__all__ = [
    "BoardConfig",
    "ConfigError",
    "DEFAULT_BOARD_SIZE",
    "DEFAULT_CELL_SIZE",
    "PUZZLE_BOARD_SIZE",
    "add_board_arguments",
    "config_from_args",
]
