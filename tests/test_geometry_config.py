import argparse

import pytest

from minichess.config import BoardConfig, ConfigError, add_board_arguments, config_from_args
from minichess.geometry import BoardGeometry, all_squares, as_coordinates, in_bounds, is_light, same_square


class TestGeometry:
    def test_same_square_compares_values(self):
        assert same_square((1, 2), [1, 2])
        assert not same_square((1, 2), (2, 1))

    def test_as_coordinates(self):
        assert as_coordinates([3, 1]) == (3, 1)
        with pytest.raises(ValueError):
            as_coordinates([1, 2, 3])

    def test_bounds_and_shading(self):
        assert in_bounds((0, 3), 4)
        assert not in_bounds((4, 0), 4)
        assert not in_bounds((0, -1), 4)
        assert is_light((0, 0))
        assert not is_light((0, 1))
        assert len(list(all_squares(4))) == 16

    def test_pixel_mapping(self):
        geo = BoardGeometry(board_size=4, cell_size=50, origin=(20, 10))
        assert geo.cell_at((20, 10)) == (0, 0)
        assert geo.cell_at((69, 59)) == (0, 0)
        assert geo.cell_at((70, 60)) == (1, 1)
        assert geo.cell_at((219, 209)) == (3, 3)
        assert geo.cell_at((220, 100)) is None
        assert geo.cell_at((19, 100)) is None
        assert geo.cell_rect((1, 2)) == (120, 60, 50, 50)
        assert geo.cell_center((0, 0)) == (45, 35)


class TestConfig:
    def test_composite_default_follows_board_size(self):
        assert BoardConfig(board_size=8).composite_enabled
        assert not BoardConfig(board_size=4).composite_enabled
        assert BoardConfig(board_size=4, composite_moves=True).composite_enabled

    def test_rejects_bad_values(self):
        with pytest.raises(ConfigError):
            BoardConfig(board_size=0)
        with pytest.raises(ConfigError):
            BoardConfig(cell_size=2)

    def test_from_args_and_environment(self, monkeypatch):
        parser = argparse.ArgumentParser()
        add_board_arguments(parser)

        monkeypatch.delenv("MINICHESS_BOARD_SIZE", raising=False)
        config = config_from_args(parser.parse_args(["--seed", "3", "--strict"]))
        assert config.board_size == 4
        assert config.seed == 3
        assert config.strict

        monkeypatch.setenv("MINICHESS_BOARD_SIZE", "8")
        assert config_from_args(parser.parse_args([])).board_size == 8
        assert config_from_args(parser.parse_args(["--board-size", "5"])).board_size == 5

        monkeypatch.setenv("MINICHESS_BOARD_SIZE", "big")
        with pytest.raises(ConfigError):
            config_from_args(parser.parse_args([]))
