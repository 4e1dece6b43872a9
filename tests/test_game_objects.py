"""
Tests for the movable square game objects.
"""

import random

import pytest

from vkguide.game_objects import Keys, KeyState, Square, update_movement


class TestSquare:

    def test_defaults(self):
        square = Square()
        assert square.color == [1.0, 0.0, 0.0]
        assert square.position == [0.0, 0.0]
        assert square.speed == 1.3

    def test_moves_scale_with_time(self):
        square = Square()
        square.move_right(2.0)
        assert square.position[0] == pytest.approx(2.6)
        square.move_left(1.0)
        assert square.position[0] == pytest.approx(1.3)

    def test_up_is_negative_y(self):
        square = Square()
        square.move_up(1.0)
        assert square.position[1] == pytest.approx(-1.3)
        square.move_down(0.5)
        assert square.position[1] == pytest.approx(-0.65)

    def test_random_color_in_unit_range(self):
        square = Square()
        square.change_to_random_color(random.Random(1234))
        assert len(square.color) == 3
        assert all(0.0 <= c < 1.0 for c in square.color)

    def test_random_color_uses_hundredths(self):
        square = Square()
        square.change_to_random_color(random.Random(7))
        assert all(round(c * 100) == pytest.approx(c * 100) for c in square.color)


class TestKeys:

    def test_all_released_initially(self):
        keys = Keys()
        assert all(getattr(keys, name) == KeyState.RELEASED for name in Keys.names)

    def test_press_reports_transition(self):
        keys = Keys()
        assert keys.press('space')
        assert not keys.press('space')
        keys.release('space')
        assert keys.press('space')


class TestUpdateMovement:

    def test_single_key_moves(self):
        square, keys = Square(), Keys()
        keys.press('d')
        update_movement(square, keys, 1.0)
        assert square.position == pytest.approx([1.3, 0.0])

    def test_opposing_keys_cancel(self):
        square, keys = Square(), Keys()
        keys.press('w')
        keys.press('s')
        keys.press('a')
        keys.press('d')
        update_movement(square, keys, 1.0)
        assert square.position == [0.0, 0.0]

    def test_diagonal(self):
        square, keys = Square(), Keys()
        keys.press('w')
        keys.press('a')
        update_movement(square, keys, 0.5)
        assert square.position == pytest.approx([-0.65, -0.65])
