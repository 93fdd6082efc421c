"""Tests for rendering utilities."""

import numpy as np
import pytest
from schipax import chip8_display_to_rgb, create_color_scheme


def test_display_to_rgb_orientation():
    display = np.zeros((64, 32), dtype=bool)
    display[5, 2] = True

    frame = chip8_display_to_rgb(display, scale=1)

    assert frame.shape == (32, 64, 3)
    assert tuple(frame[2, 5]) == (0, 255, 0)
    assert tuple(frame[5, 2]) == (0, 0, 0)


def test_display_to_rgb_scaling():
    display = np.ones((128, 64), dtype=bool)
    frame = chip8_display_to_rgb(display, scale=3, on_color=(1, 2, 3))
    assert frame.shape == (192, 384, 3)
    assert tuple(frame[-1, -1]) == (1, 2, 3)


def test_color_schemes():
    assert create_color_scheme("classic") == ((0, 255, 0), (0, 0, 0))
    with pytest.raises(ValueError):
        create_color_scheme("sepia")
