"""Monochrome display buffer: sprite drawing, scrolling and resolution switching."""

from enum import IntEnum

import jax.numpy as jnp
import numpy as np

from schipax.constants import (
    SCREEN_WIDTH, SCREEN_HEIGHT, HIRES_SCREEN_WIDTH, HIRES_SCREEN_HEIGHT, SCROLL_PIXELS
)
from schipax.errors import InvalidResolutionError
from schipax.state import EmulatorState


class Resolution(IntEnum):
    STANDARD = 0  # 64x32
    EXTENDED = 1  # 128x64, SuperChip8 only


# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(HIRES_SCREEN_WIDTH), jnp.arange(HIRES_SCREEN_HEIGHT), indexing='ij')


def screen_size(hires) -> tuple[jnp.ndarray, jnp.ndarray]:
    """Active (width, height) for the given resolution flag."""
    return (
        jnp.where(hires, HIRES_SCREEN_WIDTH, SCREEN_WIDTH),
        jnp.where(hires, HIRES_SCREEN_HEIGHT, SCREEN_HEIGHT),
    )


def active_area(hires) -> jnp.ndarray:
    width, height = screen_size(hires)
    return (xx < width) & (yy < height)


def clear(display: jnp.ndarray) -> jnp.ndarray:
    return jnp.zeros_like(display)


def switch_resolution(state: EmulatorState, hires) -> EmulatorState:
    """Select standard or extended resolution; the buffer is cleared either way."""
    return state.replace(hires=jnp.asarray(hires, dtype=jnp.bool_), display=clear(state.display))


def set_resolution(state: EmulatorState, mode) -> EmulatorState:
    """Host-side resolution change.

    Raises:
        InvalidResolutionError: if ``mode`` is not a ``Resolution`` value
    """
    try:
        mode = Resolution(mode)
    except ValueError:
        raise InvalidResolutionError(mode) from None
    return switch_resolution(state, mode == Resolution.EXTENDED)


def sprite_rows(sprite_bytes, extended: bool = False) -> jnp.ndarray:
    """Pack sprite bytes into one bit pattern per row (two bytes per row for 16x16 sprites)."""
    if isinstance(sprite_bytes, (bytes, bytearray)):
        sprite_bytes = np.frombuffer(sprite_bytes, dtype=np.uint8)
    data = jnp.asarray(sprite_bytes).astype(jnp.uint16)
    if extended:
        return (data[0::2] << 8) | data[1::2]
    return data


def blit(display, hires, x, y, rows, height, sprite_width) -> tuple[jnp.ndarray, jnp.ndarray]:
    """XOR ``height`` rows of ``sprite_width``-pixel patterns onto the display.

    Placement wraps modulo the active width and height. Returns the new
    display and whether any lit pixel was turned off.
    """
    width, screen_height = screen_size(hires)
    origin_x = jnp.astype(x, jnp.int32) % width
    origin_y = jnp.astype(y, jnp.int32) % screen_height

    col = (xx - origin_x) % width
    row = (yy - origin_y) % screen_height
    covered = active_area(hires) & (col < sprite_width) & (row < height)

    row_bits = jnp.astype(rows, jnp.int32)[jnp.clip(row, 0, rows.shape[0] - 1)]
    shift = jnp.clip(sprite_width - 1 - col, 0, 15)
    sprite = covered & (((row_bits >> shift) & 1) == 1)

    return display ^ sprite, jnp.any(display & sprite)


def draw_sprite(display, hires, x, y, sprite_bytes, extended: bool = False) -> tuple[jnp.ndarray, jnp.ndarray]:
    """Draw an 8-pixel-wide sprite (one byte per row) or a 16x16 sprite (``extended``)."""
    rows = sprite_rows(sprite_bytes, extended)
    if rows.shape[0] == 0:
        return display, jnp.zeros((), dtype=jnp.bool_)
    return blit(display, hires, x, y, rows, rows.shape[0], 16 if extended else 8)


def scroll_down(display, hires, lines) -> jnp.ndarray:
    """Shift rows down by ``lines``; blank rows enter at the top."""
    shifted = jnp.roll(display, lines, axis=1)
    return shifted & active_area(hires) & (yy >= lines)


def scroll_right(display, hires) -> jnp.ndarray:
    shifted = jnp.roll(display, SCROLL_PIXELS, axis=0)
    return shifted & active_area(hires) & (xx >= SCROLL_PIXELS)


def scroll_left(display, hires) -> jnp.ndarray:
    width, _ = screen_size(hires)
    shifted = jnp.roll(display, -SCROLL_PIXELS, axis=0)
    return shifted & active_area(hires) & (xx < width - SCROLL_PIXELS)


def screen(state: EmulatorState) -> np.ndarray:
    """Active pixel grid as a numpy bool array of shape (width, height)."""
    if bool(state.hires):
        return np.asarray(state.display)
    return np.asarray(state.display[:SCREEN_WIDTH, :SCREEN_HEIGHT])
