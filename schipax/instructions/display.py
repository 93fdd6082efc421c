"""Display instructions: DXYN and the SuperChip8 screen operations."""

import jax.numpy as jnp

from schipax.constants import FLAG_REGISTER
from schipax.decode import DecodedInstruction
from schipax.display import blit, clear, scroll_down, scroll_left, scroll_right, sprite_rows, switch_resolution
from schipax.memory import guard_range, read_span
from schipax.state import EmulatorState


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=clear(state.display))


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N; DXY0 draws a 16x16 sprite."""
    extended = instruction.n == 0
    sprite = read_span(state.memory, state.I, 32)

    rows = jnp.where(extended, sprite_rows(sprite, extended=True), jnp.astype(sprite[:16], jnp.uint16))
    height = jnp.where(extended, 16, instruction.n)
    sprite_width = jnp.where(extended, 16, 8)
    length = jnp.where(extended, 32, instruction.n)

    def draw(state: EmulatorState) -> EmulatorState:
        display, collided = blit(
            state.display, state.hires,
            state.V[instruction.x], state.V[instruction.y],
            rows, height, sprite_width
        )
        return state.replace(
            display=display,
            V=state.V.at[FLAG_REGISTER].set(jnp.astype(collided, jnp.uint8))
        )

    return guard_range(state, state.I, length, draw)


def execute_scroll_down(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00CN - Scroll display N lines down."""
    return state.replace(display=scroll_down(state.display, state.hires, instruction.n))


def execute_scroll_right(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00FB - Scroll display 4 pixels right."""
    return state.replace(display=scroll_right(state.display, state.hires))


def execute_scroll_left(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00FC - Scroll display 4 pixels left."""
    return state.replace(display=scroll_left(state.display, state.hires))


def execute_low_resolution(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00FE - Switch to 64x32."""
    return switch_resolution(state, False)


def execute_high_resolution(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00FF - Switch to 128x64."""
    return switch_resolution(state, True)
