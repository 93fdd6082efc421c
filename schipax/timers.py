"""Delay and sound timers, counted down at 60 Hz by the host."""

import jax.numpy as jnp

from schipax.state import EmulatorState


def _count_down(timer: jnp.ndarray) -> jnp.ndarray:
    return jnp.where(timer > 0, timer - 1, timer).astype(jnp.uint8)


def tick(state: EmulatorState) -> EmulatorState:
    """Decrement both timers by one, stopping at zero."""
    return state.replace(
        delay_timer=_count_down(state.delay_timer),
        sound_timer=_count_down(state.sound_timer),
    )


def set_delay(state: EmulatorState, value) -> EmulatorState:
    return state.replace(delay_timer=jnp.astype(value, jnp.uint8))


def set_sound(state: EmulatorState, value) -> EmulatorState:
    return state.replace(sound_timer=jnp.astype(value, jnp.uint8))


def sound_active(state: EmulatorState) -> bool:
    """Whether the host should be producing a tone."""
    return bool(state.sound_timer > 0)
