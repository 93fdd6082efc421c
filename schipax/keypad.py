"""Hex keypad state."""

from typing import Optional

import jax.numpy as jnp

from schipax.constants import NUM_KEYS
from schipax.errors import InvalidKeyError
from schipax.state import EmulatorState


def _check_key(index: int) -> None:
    if not 0 <= index < NUM_KEYS:
        raise InvalidKeyError(index)


def set_key(state: EmulatorState, index: int, pressed: bool) -> EmulatorState:
    """Press or release key ``index`` (0x0-0xF)."""
    _check_key(index)
    return state.replace(keypad=state.keypad.at[index].set(bool(pressed)))


def is_pressed(state: EmulatorState, index: int) -> bool:
    _check_key(index)
    return bool(state.keypad[index])


def any_pressed(state: EmulatorState) -> Optional[int]:
    """Lowest pressed key, or None when no key is down."""
    if not bool(jnp.any(state.keypad)):
        return None
    return int(first_pressed(state.keypad))


def first_pressed(keypad: jnp.ndarray) -> jnp.ndarray:
    """Index of the lowest pressed key (0 when none is pressed)."""
    return jnp.argmax(keypad)
