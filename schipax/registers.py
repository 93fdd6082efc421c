"""General-purpose register access for host code."""

from schipax.constants import NUM_REGISTERS
from schipax.errors import InvalidRegisterError
from schipax.state import EmulatorState


def _check_index(index: int) -> None:
    if not 0 <= index < NUM_REGISTERS:
        raise InvalidRegisterError(index)


def get_register(state: EmulatorState, index: int) -> int:
    """Read VX."""
    _check_index(index)
    return int(state.V[index])


def set_register(state: EmulatorState, index: int, value: int) -> EmulatorState:
    """Write VX, wrapping the value to 8 bits."""
    _check_index(index)
    return state.replace(V=state.V.at[index].set(value & 0xFF))
