"""CHIP-8 memory access and loading."""

from typing import Iterable, Union

import jax.numpy as jnp
import numpy as np

from schipax.constants import MEMORY_SIZE, PROGRAM_START
from schipax.errors import AddressOutOfRangeError, Fault, RomTooLargeError
from schipax.state import EmulatorState, halt_when

ByteData = Union[bytes, bytearray, Iterable[int]]


def _check_range(address: int, length: int) -> None:
    if address < 0:
        raise AddressOutOfRangeError(address)
    if address + length > MEMORY_SIZE:
        raise AddressOutOfRangeError(max(address, MEMORY_SIZE))


def load(memory: jnp.ndarray, data: ByteData, origin: int = PROGRAM_START) -> jnp.ndarray:
    """Copy ``data`` into memory starting at ``origin``.

    Raises:
        RomTooLargeError: if the data would run past 0xFFF
    """
    data = bytes(data)
    end = origin + len(data)
    if origin < 0 or end > MEMORY_SIZE:
        raise RomTooLargeError(len(data), origin)
    return memory.at[origin:end].set(np.frombuffer(data, dtype=np.uint8))


def read_byte(memory: jnp.ndarray, address: int) -> int:
    _check_range(address, 1)
    return int(memory[address])


def write_byte(memory: jnp.ndarray, address: int, value: int) -> jnp.ndarray:
    _check_range(address, 1)
    if not 0 <= value <= 0xFF:
        raise ValueError(f"Byte value out of range: {value}")
    return memory.at[address].set(value)


def read_word(memory: jnp.ndarray, address: int) -> int:
    """Read a big-endian 16-bit word."""
    _check_range(address, 2)
    return (int(memory[address]) << 8) | int(memory[address + 1])


def read_span(memory: jnp.ndarray, address, length: int) -> jnp.ndarray:
    """Gather ``length`` bytes from ``address``; positions past the end repeat the last byte."""
    return jnp.take(memory, address + jnp.arange(length), mode="clip")


def guard_range(state: EmulatorState, address, length, update) -> EmulatorState:
    """Apply ``update`` when ``length`` bytes from ``address`` are addressable, otherwise halt."""
    start = jnp.astype(address, jnp.int32)
    end = start + length
    return halt_when(
        end > MEMORY_SIZE,
        state,
        Fault.ADDRESS_OUT_OF_RANGE,
        jnp.maximum(start, MEMORY_SIZE),
        update
    )
