"""Test configuration and fixtures for emulator tests."""

import pytest
import jax.numpy as jnp
from schipax import Machine, create_state, get_quirks
from schipax.logging import ConsoleLogger


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state with default quirks."""
    return create_state()


@pytest.fixture
def legacy_state():
    """Provide a fresh state with COSMAC VIP quirks."""
    return create_state(quirks=get_quirks("chip8"))


@pytest.fixture
def schip_state():
    """Provide a fresh state with SuperChip 1.1 quirks."""
    return create_state(quirks=get_quirks("schip"))


@pytest.fixture
def machine():
    """Provide a machine whose logger stays quiet."""
    return Machine(logger=ConsoleLogger("test", log_level="CRITICAL", use_colors=False))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def assemble(*words):
    """Pack instruction words into big-endian ROM bytes."""
    return b"".join(word.to_bytes(2, "big") for word in words)
