"""Tests for system instructions (0xxx)."""

import jax.numpy as jnp
from schipax import RunMode, execute


def test_execute_clear_screen(fresh_state):
    """00E0 - Clear display."""
    state = fresh_state.replace(display=fresh_state.display.at[0, 0].set(True))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.display) == 0


def test_execute_call_and_return(fresh_state):
    """2NNN (call) and 00EE (return) together."""
    state = fresh_state
    initial_pc = state.pc

    state = execute(state, 0x2300)
    assert state.pc == 0x300
    assert state.stack.data[state.stack.pointer - 1] == initial_pc

    state = execute(state, 0x00EE)
    assert state.pc == initial_pc


def test_sys_is_ignored(fresh_state):
    """0NNN - Machine code calls do nothing."""
    state = execute(fresh_state, 0x0123)

    assert state.pc == fresh_state.pc
    assert int(state.mode) == RunMode.RUNNING
    assert jnp.array_equal(state.V, fresh_state.V)


def test_exit_finishes(fresh_state):
    """00FD - Stop the interpreter."""
    state = execute(fresh_state, 0x00FD)
    assert int(state.mode) == RunMode.DONE
