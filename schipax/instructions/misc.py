"""CHIP-8 / SuperChip8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp

from schipax.constants import (
    ADDRESS_MASK, ADDRESS_MAX, BIG_FONT_CHAR_BYTES, BIG_FONT_START, FLAG_REGISTER,
    FONT_CHAR_BYTES, FONT_START, INSTRUCTION_BYTES, NUM_FLAG_REGISTERS, NUM_REGISTERS
)
from schipax.decode import DecodedInstruction
from schipax.errors import Fault
from schipax.keypad import first_pressed
from schipax.memory import guard_range, read_span
from schipax.state import EmulatorState, RunMode, halt_when, set_mode
from schipax.timers import set_delay, set_sound


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return set_delay(state, state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return set_sound(state, state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, wrapping at 16 bits."""
    total = jnp.astype(state.I, jnp.int32) + state.V[instruction.x]
    state = state.replace(I=jnp.astype(total & ADDRESS_MASK, jnp.uint16))
    if state.quirks.index_overflow_sets_vf:
        state = state.replace(V=state.V.at[FLAG_REGISTER].set(jnp.astype(total > ADDRESS_MAX, jnp.uint8)))
    return state


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    With no key down the instruction is re-run on the next step.
    """
    def key_pressed_action(state):
        pressed_key = jnp.astype(first_pressed(state.keypad), jnp.uint8)
        state = state.replace(V=state.V.at[instruction.x].set(pressed_key))
        return set_mode(state, RunMode.RUNNING)

    def wait_action(state):
        return set_mode(state.replace(pc=state.pc - INSTRUCTION_BYTES), RunMode.WAITING_FOR_KEY)

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    digit = jnp.astype(state.V[instruction.x] & 0xF, jnp.uint16)
    return state.replace(I=jnp.astype(FONT_START + digit * FONT_CHAR_BYTES, jnp.uint16))


def execute_big_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX30 - Set I to location of the 8x10 sprite for digit VX (SuperChip8)."""
    digit = jnp.astype(state.V[instruction.x] & 0xF, jnp.uint16)
    return state.replace(I=jnp.astype(BIG_FONT_START + digit * BIG_FONT_CHAR_BYTES, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    def store(state):
        value = state.V[instruction.x]
        digits = jnp.array([
            value // 100,
            (value // 10) % 10,
            value % 10
        ], dtype=jnp.uint8)
        indices = jnp.arange(3) + state.I
        return state.replace(memory=state.memory.at[indices].set(digits))

    return guard_range(state, state.I, 3, store)


def _advance_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    if state.quirks.load_store_increments_index:
        return state.replace(I=jnp.astype(state.I + instruction.x + 1, jnp.uint16))
    return state


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    def store(state):
        register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
        base_indices = state.I + jnp.arange(NUM_REGISTERS)
        current_memory_values = read_span(state.memory, state.I, NUM_REGISTERS)
        new_memory_values = jnp.where(register_mask, state.V, current_memory_values)
        # Indices past 0xFFF are dropped by the scatter; the mask keeps them unused anyway
        new_memory = state.memory.at[base_indices].set(new_memory_values, mode="drop")
        return _advance_index(state.replace(memory=new_memory), instruction)

    return guard_range(state, state.I, instruction.x + 1, store)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    def load(state):
        register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
        memory_values = read_span(state.memory, state.I, NUM_REGISTERS)
        new_V = jnp.where(register_mask, memory_values, state.V)
        return _advance_index(state.replace(V=new_V), instruction)

    return guard_range(state, state.I, instruction.x + 1, load)


def execute_store_flags(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX75 - Save V0 through VX to the flag registers (X <= 7, SuperChip8)."""
    def store(state):
        flag_mask = jnp.arange(NUM_FLAG_REGISTERS) <= instruction.x
        return state.replace(flags=jnp.where(flag_mask, state.V[:NUM_FLAG_REGISTERS], state.flags))

    return halt_when(
        instruction.x >= NUM_FLAG_REGISTERS,
        state,
        Fault.INVALID_REGISTER,
        instruction.x,
        store
    )


def execute_load_flags(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX85 - Restore V0 through VX from the flag registers (X <= 7, SuperChip8)."""
    def load(state):
        register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
        saved = jnp.concatenate([state.flags, state.V[NUM_FLAG_REGISTERS:]])
        return state.replace(V=jnp.where(register_mask, saved, state.V))

    return halt_when(
        instruction.x >= NUM_FLAG_REGISTERS,
        state,
        Fault.INVALID_REGISTER,
        instruction.x,
        load
    )
