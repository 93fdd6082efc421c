"""Main CHIP-8 / SuperChip8 execution engine."""

from functools import partial
from typing import Optional

import jax
import jax.lax
import jax.numpy as jnp

from schipax.constants import INSTRUCTION_BYTES, PROGRAM_START
from schipax.decode import Op, decode
from schipax.memory import ByteData, guard_range, load, read_span
from schipax.state import EmulatorState, RunMode, create_state
from schipax.instructions.system import execute_exit, execute_return, execute_sys, execute_unknown
from schipax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from schipax.instructions.alu import (
    execute_load_register, execute_or, execute_and, execute_xor, execute_add_register,
    execute_subtract, execute_shift_right, execute_subtract_reversed, execute_shift_left
)
from schipax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from schipax.instructions.display import (
    execute_clear_screen, execute_display, execute_scroll_down, execute_scroll_right,
    execute_scroll_left, execute_low_resolution, execute_high_resolution
)
from schipax.instructions.misc import (
    execute_get_delay_timer, execute_set_delay_timer, execute_set_sound_timer,
    execute_add_to_index, execute_wait_for_key, execute_font_character,
    execute_big_font_character, execute_bcd_conversion, execute_store_registers,
    execute_load_registers, execute_store_flags, execute_load_flags
)


HANDLERS = {
    Op.UNKNOWN: execute_unknown,
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.SYS: execute_sys,
    Op.SCROLL_DOWN: execute_scroll_down,
    Op.SCROLL_RIGHT: execute_scroll_right,
    Op.SCROLL_LEFT: execute_scroll_left,
    Op.EXIT: execute_exit,
    Op.LOW: execute_low_resolution,
    Op.HIGH: execute_high_resolution,
    Op.JUMP: execute_jump,
    Op.CALL: execute_call,
    Op.SKIP_EQ_IMM: execute_skip_if_equal_immediate,
    Op.SKIP_NEQ_IMM: execute_skip_if_not_equal_immediate,
    Op.SKIP_EQ_REG: execute_skip_if_equal_register,
    Op.SKIP_NEQ_REG: execute_skip_if_not_equal_register,
    Op.JUMP_OFFSET: execute_jump_with_offset,
    Op.LOAD_IMM: execute_set,
    Op.ADD_IMM: execute_add,
    Op.LOAD_INDEX: execute_set_index,
    Op.RANDOM: execute_random,
    Op.LOAD_REG: execute_load_register,
    Op.OR: execute_or,
    Op.AND: execute_and,
    Op.XOR: execute_xor,
    Op.ADD_REG: execute_add_register,
    Op.SUB: execute_subtract,
    Op.SHR: execute_shift_right,
    Op.SUBN: execute_subtract_reversed,
    Op.SHL: execute_shift_left,
    Op.DRAW: execute_display,
    Op.SKIP_KEY: execute_skip_if_key,
    Op.SKIP_NOT_KEY: execute_skip_if_not_key,
    Op.WAIT_KEY: execute_wait_for_key,
    Op.LOAD_DELAY: execute_get_delay_timer,
    Op.SET_DELAY: execute_set_delay_timer,
    Op.SET_SOUND: execute_set_sound_timer,
    Op.ADD_INDEX: execute_add_to_index,
    Op.LOAD_FONT: execute_font_character,
    Op.LOAD_BIG_FONT: execute_big_font_character,
    Op.STORE_BCD: execute_bcd_conversion,
    Op.STORE_REGS: execute_store_registers,
    Op.LOAD_REGS: execute_load_registers,
    Op.STORE_FLAGS: execute_store_flags,
    Op.LOAD_FLAGS: execute_load_flags,
}

# Op values are contiguous from 0, so the switch index is the Op itself
_BRANCHES = [HANDLERS[op] for op in sorted(Op)]


@jax.jit
def execute(state: EmulatorState, instruction) -> EmulatorState:
    """Execute single instruction; PC must already point past it."""
    decoded_instruction = decode(instruction)
    return jax.lax.switch(decoded_instruction.op, _BRANCHES, state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory and advance PC.

    A PC past 0xFFE halts the state with an address fault instead.
    """
    word = read_span(state.memory, state.pc, INSTRUCTION_BYTES)
    instruction = _pack_u16(word[0], word[1])
    state = guard_range(
        state, state.pc, INSTRUCTION_BYTES,
        lambda s: s.replace(pc=s.pc + INSTRUCTION_BYTES)
    )
    return state, instruction


def _cycle(state: EmulatorState) -> EmulatorState:
    state, instruction = fetch(state)
    return jax.lax.cond(
        state.mode == int(RunMode.HALTED),
        lambda s, _: s,
        execute,
        state, instruction
    )


@jax.jit
def step(state: EmulatorState) -> EmulatorState:
    """Fetch and execute one instruction; halted or finished states are left as is."""
    return jax.lax.cond(state.mode >= int(RunMode.HALTED), lambda s: s, _cycle, state)


def run_instruction(state, _):
    return step(state), None


@partial(jax.jit, static_argnums=1)
def run(state: EmulatorState, n: int) -> EmulatorState:
    """Run ``n`` steps; stops making progress once the state halts."""
    state, _ = jax.lax.scan(run_instruction, state, length=n)
    return state


def load_rom(state: EmulatorState, rom: ByteData, origin: int = PROGRAM_START) -> EmulatorState:
    """Load ROM data into memory starting at ``origin``."""
    return state.replace(memory=load(state.memory, rom, origin))


def reset(state: EmulatorState, rom: Optional[ByteData] = None, clear_flags: bool = False) -> EmulatorState:
    """Return to power-on state, optionally loading ``rom``.

    Flag registers survive a reset unless ``clear_flags`` is set.
    """
    new_state = create_state(rng=state.rng, quirks=state.quirks)
    if not clear_flags:
        new_state = new_state.replace(flags=state.flags)
    if rom is not None:
        new_state = load_rom(new_state, rom)
    return new_state
