"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp

from schipax.constants import INSTRUCTION_BYTES
from schipax.decode import DecodedInstruction
from schipax.errors import Fault
from schipax.stack import push
from schipax.state import EmulatorState, halt_when


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    stack, overflowed = push(state.stack, state.pc)
    return halt_when(
        overflowed,
        state,
        Fault.STACK_OVERFLOW,
        state.pc - INSTRUCTION_BYTES,
        lambda s: execute_jump(s.replace(stack=stack), instruction)
    )


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            lambda s: s.replace(pc=s.pc + INSTRUCTION_BYTES),
            lambda s: s,
            state
        )
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
)

execute_skip_if_key = make_skip_instruction(
    lambda state, inst: state.keypad[state.V[inst.x] & 0xF]
)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, inst: ~state.keypad[state.V[inst.x] & 0xF]
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to NNN + V0, or to XNN + VX with the ``jump_uses_vx`` quirk.

    The target is not masked: a jump past 0xFFE faults on the next fetch.
    """
    register = instruction.x if state.quirks.jump_uses_vx else 0
    jump_address = jnp.astype(instruction.nnn, jnp.int32) + state.V[register]
    return state.replace(pc=jnp.astype(jump_address, jnp.uint16))
