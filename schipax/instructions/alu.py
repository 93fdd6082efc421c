"""CHIP-8 ALU operations (8xxx)."""

import jax.numpy as jnp

from schipax.constants import FLAG_REGISTER
from schipax.decode import DecodedInstruction
from schipax.state import EmulatorState


def alu_set(vx, vy):
    """8XY0 - Set: VX = VY. VF untouched."""
    return vy, None


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, jnp.zeros((), dtype=jnp.uint8)


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, jnp.zeros((), dtype=jnp.uint8)


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, jnp.zeros((), dtype=jnp.uint8)


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.int32) + vy
    carry = result > 0xFF
    return result & 0xFF, carry


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = 1 when no borrow."""
    no_borrow = vx >= vy
    return (jnp.astype(vx, jnp.int32) - vy) & 0xFF, no_borrow


def alu_shift_right(vx, vy):
    """8XY6 - Shift right: VX >>= 1, VF = shifted-out bit."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when no borrow."""
    no_borrow = vy >= vx
    return (jnp.astype(vy, jnp.int32) - vx) & 0xFF, no_borrow


def alu_shift_left(vx, vy):
    """8XYE - Shift left: VX <<= 1, VF = shifted-out bit."""
    return (jnp.astype(vx, jnp.int32) << 1) & 0xFF, vx >> 7


LOGIC_OPERATIONS = (alu_or, alu_and, alu_xor)
SHIFT_OPERATIONS = (alu_shift_right, alu_shift_left)


def make_alu_instruction(operation):
    """Factory for 8XYN handlers.

    VX is written before VF, so VF as the destination ends up holding the flag.
    """
    def alu_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        vx = state.V[instruction.x]
        vy = state.V[instruction.y]
        if operation in SHIFT_OPERATIONS and state.quirks.shift_uses_vy:
            vx = vy

        result, vf = operation(vx, vy)
        new_V = state.V.at[instruction.x].set(jnp.astype(result, jnp.uint8))

        writes_flag = vf is not None and (
            operation not in LOGIC_OPERATIONS or state.quirks.logic_resets_vf
        )
        if writes_flag:
            new_V = new_V.at[FLAG_REGISTER].set(jnp.astype(vf, jnp.uint8))
        return state.replace(V=new_V)
    return alu_instruction


execute_load_register = make_alu_instruction(alu_set)
execute_or = make_alu_instruction(alu_or)
execute_and = make_alu_instruction(alu_and)
execute_xor = make_alu_instruction(alu_xor)
execute_add_register = make_alu_instruction(alu_add)
execute_subtract = make_alu_instruction(alu_sub_xy)
execute_shift_right = make_alu_instruction(alu_shift_right)
execute_subtract_reversed = make_alu_instruction(alu_sub_yx)
execute_shift_left = make_alu_instruction(alu_shift_left)
