"""System instructions (0x0xxx) and invalid opcodes."""

from schipax.constants import INSTRUCTION_BYTES
from schipax.decode import DecodedInstruction
from schipax.errors import Fault
from schipax.stack import pop
from schipax.state import EmulatorState, RunMode, halt, halt_when, set_mode


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """No operation."""
    return state


def execute_sys(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """0NNN - Call machine code routine; ignored."""
    return no_op(state, instruction)


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address, underflowed = pop(state.stack)
    return halt_when(
        underflowed,
        state,
        Fault.STACK_UNDERFLOW,
        state.pc - INSTRUCTION_BYTES,
        lambda s: s.replace(stack=stack, pc=address)
    )


def execute_exit(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00FD - Stop the interpreter (SuperChip8)."""
    return set_mode(state, RunMode.DONE)


def execute_unknown(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Unassigned encoding: halt and remember the word."""
    return halt(state, Fault.INVALID_OPCODE, instruction.raw)
