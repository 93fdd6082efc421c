"""Emulator errors and the fault codes recorded by jitted execution."""

from enum import IntEnum
from typing import Optional

from schipax.constants import INSTRUCTION_BYTES


class Fault(IntEnum):
    """Fault codes stored in ``EmulatorState.fault``."""
    NONE = 0
    ADDRESS_OUT_OF_RANGE = 1
    STACK_OVERFLOW = 2
    STACK_UNDERFLOW = 3
    INVALID_OPCODE = 4
    INVALID_REGISTER = 5


class EmulatorError(Exception):
    """Base class for every error raised by the emulator."""


class RomTooLargeError(EmulatorError):
    """ROM would not fit in memory at the requested origin."""

    def __init__(self, size: int, origin: int):
        self.size = size
        self.origin = origin
        super().__init__(f"ROM of {size} bytes does not fit in memory at 0x{origin:03X}")


class AddressOutOfRangeError(EmulatorError):
    """Memory access outside 0x000-0xFFF."""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"Address out of range: 0x{address:X}")


class StackOverflowError(EmulatorError):
    """Subroutine call with a full stack."""

    def __init__(self, address: Optional[int] = None):
        self.address = address
        where = "" if address is None else f" at 0x{address:03X}"
        super().__init__(f"Stack overflow{where}")


class StackUnderflowError(EmulatorError):
    """Return with an empty stack."""

    def __init__(self, address: Optional[int] = None):
        self.address = address
        where = "" if address is None else f" at 0x{address:03X}"
        super().__init__(f"Stack underflow{where}")


class InvalidOpcodeError(EmulatorError):
    """Instruction word the decoder could not classify."""

    def __init__(self, instruction: int, address: Optional[int] = None):
        self.instruction = instruction
        self.address = address
        where = "" if address is None else f" at 0x{address:03X}"
        super().__init__(f"Invalid opcode 0x{instruction:04X}{where}")


class InvalidRegisterError(EmulatorError, ValueError):
    """Register index outside the valid range."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Invalid register index: {index}")


class InvalidKeyError(EmulatorError, ValueError):
    """Key index outside 0x0-0xF."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Invalid key index: {index}")


class InvalidResolutionError(EmulatorError, ValueError):
    """Unknown display resolution mode."""

    def __init__(self, mode):
        self.mode = mode
        super().__init__(f"Invalid resolution mode: {mode!r}")


def error_from_state(state) -> Optional[EmulatorError]:
    """Build the exception matching the fault recorded in ``state``, if any."""
    fault = Fault(int(state.fault))
    info = int(state.fault_info)
    instruction_address = int(state.pc) - INSTRUCTION_BYTES

    if fault == Fault.NONE:
        return None
    if fault == Fault.ADDRESS_OUT_OF_RANGE:
        return AddressOutOfRangeError(info)
    if fault == Fault.STACK_OVERFLOW:
        return StackOverflowError(info)
    if fault == Fault.STACK_UNDERFLOW:
        return StackUnderflowError(info)
    if fault == Fault.INVALID_OPCODE:
        return InvalidOpcodeError(info, instruction_address)
    return InvalidRegisterError(info)


def raise_for_fault(state) -> None:
    """Raise the typed error for a faulted state, do nothing otherwise."""
    error = error_from_state(state)
    if error is not None:
        raise error
