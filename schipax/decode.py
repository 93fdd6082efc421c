"""CHIP-8 / SuperChip8 instruction decoding."""

from enum import IntEnum

import jax.numpy as jnp
import numpy as np
from chex import dataclass


class Op(IntEnum):
    """Closed set of operations an instruction word can decode to."""
    UNKNOWN = 0
    # 0x0 family
    CLS = 1
    RET = 2
    SYS = 3
    SCROLL_DOWN = 4
    SCROLL_RIGHT = 5
    SCROLL_LEFT = 6
    EXIT = 7
    LOW = 8
    HIGH = 9
    # control flow
    JUMP = 10
    CALL = 11
    SKIP_EQ_IMM = 12
    SKIP_NEQ_IMM = 13
    SKIP_EQ_REG = 14
    SKIP_NEQ_REG = 15
    JUMP_OFFSET = 16
    # immediate and index loads
    LOAD_IMM = 17
    ADD_IMM = 18
    LOAD_INDEX = 19
    RANDOM = 20
    # 0x8 ALU family
    LOAD_REG = 21
    OR = 22
    AND = 23
    XOR = 24
    ADD_REG = 25
    SUB = 26
    SHR = 27
    SUBN = 28
    SHL = 29
    # display
    DRAW = 30
    # keypad
    SKIP_KEY = 31
    SKIP_NOT_KEY = 32
    WAIT_KEY = 33
    # 0xF family
    LOAD_DELAY = 34
    SET_DELAY = 35
    SET_SOUND = 36
    ADD_INDEX = 37
    LOAD_FONT = 38
    LOAD_BIG_FONT = 39
    STORE_BCD = 40
    STORE_REGS = 41
    LOAD_REGS = 42
    STORE_FLAGS = 43
    LOAD_FLAGS = 44


_ALU_OPS = {
    0x0: Op.LOAD_REG, 0x1: Op.OR, 0x2: Op.AND, 0x3: Op.XOR, 0x4: Op.ADD_REG,
    0x5: Op.SUB, 0x6: Op.SHR, 0x7: Op.SUBN, 0xE: Op.SHL,
}

_KEY_OPS = {0x9E: Op.SKIP_KEY, 0xA1: Op.SKIP_NOT_KEY}

_MISC_OPS = {
    0x07: Op.LOAD_DELAY, 0x0A: Op.WAIT_KEY, 0x15: Op.SET_DELAY, 0x18: Op.SET_SOUND,
    0x1E: Op.ADD_INDEX, 0x29: Op.LOAD_FONT, 0x30: Op.LOAD_BIG_FONT, 0x33: Op.STORE_BCD,
    0x55: Op.STORE_REGS, 0x65: Op.LOAD_REGS, 0x75: Op.STORE_FLAGS, 0x85: Op.LOAD_FLAGS,
}

_SYSTEM_OPS = {
    0x00E0: Op.CLS, 0x00EE: Op.RET, 0x00FB: Op.SCROLL_RIGHT, 0x00FC: Op.SCROLL_LEFT,
    0x00FD: Op.EXIT, 0x00FE: Op.LOW, 0x00FF: Op.HIGH,
}

_FAMILY_OPS = {
    0x1: Op.JUMP, 0x2: Op.CALL, 0x3: Op.SKIP_EQ_IMM, 0x4: Op.SKIP_NEQ_IMM,
    0x6: Op.LOAD_IMM, 0x7: Op.ADD_IMM, 0xA: Op.LOAD_INDEX, 0xB: Op.JUMP_OFFSET,
    0xC: Op.RANDOM, 0xD: Op.DRAW,
}


def _classify(words: np.ndarray) -> np.ndarray:
    """Vectorized classification of instruction words into ``Op`` values."""
    family = words >> 12
    n = words & 0x000F
    nn = words & 0x00FF

    conditions, choices = [], []
    for word, op in _SYSTEM_OPS.items():
        conditions.append(words == word)
        choices.append(op)
    conditions.append((words & 0xFFF0) == 0x00C0)
    choices.append(Op.SCROLL_DOWN)
    conditions.append(family == 0x0)
    choices.append(Op.SYS)

    for family_nibble, op in _FAMILY_OPS.items():
        conditions.append(family == family_nibble)
        choices.append(op)

    conditions.append((family == 0x5) & (n == 0))
    choices.append(Op.SKIP_EQ_REG)
    conditions.append((family == 0x9) & (n == 0))
    choices.append(Op.SKIP_NEQ_REG)

    for nibble, op in _ALU_OPS.items():
        conditions.append((family == 0x8) & (n == nibble))
        choices.append(op)
    for byte, op in _KEY_OPS.items():
        conditions.append((family == 0xE) & (nn == byte))
        choices.append(op)
    for byte, op in _MISC_OPS.items():
        conditions.append((family == 0xF) & (nn == byte))
        choices.append(op)

    return np.select(conditions, [int(op) for op in choices], default=int(Op.UNKNOWN))


OPCODE_TABLE = _classify(np.arange(0x10000, dtype=np.uint32)).astype(np.uint8)
_OPCODE_LOOKUP = jnp.asarray(OPCODE_TABLE)


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded instruction with its operation tag and extracted operands."""
    raw: int
    op: int      # Op value
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def decode(instruction) -> DecodedInstruction:
    """Decode 16-bit instruction into components.

    Total over 0x0000-0xFFFF: unassigned words decode to ``Op.UNKNOWN``.
    Python ints are classified with numpy, traced words with jax.numpy.
    """
    if isinstance(instruction, int):
        if not 0 <= instruction <= 0xFFFF:
            raise ValueError(f"Instruction word out of range: {instruction:#x}")
        op = int(OPCODE_TABLE[instruction])
    else:
        op = _OPCODE_LOOKUP[instruction]

    return DecodedInstruction(
        raw=instruction,
        op=op,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )
