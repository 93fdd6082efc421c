"""Read-only disassembly of ROM images into Cowgod-style mnemonics."""

from typing import Iterator, Tuple

from schipax.constants import INSTRUCTION_BYTES, PROGRAM_START
from schipax.decode import DecodedInstruction, Op, decode
from schipax.memory import ByteData

# Templates are filled from the decoded fields: x, y, n, nn, nnn
MNEMONICS = {
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.SYS: "SYS 0x{nnn:03X}",
    Op.SCROLL_DOWN: "SCD 0x{n:X}",
    Op.SCROLL_RIGHT: "SCR",
    Op.SCROLL_LEFT: "SCL",
    Op.EXIT: "EXIT",
    Op.LOW: "LOW",
    Op.HIGH: "HIGH",
    Op.JUMP: "JP 0x{nnn:03X}",
    Op.CALL: "CALL 0x{nnn:03X}",
    Op.SKIP_EQ_IMM: "SE V{x:X}, 0x{nn:02X}",
    Op.SKIP_NEQ_IMM: "SNE V{x:X}, 0x{nn:02X}",
    Op.SKIP_EQ_REG: "SE V{x:X}, V{y:X}",
    Op.SKIP_NEQ_REG: "SNE V{x:X}, V{y:X}",
    Op.JUMP_OFFSET: "JP V0, 0x{nnn:03X}",
    Op.LOAD_IMM: "LD V{x:X}, 0x{nn:02X}",
    Op.ADD_IMM: "ADD V{x:X}, 0x{nn:02X}",
    Op.LOAD_INDEX: "LD I, 0x{nnn:03X}",
    Op.RANDOM: "RND V{x:X}, 0x{nn:02X}",
    Op.LOAD_REG: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD_REG: "ADD V{x:X}, V{y:X}",
    Op.SUB: "SUB V{x:X}, V{y:X}",
    Op.SHR: "SHR V{x:X}, V{y:X}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}",
    Op.SHL: "SHL V{x:X}, V{y:X}",
    Op.DRAW: "DRW V{x:X}, V{y:X}, 0x{n:X}",
    Op.SKIP_KEY: "SKP V{x:X}",
    Op.SKIP_NOT_KEY: "SKNP V{x:X}",
    Op.WAIT_KEY: "LD V{x:X}, K",
    Op.LOAD_DELAY: "LD V{x:X}, DT",
    Op.SET_DELAY: "LD DT, V{x:X}",
    Op.SET_SOUND: "LD ST, V{x:X}",
    Op.ADD_INDEX: "ADD I, V{x:X}",
    Op.LOAD_FONT: "LD F, V{x:X}",
    Op.LOAD_BIG_FONT: "LD HF, V{x:X}",
    Op.STORE_BCD: "LD B, V{x:X}",
    Op.STORE_REGS: "LD [I], V{x:X}",
    Op.LOAD_REGS: "LD V{x:X}, [I]",
    Op.STORE_FLAGS: "LD R, V{x:X}",
    Op.LOAD_FLAGS: "LD V{x:X}, R",
}


def format_instruction(instruction: DecodedInstruction) -> str:
    """Render one decoded instruction, e.g. ``LD V1, 0x2A``.

    Words that decode to ``Op.UNKNOWN`` render as data: ``DW 0xNNNN``.
    """
    op = Op(int(instruction.op))
    if op == Op.UNKNOWN:
        return f"DW 0x{int(instruction.raw):04X}"
    return MNEMONICS[op].format(
        x=int(instruction.x),
        y=int(instruction.y),
        n=int(instruction.n),
        nn=int(instruction.nn),
        nnn=int(instruction.nnn),
    )


def disassemble(rom: ByteData, origin: int = PROGRAM_START, offset: int = 0) -> Iterator[Tuple[int, str]]:
    """Lazily yield ``(address, text)`` for each big-endian word of ``rom``.

    Args:
        rom: ROM image bytes
        origin: Address the first ROM byte would be loaded at
        offset: Number of leading bytes to skip, e.g. a data section

    A trailing odd byte is yielded as ``DB 0xNN``.
    """
    data = bytes(rom)
    if offset < 0:
        raise ValueError(f"Offset must be non-negative, got {offset}")

    position = offset
    while position + INSTRUCTION_BYTES <= len(data):
        word = (data[position] << 8) | data[position + 1]
        yield origin + position, format_instruction(decode(word))
        position += INSTRUCTION_BYTES

    if position < len(data):
        yield origin + position, f"DB 0x{data[position]:02X}"
