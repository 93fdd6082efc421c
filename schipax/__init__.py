"""CHIP-8 / SuperChip8 emulator package."""

from schipax.state import EmulatorState, Quirks, QUIRK_PRESETS, RunMode, create_state, get_quirks
from schipax.emulator import execute, fetch, load_rom, reset, run, step
from schipax.decode import DecodedInstruction, Op, decode
from schipax.disassembler import disassemble, format_instruction
from schipax.errors import (
    EmulatorError, Fault, RomTooLargeError, AddressOutOfRangeError, StackOverflowError,
    StackUnderflowError, InvalidOpcodeError, InvalidRegisterError, InvalidKeyError,
    InvalidResolutionError, error_from_state, raise_for_fault
)
from schipax.registers import get_register, set_register
from schipax.machine import Machine
from schipax.constants import *
from schipax.rendering import chip8_display_to_rgb, create_color_scheme

__all__ = [
    "EmulatorState",
    "Quirks",
    "QUIRK_PRESETS",
    "RunMode",
    "create_state",
    "get_quirks",
    "fetch",
    "execute",
    "step",
    "run",
    "load_rom",
    "reset",
    "DecodedInstruction",
    "Op",
    "decode",
    "disassemble",
    "format_instruction",
    "EmulatorError",
    "Fault",
    "RomTooLargeError",
    "AddressOutOfRangeError",
    "StackOverflowError",
    "StackUnderflowError",
    "InvalidOpcodeError",
    "InvalidRegisterError",
    "InvalidKeyError",
    "InvalidResolutionError",
    "error_from_state",
    "raise_for_fault",
    "get_register",
    "set_register",
    "Machine",
    "PROGRAM_START",
    "FONT_START",
    "BIG_FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "HIRES_SCREEN_WIDTH",
    "HIRES_SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "create_color_scheme",
]
