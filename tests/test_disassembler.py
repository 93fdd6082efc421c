"""Tests for the disassembler."""

import pytest
from schipax import decode, disassemble, format_instruction
from conftest import assemble


class TestFormatInstruction:
    """Cowgod-style rendering."""

    @pytest.mark.parametrize("word, text", [
        (0x00E0, "CLS"),
        (0x00EE, "RET"),
        (0x0ABC, "SYS 0xABC"),
        (0x00C4, "SCD 0x4"),
        (0x00FF, "HIGH"),
        (0x1200, "JP 0x200"),
        (0x2ABC, "CALL 0xABC"),
        (0x3A2B, "SE VA, 0x2B"),
        (0x5120, "SE V1, V2"),
        (0x612A, "LD V1, 0x2A"),
        (0x8126, "SHR V1, V2"),
        (0xA123, "LD I, 0x123"),
        (0xB300, "JP V0, 0x300"),
        (0xD015, "DRW V0, V1, 0x5"),
        (0xD010, "DRW V0, V1, 0x0"),
        (0xE39E, "SKP V3"),
        (0xF40A, "LD V4, K"),
        (0xF529, "LD F, V5"),
        (0xF530, "LD HF, V5"),
        (0xF633, "LD B, V6"),
        (0xF755, "LD [I], V7"),
        (0xF765, "LD V7, [I]"),
        (0xF775, "LD R, V7"),
        (0xF785, "LD V7, R"),
    ])
    def test_mnemonics(self, word, text):
        assert format_instruction(decode(word)) == text

    def test_unknown_word(self):
        assert format_instruction(decode(0x5121)) == "DW 0x5121"


class TestDisassemble:
    """Whole-ROM listing."""

    def test_addresses_and_text(self):
        rom = assemble(0x00E0, 0x612A, 0x1200)
        assert list(disassemble(rom)) == [
            (0x200, "CLS"),
            (0x202, "LD V1, 0x2A"),
            (0x204, "JP 0x200"),
        ]

    def test_is_lazy(self):
        listing = disassemble(assemble(0x00E0, 0x00EE))
        assert next(listing) == (0x200, "CLS")

    def test_trailing_odd_byte(self):
        rom = assemble(0x00EE) + b"\xAB"
        assert list(disassemble(rom)) == [(0x200, "RET"), (0x202, "DB 0xAB")]

    def test_offset_skips_data(self):
        rom = b"\x01\x02\x03\x04" + assemble(0x00FD)
        assert list(disassemble(rom, offset=4)) == [(0x204, "EXIT")]

    def test_custom_origin(self):
        assert list(disassemble(assemble(0x00E0), origin=0x600)) == [(0x600, "CLS")]

    def test_empty_rom(self):
        assert list(disassemble(b"")) == []

    def test_negative_offset(self):
        with pytest.raises(ValueError):
            list(disassemble(b"\x00\xE0", offset=-1))
