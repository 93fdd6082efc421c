"""Tests for memory, register and index operations."""

import pytest
import jax.numpy as jnp
from schipax import (
    AddressOutOfRangeError, Fault, InvalidRegisterError, MEMORY_SIZE, PROGRAM_START,
    RomTooLargeError, RunMode, execute, load_rom
)
from schipax.memory import load, read_byte, read_word, write_byte
from schipax.registers import get_register, set_register


class TestBasicMemory:
    """Test register immediates."""

    def test_set_basic(self, fresh_state):
        """6XNN - Set VX = NN."""
        state = execute(fresh_state, 0x600A)  # V0 = 0xA
        assert state.V[0] == 0xA

    def test_add_basic(self, fresh_state):
        """7XNN - Add NN to VX."""
        state = fresh_state.replace(V=fresh_state.V.at[1].set(0x10))
        state = execute(state, 0x7105)  # V1 += 5
        assert state.V[1] == 0x15

    def test_add_wraps_without_carry(self, fresh_state):
        """7XNN - Wraps modulo 256 and leaves VF alone."""
        state = fresh_state.replace(V=fresh_state.V.at[1].set(0xFF))
        state = execute(state, 0x7102)
        assert state.V[1] == 0x01
        assert state.V[15] == 0


class TestIndexRegister:
    """Test I register operations."""

    def test_set_index_basic(self, fresh_state):
        """ANNN - Set I register to NNN."""
        state = execute(fresh_state, 0xA123)
        assert state.I == 0x123

    def test_set_index_maximum(self, fresh_state):
        """ANNN - Set I register to maximum 12-bit value."""
        state = execute(fresh_state, 0xAFFF)
        assert state.I == 0xFFF

    def test_set_index_common_values(self, fresh_state):
        """ANNN - Test common memory addresses."""
        for value in [0x200, 0x300, 0x500, 0xA00, 0xEA0]:
            state = execute(fresh_state, 0xA000 | value)
            assert state.I == value, f"Failed to set I to 0x{value:03X}"


class TestRandom:
    """Test random number generation."""

    def test_random_zero_mask(self, fresh_state):
        """CXNN - Random AND with 0x00 should always be 0."""
        state = execute(fresh_state, 0xC000)
        assert state.V[0] == 0

    def test_random_bit_mask(self, fresh_state):
        """CXNN - Random AND with specific mask."""
        state = execute(fresh_state, 0xC20F)
        assert 0 <= state.V[2] <= 15

    def test_random_advances_key(self, fresh_state):
        """CXNN - Each call consumes the generator state."""
        state = execute(fresh_state, 0xC0FF)
        assert not jnp.array_equal(state.rng, fresh_state.rng)

    def test_random_mask_patterns(self, fresh_state):
        """CXNN - Results never set bits outside the mask."""
        state = fresh_state
        for i, mask in enumerate([0x01, 0x03, 0x07, 0x80]):
            reg = i + 6
            state = execute(state, 0xC000 | (reg << 8) | mask)
            assert (int(state.V[reg]) & ~mask) == 0


class TestMemoryAccess:
    """Test host-side memory helpers."""

    def test_load_at_program_start(self, fresh_state):
        memory = load(fresh_state.memory, b"\x12\x34\x56")
        assert read_word(memory, PROGRAM_START) == 0x1234
        assert read_byte(memory, PROGRAM_START + 2) == 0x56

    def test_load_rom_into_state(self, fresh_state):
        state = load_rom(fresh_state, bytes([0xAB, 0xCD]), origin=0x300)
        assert state.memory[0x300] == 0xAB
        assert state.memory[0x301] == 0xCD

    def test_load_fills_memory_exactly(self, fresh_state):
        rom = bytes(MEMORY_SIZE - PROGRAM_START)
        memory = load(fresh_state.memory, rom)
        assert memory.shape == (MEMORY_SIZE,)

    def test_load_too_large(self, fresh_state):
        rom = bytes(MEMORY_SIZE - PROGRAM_START + 1)
        with pytest.raises(RomTooLargeError):
            load(fresh_state.memory, rom)

    def test_write_then_read(self, fresh_state):
        memory = write_byte(fresh_state.memory, 0xFFF, 0x7E)
        assert read_byte(memory, 0xFFF) == 0x7E

    def test_read_out_of_range(self, fresh_state):
        with pytest.raises(AddressOutOfRangeError) as excinfo:
            read_byte(fresh_state.memory, 0x1000)
        assert excinfo.value.address == 0x1000

    def test_read_word_straddling_end(self, fresh_state):
        with pytest.raises(AddressOutOfRangeError) as excinfo:
            read_word(fresh_state.memory, 0xFFF)
        assert excinfo.value.address == 0x1000

    def test_write_invalid_value(self, fresh_state):
        with pytest.raises(ValueError):
            write_byte(fresh_state.memory, 0x300, 0x100)


class TestRegisters:
    """Test host-side register helpers."""

    def test_set_and_get(self, fresh_state):
        state = set_register(fresh_state, 0xA, 0x1FF)
        assert get_register(state, 0xA) == 0xFF

    @pytest.mark.parametrize("index", [-1, 16])
    def test_invalid_register(self, fresh_state, index):
        with pytest.raises(InvalidRegisterError):
            get_register(fresh_state, index)
        with pytest.raises(ValueError):
            set_register(fresh_state, index, 0)


class TestRegisterTransfer:
    """Test FX55 / FX65 bounds handling."""

    def test_store_past_end_of_memory_faults(self, fresh_state):
        state = fresh_state.replace(I=jnp.asarray(0xFFE, dtype=jnp.uint16))
        state = execute(state, 0xF255)  # Needs 0xFFE..0x1000
        assert int(state.mode) == RunMode.HALTED
        assert int(state.fault) == Fault.ADDRESS_OUT_OF_RANGE
        assert int(state.fault_info) == 0x1000

    def test_store_up_to_last_byte(self, fresh_state):
        state = fresh_state.replace(I=jnp.asarray(0xFFE, dtype=jnp.uint16))
        state = state.replace(V=state.V.at[0].set(0x11).at[1].set(0x22))
        state = execute(state, 0xF155)
        assert int(state.mode) == RunMode.RUNNING
        assert state.memory[0xFFE] == 0x11
        assert state.memory[0xFFF] == 0x22

    def test_load_past_end_of_memory_faults(self, fresh_state):
        state = fresh_state.replace(I=jnp.asarray(0xFFF, dtype=jnp.uint16))
        state = execute(state, 0xF165)
        assert int(state.fault) == Fault.ADDRESS_OUT_OF_RANGE
