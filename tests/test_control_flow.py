"""Tests for control flow instructions."""

import pytest
from schipax import Fault, RunMode, execute


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1

    def test_jump_to_last_address(self, fresh_state):
        state = execute(fresh_state, 0x1FFE)
        assert state.pc == 0xFFE


class TestSkipInstructions:
    """Test all skip instruction variants."""

    def test_skip_if_equal_immediate_true(self, fresh_state):
        """3XNN - Should skip when VX == NN."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x42))
        initial_pc = state.pc

        state = execute(state, 0x3542)
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_immediate_false(self, fresh_state):
        """3XNN - Should not skip when VX != NN."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x41))
        initial_pc = state.pc

        state = execute(state, 0x3542)
        assert state.pc == initial_pc

    def test_skip_if_not_equal_immediate_true(self, fresh_state):
        """4XNN - Should skip when VX != NN."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x10))
        initial_pc = state.pc

        state = execute(state, 0x4320)
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_immediate_false(self, fresh_state):
        """4XNN - Should not skip when VX == NN."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x20))
        initial_pc = state.pc

        state = execute(state, 0x4320)
        assert state.pc == initial_pc

    def test_skip_if_equal_register_true(self, fresh_state):
        """5XY0 - Should skip when VX == VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x55))
        state = state.replace(V=state.V.at[2].set(0x55))
        initial_pc = state.pc

        state = execute(state, 0x5120)
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_register_false(self, fresh_state):
        """5XY0 - Should not skip when VX != VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x55))
        state = state.replace(V=state.V.at[2].set(0x44))
        initial_pc = state.pc

        state = execute(state, 0x5120)
        assert state.pc == initial_pc

    def test_skip_if_not_equal_register_true(self, fresh_state):
        """9XY0 - Should skip when VX != VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[7].set(0xAA))
        state = state.replace(V=state.V.at[8].set(0xBB))
        initial_pc = state.pc

        state = execute(state, 0x9780)
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_register_false(self, fresh_state):
        """9XY0 - Should not skip when VX == VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[7].set(0xCC))
        state = state.replace(V=state.V.at[8].set(0xCC))
        initial_pc = state.pc

        state = execute(state, 0x9780)
        assert state.pc == initial_pc

    def test_skip_with_zero_values(self, fresh_state):
        initial_pc = fresh_state.pc
        state = execute(fresh_state, 0x3000)  # V0 == 0
        assert state.pc == initial_pc + 2

    @pytest.mark.parametrize("instruction", [0x5121, 0x912F])
    def test_register_skips_need_zero_low_nibble(self, fresh_state, instruction):
        """5XYN / 9XYN with N != 0 are not instructions."""
        state = execute(fresh_state, instruction)
        assert int(state.mode) == RunMode.HALTED
        assert int(state.fault) == Fault.INVALID_OPCODE


class TestJumpWithOffset:
    """Test BNNN under both quirk settings."""

    def test_jump_with_offset_v0(self, fresh_state):
        """BNNN - Jump with V0 offset."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0x6230)  # V2 = 0x30, ignored
        state = execute(state, 0xB250)
        assert state.pc == 0x260

    def test_jump_with_offset_vx(self, schip_state):
        """BXNN - Jump to XNN + VX with SuperChip quirks."""
        state = execute(schip_state, 0x6010)  # V0 = 0x10, ignored
        state = execute(state, 0x6230)  # V2 = 0x30
        state = execute(state, 0xB250)
        assert state.pc == 0x280

    def test_jump_with_offset_not_masked(self, fresh_state):
        state = execute(fresh_state, 0x60FF)
        state = execute(state, 0xBFFF)
        assert state.pc == 0x10FE


class TestSubroutines:
    """Test CALL / RET stack handling."""

    def test_call_pushes_return_address(self, fresh_state):
        state = fresh_state
        initial_pc = state.pc

        state = execute(state, 0x2300)
        assert state.pc == 0x300
        assert state.stack.pointer == 1
        assert state.stack.data[0] == initial_pc

    def test_nested_calls(self, fresh_state):
        state = execute(fresh_state, 0x2300)
        state = execute(state, 0x2400)
        state = execute(state, 0x00EE)
        assert state.pc == 0x300
        state = execute(state, 0x00EE)
        assert state.pc == 0x200
        assert state.stack.pointer == 0

    def test_stack_overflow(self, fresh_state):
        state = fresh_state
        for _ in range(16):
            state = execute(state, 0x2300)
        assert int(state.mode) == RunMode.RUNNING

        state = execute(state, 0x2300)
        assert int(state.mode) == RunMode.HALTED
        assert int(state.fault) == Fault.STACK_OVERFLOW
        assert state.stack.pointer == 16

    def test_stack_underflow(self, fresh_state):
        state = execute(fresh_state, 0x00EE)
        assert int(state.mode) == RunMode.HALTED
        assert int(state.fault) == Fault.STACK_UNDERFLOW
        assert state.pc == fresh_state.pc
