"""Tests for control flow instructions."""

import pytest
from schipax import execute, PROGRAM_START
from conftest import set_registers


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """1NNN - Jump to address."""
        state = execute(fresh_state, 0x1ABC)
        assert state.pc == 0xABC

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump with V0 offset."""
        state = set_registers(fresh_state, V0=0x10, V2=0x30)
        state = execute(state, 0xB250)  # Jump to 0x250 + V0
        assert state.pc == 0x260

    def test_jump_with_offset_past_12_bits(self, fresh_state):
        """BNNN - The target is not masked to 12 bits."""
        state = set_registers(fresh_state, V0=0xFF)
        state = execute(state, 0xBFFF)
        assert state.pc == 0x10FE


class TestSkipInstructions:
    """Test all skip instruction variants."""

    @pytest.mark.parametrize(
        "registers, instruction, skips",
        [
            ({"V5": 0x42}, 0x3542, True),   # 3XKK equal
            ({"V5": 0x41}, 0x3542, False),
            ({"V3": 0x10}, 0x4320, True),   # 4XKK not equal
            ({"V3": 0x20}, 0x4320, False),
            ({"V1": 0x55, "V2": 0x55}, 0x5120, True),  # 5XY0 equal
            ({"V1": 0x55, "V2": 0x44}, 0x5120, False),
            ({"V7": 0xAA, "V8": 0xBB}, 0x9780, True),  # 9XY0 not equal
            ({"V7": 0xCC, "V8": 0xCC}, 0x9780, False),
        ],
    )
    def test_skip(self, fresh_state, registers, instruction, skips):
        state = set_registers(fresh_state, **registers)
        initial_pc = state.pc

        state = execute(state, instruction)

        assert state.pc == initial_pc + (2 if skips else 0)

    def test_skip_with_zero_values(self, fresh_state):
        """3X00 skips on freshly zeroed registers."""
        initial_pc = fresh_state.pc
        state = execute(fresh_state, 0x3000)
        assert state.pc == initial_pc + 2

    def test_skip_boundary_values(self, fresh_state):
        state = set_registers(fresh_state, V0=0xFF)
        initial_pc = state.pc

        state = execute(state, 0x30FF)
        assert state.pc == initial_pc + 2


class TestCallStack:
    """Test subroutine call/return and stack saturation."""

    def test_call_pushes_pc(self, fresh_state):
        state = execute(fresh_state, 0x2300)
        assert state.pc == 0x300
        assert state.stack.pointer == 1
        assert state.stack.data[0] == PROGRAM_START

    def test_nested_calls_return_in_order(self, fresh_state):
        state = fresh_state.replace(pc=0x202)
        state = execute(state, 0x2400)
        state = state.replace(pc=0x402)
        state = execute(state, 0x2500)
        assert state.stack.pointer == 2

        state = execute(state, 0x00EE)
        assert state.pc == 0x402
        state = execute(state, 0x00EE)
        assert state.pc == 0x202
        assert state.stack.pointer == 0

    def test_push_on_full_stack_saturates(self, fresh_state):
        state = fresh_state
        for _ in range(16):
            state = execute(state, 0x2300)
        assert state.stack.pointer == 16

        state = execute(state, 0x2400)

        assert state.stack.pointer == 16
        assert state.pc == 0x400
        assert int(state.stack.data[15]) == 0x300

    def test_pop_on_empty_stack_saturates(self, fresh_state):
        state = execute(fresh_state, 0x00EE)
        assert state.stack.pointer == 0
        assert state.pc == 0
