"""Tests for ALU operations (8xxx)."""

import pytest
from schipax import execute
from conftest import set_registers


class TestBasicALU:
    """Test basic ALU operations."""

    def test_alu_set_basic(self, fresh_state):
        """8XY0 - Set VX = VY."""
        state = set_registers(fresh_state, V1=0x42, V2=0x99)

        state = execute(state, 0x8120)  # V1 = V2

        assert state.V[1] == 0x99
        assert state.V[2] == 0x99

    def test_alu_or_basic(self, fresh_state):
        """8XY1 - OR operation."""
        state = set_registers(fresh_state, V1=0xF0, V2=0x0F)

        state = execute(state, 0x8121)  # V1 |= V2

        assert state.V[1] == 0xFF

    def test_alu_and_basic(self, fresh_state):
        """8XY2 - AND operation."""
        state = set_registers(fresh_state, V1=0xF0, V2=0xF1)

        state = execute(state, 0x8122)  # V1 &= V2

        assert state.V[1] == 0xF0

    def test_alu_xor_basic(self, fresh_state):
        """8XY3 - XOR operation."""
        state = set_registers(fresh_state, V1=0xFF, V2=0xF0)

        state = execute(state, 0x8123)  # V1 ^= V2

        assert state.V[1] == 0x0F

    def test_logic_ops_leave_vf_alone(self, fresh_state):
        """8XY0-8XY3 do not touch VF."""
        for op in (0x0, 0x1, 0x2, 0x3):
            state = set_registers(fresh_state, V1=0x0C, V2=0x0A, VF=0x07)
            state = execute(state, 0x8120 | op)
            assert state.V[15] == 0x07, f"Op {op:X} modified VF"


class TestALUArithmetic:
    """Test arithmetic ALU operations."""

    def test_alu_add_no_carry(self, fresh_state):
        """8XY4 - Add without carry."""
        state = set_registers(fresh_state, V1=10, V2=20)

        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == 30
        assert state.V[15] == 0

    def test_alu_add_with_carry(self, fresh_state):
        """8XY4 - Add with carry."""
        state = set_registers(fresh_state, V1=200, V2=100)

        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == 44  # 300 mod 256
        assert state.V[15] == 1

    def test_alu_add_exactly_255(self, fresh_state):
        """8XY4 - A sum of 255 does not carry."""
        state = set_registers(fresh_state, V1=0xF0, V2=0x0F, VF=1)

        state = execute(state, 0x8124)

        assert state.V[1] == 0xFF
        assert state.V[15] == 0

    def test_alu_sub_xy_no_borrow(self, fresh_state):
        """8XY5 - Subtract VX - VY, no borrow."""
        state = set_registers(fresh_state, V1=0x30, V2=0x10)

        state = execute(state, 0x8125)  # V1 -= V2

        assert state.V[1] == 0x20
        assert state.V[15] == 1

    def test_alu_sub_xy_with_borrow(self, fresh_state):
        """8XY5 - Subtract VX - VY, with borrow."""
        state = set_registers(fresh_state, V3=0x10, V4=0x30)

        state = execute(state, 0x8345)  # V3 -= V4

        assert state.V[3] == 0xE0  # 16 - 48 = -32 -> 224
        assert state.V[15] == 0

    def test_alu_sub_xy_equal_operands(self, fresh_state):
        """8XY5 - Equal operands clear VF (flag is VX > VY)."""
        state = set_registers(fresh_state, V1=0x22, V2=0x22, VF=1)

        state = execute(state, 0x8125)

        assert state.V[1] == 0
        assert state.V[15] == 0

    def test_alu_sub_yx_no_borrow(self, fresh_state):
        """8XY7 - Subtract VY - VX, no borrow."""
        state = set_registers(fresh_state, V1=0x10, V2=0x30)

        state = execute(state, 0x8127)  # V1 = V2 - V1

        assert state.V[1] == 0x20
        assert state.V[15] == 1

    def test_alu_sub_yx_with_borrow(self, fresh_state):
        """8XY7 - Subtract VY - VX, with borrow."""
        state = set_registers(fresh_state, V1=0x30, V2=0x10)

        state = execute(state, 0x8127)

        assert state.V[1] == 0xE0
        assert state.V[15] == 0


class TestALUShifts:
    """Test shift operations."""

    def test_shift_right_odd(self, fresh_state):
        """8XY6 - Shift right moves bit 0 into VF."""
        state = set_registers(fresh_state, V3=0b00000011, V4=0xFF)

        state = execute(state, 0x8346)  # V3 >>= 1

        assert state.V[3] == 0b00000001
        assert state.V[15] == 1

    def test_shift_right_even(self, fresh_state):
        """8XY6 - Shift right, even number."""
        state = set_registers(fresh_state, V1=0x04, V2=0xFF)

        state = execute(state, 0x8126)

        assert state.V[1] == 0x02
        assert state.V[15] == 0

    def test_shift_right_ignores_vy(self, fresh_state):
        """8XY6 - VY is not used as the source."""
        state = set_registers(fresh_state, V1=0x08, V2=0x03)

        state = execute(state, 0x8126)

        assert state.V[1] == 0x04
        assert state.V[15] == 0

    def test_shift_left_overflow(self, fresh_state):
        """8XYE - Shift left moves bit 7 into VF."""
        state = set_registers(fresh_state, V3=0x81, V4=0xFF)

        state = execute(state, 0x834E)  # V3 <<= 1

        assert state.V[3] == 0x02
        assert state.V[15] == 1

    def test_shift_left_no_overflow(self, fresh_state):
        """8XYE - Shift left without bit 7."""
        state = set_registers(fresh_state, V3=0x41, VF=1)

        state = execute(state, 0x834E)

        assert state.V[3] == 0x82
        assert state.V[15] == 0


class TestALUEdgeCases:
    """Test edge cases and comprehensive scenarios."""

    @pytest.mark.parametrize("op", [0x8, 0x9, 0xA, 0xB, 0xC, 0xD, 0xF])
    def test_alu_undefined_operations(self, fresh_state, op):
        """Undefined 8XY_ sub-opcodes change nothing."""
        state = set_registers(fresh_state, V1=0x42, V2=0x99, VF=0x05)

        state = execute(state, 0x8120 | op)

        assert state.V[1] == 0x42, f"Undefined op {op:X} changed VX"
        assert state.V[15] == 0x05, f"Undefined op {op:X} changed VF"

    def test_alu_self_operations(self, fresh_state):
        """Test operations where VX and VY are the same register."""
        state = set_registers(fresh_state, V5=0xAA)

        state = execute(state, 0x8553)
        assert state.V[5] == 0x00, "Self XOR should result in 0"

        state = set_registers(state, V5=0x80)
        state = execute(state, 0x8554)  # V5 += V5
        assert state.V[5] == 0x00, "Self ADD should wrap on overflow"
        assert state.V[15] == 1, "Self ADD should set carry flag"

    def test_vf_as_source(self, fresh_state):
        """VF used as VY is read before the flag is written."""
        state = set_registers(fresh_state, VF=0x42, V1=0x10)

        state = execute(state, 0x81F4)  # V1 += VF
        assert state.V[1] == 0x52
        assert state.V[15] == 0

    def test_vf_as_destination(self, fresh_state):
        """With X = F the arithmetic result overwrites the flag."""
        state = set_registers(fresh_state, VF=200, V1=100)

        state = execute(state, 0x8F14)  # VF += V1, carry would be 1

        assert state.V[15] == 44


class TestFlagRegisterOperands:
    """VF is written before the result is computed from the register file."""

    def test_sub_reads_new_flag_as_vy(self, fresh_state):
        state = set_registers(fresh_state, V1=0x10, VF=0x05)

        state = execute(state, 0x81F5)  # VF = 0x10 > 0x05, then V1 -= VF

        assert state.V[1] == 0x0F
        assert state.V[15] == 1

    def test_sub_with_vf_as_destination(self, fresh_state):
        state = set_registers(fresh_state, V1=0x10, VF=0x30)

        state = execute(state, 0x8F15)  # VF = 1, then VF = 1 - 0x10

        assert state.V[15] == 0xF1

    def test_reverse_sub_reads_new_flag_as_vy(self, fresh_state):
        state = set_registers(fresh_state, V1=0x10, VF=0x05)

        state = execute(state, 0x81F7)  # VF = 0x05 > 0x10, then V1 = VF - V1

        assert state.V[1] == 0xF0
        assert state.V[15] == 0

    def test_shift_right_of_vf(self, fresh_state):
        state = set_registers(fresh_state, VF=0x04)

        state = execute(state, 0x8FF6)  # VF = 0, then VF >>= 1

        assert state.V[15] == 0

    def test_shift_left_of_vf(self, fresh_state):
        state = set_registers(fresh_state, VF=0x81)

        state = execute(state, 0x8FFE)  # VF = 1, then VF <<= 1

        assert state.V[15] == 2
