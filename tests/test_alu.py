"""Tests for ALU operations (8xxx)."""

import pytest
from chipcore import execute


def with_registers(state, **registers):
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


class TestBasicALU:
    """Test basic ALU operations."""

    def test_alu_set_basic(self, fresh_state):
        """8XY0 - Set VX = VY."""
        state = with_registers(fresh_state, v1=0x42, v2=0x99)

        state = execute(state, 0x8120)  # V1 = V2

        assert state.V[1] == 0x99
        assert state.V[2] == 0x99
        assert state.pc == 0x202

    def test_alu_or_basic(self, fresh_state):
        """8XY1 - OR operation."""
        state = with_registers(fresh_state, v1=0xF0, v2=0x0F)

        state = execute(state, 0x8121)  # V1 |= V2

        assert state.V[1] == 0xFF
        assert state.V[15] == 0

    def test_alu_and_basic(self, fresh_state):
        """8XY2 - AND operation."""
        state = with_registers(fresh_state, v1=0xF0, v2=0xF1)

        state = execute(state, 0x8122)  # V1 &= V2

        assert state.V[1] == 0xF0

    def test_alu_xor_basic(self, fresh_state):
        """8XY3 - XOR operation."""
        state = with_registers(fresh_state, v1=0xFF, v2=0xF0)

        state = execute(state, 0x8123)  # V1 ^= V2

        assert state.V[1] == 0x0F

    def test_logic_ops_leave_flag_alone(self, fresh_state):
        """8XY1/2/3 never touch VF."""
        state = with_registers(fresh_state, v1=0xAA, v2=0x55, vF=0x07)

        for opcode in (0x8121, 0x8122, 0x8123):
            state = execute(state, opcode)
            assert state.V[15] == 0x07


class TestALUArithmetic:
    """Test arithmetic ALU operations."""

    def test_alu_add_no_carry(self, fresh_state):
        """8XY4 - Add without carry."""
        state = with_registers(fresh_state, v1=0x10, v2=0x20)

        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == 0x30
        assert state.V[15] == 0

    def test_alu_add_with_carry(self, fresh_state):
        """8XY4 - 0xFF + 0x02 wraps to 0x01 with carry."""
        state = with_registers(fresh_state, v1=0xFF, v2=0x02)

        state = execute(state, 0x8124)

        assert state.V[1] == 0x01
        assert state.V[15] == 1

    def test_alu_sub_no_borrow(self, fresh_state):
        """8XY5 - VX > VY sets VF."""
        state = with_registers(fresh_state, v1=0x30, v2=0x10)

        state = execute(state, 0x8125)  # V1 -= V2

        assert state.V[1] == 0x20
        assert state.V[15] == 1

    def test_alu_sub_with_borrow(self, fresh_state):
        """8XY5 - 0x10 - 0x20 wraps to 0xF0 with VF = 0."""
        state = with_registers(fresh_state, v1=0x10, v2=0x20)

        state = execute(state, 0x8125)

        assert state.V[1] == 0xF0
        assert state.V[15] == 0

    def test_alu_sub_equal_values_clears_flag(self, fresh_state):
        """8XY5 - Equal operands give 0 and VF = 0."""
        state = with_registers(fresh_state, v1=0x42, v2=0x42, vF=1)

        state = execute(state, 0x8125)

        assert state.V[1] == 0
        assert state.V[15] == 0

    def test_alu_subn(self, fresh_state):
        """8XY7 - VX = VY - VX, VF = 1 when VY > VX."""
        state = with_registers(fresh_state, v1=0x10, v2=0x30)

        state = execute(state, 0x8127)

        assert state.V[1] == 0x20
        assert state.V[15] == 1

    def test_alu_subn_with_borrow(self, fresh_state):
        """8XY7 - Borrow clears VF."""
        state = with_registers(fresh_state, v1=0x30, v2=0x10)

        state = execute(state, 0x8127)

        assert state.V[1] == 0xE0
        assert state.V[15] == 0

    def test_alu_subn_equal_values_clears_flag(self, fresh_state):
        state = with_registers(fresh_state, v1=0x05, v2=0x05, vF=1)

        state = execute(state, 0x8127)

        assert state.V[1] == 0
        assert state.V[15] == 0


class TestALUShifts:
    """Test shift operations."""

    def test_shift_right(self, fresh_state):
        """8XY6 - Shift right, VF = bit shifted out."""
        state = with_registers(fresh_state, v1=0x05)

        state = execute(state, 0x8106)

        assert state.V[1] == 0x02
        assert state.V[15] == 1

    def test_shift_right_even(self, fresh_state):
        state = with_registers(fresh_state, v1=0x04, vF=1)

        state = execute(state, 0x8106)

        assert state.V[1] == 0x02
        assert state.V[15] == 0

    def test_shift_right_ignores_vy(self, fresh_state):
        """8XY6 - Operates on VX alone."""
        state = with_registers(fresh_state, v1=0x08, v2=0xFF)

        state = execute(state, 0x8126)

        assert state.V[1] == 0x04
        assert state.V[2] == 0xFF

    def test_shift_left(self, fresh_state):
        """8XYE - Shift left, VF = previous bit 7."""
        state = with_registers(fresh_state, v1=0x81)

        state = execute(state, 0x810E)

        assert state.V[1] == 0x02
        assert state.V[15] == 1

    def test_shift_left_no_overflow(self, fresh_state):
        state = with_registers(fresh_state, v1=0x41, vF=1)

        state = execute(state, 0x810E)

        assert state.V[1] == 0x82
        assert state.V[15] == 0


class TestFlagRegisterAsTarget:
    """When X is F the result is written after the flag."""

    @pytest.mark.parametrize("opcode,vf,vy,expected", [
        (0x8F14, 0xFF, 0x02, 0x01),  # add: carry 1, result 0x01
        (0x8F15, 0x10, 0x01, 0x0F),  # sub
        (0x8F06, 0x05, 0x00, 0x02),  # shr
        (0x8F17, 0x01, 0x10, 0x0F),  # subn
        (0x8F0E, 0x81, 0x00, 0x02),  # shl
    ])
    def test_result_wins_over_flag(self, fresh_state, opcode, vf, vy, expected):
        state = with_registers(fresh_state, vF=vf, v1=vy, v0=vy)

        state = execute(state, opcode)

        assert state.V[15] == expected


class TestImmediate:
    """Test 6XKK and 7XKK."""

    def test_load_immediate(self, fresh_state):
        state = execute(fresh_state, 0x6A3C)
        assert state.V[0xA] == 0x3C

    def test_add_immediate_wraps_without_flag(self, fresh_state):
        """7XKK - 0xFF + 0x02 wraps to 0x01 and VF is unchanged."""
        state = with_registers(fresh_state, v3=0xFF, vF=0x09)

        state = execute(state, 0x7302)

        assert state.V[3] == 0x01
        assert state.V[15] == 0x09


@pytest.mark.parametrize("vx,vy,result,carry", [(200, 100, 44, 1), (10, 20, 30, 0)])
def test_add_carry_examples(fresh_state, vx, vy, result, carry):
    state = with_registers(fresh_state, v1=vx, v2=vy)

    state = execute(state, 0x8124)

    assert state.V[1] == result
    assert state.V[15] == carry


def test_load_then_add_immediate(fresh_state):
    state = execute(fresh_state, 0x6010)
    state = execute(state, 0x7005)

    assert state.V[0] == 0x15
    assert state.V[15] == 0
