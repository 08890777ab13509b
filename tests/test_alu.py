"""Tests for ALU operations (8XYN)."""

import pytest
from chipvm import execute, UnknownInstructionError
from chipvm.instructions.alu import alu_add, alu_sub_xy, alu_sub_yx


def with_registers(state, **registers):
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


class TestAluFunctions:
    """Test the pure ALU operations."""

    def test_add_without_carry(self):
        assert alu_add(0x10, 0x20) == (0x30, 0)

    def test_add_with_carry(self):
        assert alu_add(0xFF, 0x02) == (0x01, 1)

    def test_add_exactly_256(self):
        assert alu_add(0x80, 0x80) == (0x00, 1)

    def test_sub_xy_equal_operands(self):
        """VF is 1 only when VX is strictly greater."""
        assert alu_sub_xy(0x05, 0x05) == (0x00, 0)

    def test_sub_yx_wraps(self):
        assert alu_sub_yx(0x05, 0x03) == (0xFE, 0)


class TestAluInstructions:
    """Test ALU instructions end to end."""

    def test_set_register(self, fresh_state):
        """8XY0 - VX = VY, VF untouched."""
        state = with_registers(fresh_state, V1=0x33, VF=0x07)
        state = execute(state, 0x8010)
        assert state.V[0] == 0x33
        assert state.V[15] == 0x07
        assert state.pc == 0x202

    def test_add_with_carry(self, fresh_state):
        """8XY4 - VX=0xFF, VY=0x02 gives 0x01 and VF=1."""
        state = with_registers(fresh_state, V1=0xFF, V2=0x02)
        state = execute(state, 0x8124)
        assert state.V[1] == 0x01
        assert state.V[15] == 1

    def test_add_clears_stale_flag(self, fresh_state):
        state = with_registers(fresh_state, V1=0x01, V2=0x02, VF=1)
        state = execute(state, 0x8124)
        assert state.V[1] == 0x03
        assert state.V[15] == 0

    def test_sub_with_borrow(self, fresh_state):
        """8XY5 - VX=3, VY=5 gives 0xFE and VF=0."""
        state = with_registers(fresh_state, V3=0x03, V4=0x05)
        state = execute(state, 0x8345)
        assert state.V[3] == 0xFE
        assert state.V[15] == 0

    def test_sub_without_borrow(self, fresh_state):
        state = with_registers(fresh_state, V3=0x09, V4=0x05)
        state = execute(state, 0x8345)
        assert state.V[3] == 0x04
        assert state.V[15] == 1

    def test_subn(self, fresh_state):
        """8XY7 - VX = VY - VX."""
        state = with_registers(fresh_state, V5=0x02, V6=0x0A)
        state = execute(state, 0x8567)
        assert state.V[5] == 0x08
        assert state.V[15] == 1

    def test_subn_with_borrow(self, fresh_state):
        state = with_registers(fresh_state, V5=0x0A, V6=0x02)
        state = execute(state, 0x8567)
        assert state.V[5] == 0xF8
        assert state.V[15] == 0

    def test_flag_register_as_destination(self, fresh_state):
        """When X is F the arithmetic result is written after the flag."""
        state = with_registers(fresh_state, VF=0xFF, V1=0x02)
        state = execute(state, 0x8F14)
        assert state.V[15] == 0x01

    @pytest.mark.parametrize("word", [0x8121, 0x8122, 0x8123, 0x8126, 0x812E])
    def test_extension_operations_are_unknown(self, fresh_state, word):
        with pytest.raises(UnknownInstructionError):
            execute(fresh_state, word)
