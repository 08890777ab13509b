"""CHIP-8 ALU operations (8xxx).

Each operation maps ``(vx, vy)`` to ``(result, flag)``. A flag of ``None``
leaves VF untouched. The flag is written before the result, so when X is F
the result wins.
"""

from typing import Optional

from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.constants import FLAG_REGISTER
from chipvm.instructions.system import advance


def alu_set(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_add(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = vx + vy
    carry = 1 if result > 0xFF else 0
    return result & 0xFF, carry


def alu_sub_xy(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY5 - Subtract: VX -= VY, VF = NOT borrow."""
    not_borrow = 1 if vx > vy else 0
    return (vx - vy) & 0xFF, not_borrow


def alu_sub_yx(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY7 - Subtract: VX = VY - VX, VF = NOT borrow."""
    not_borrow = 1 if vy > vx else 0
    return (vy - vx) & 0xFF, not_borrow


def make_alu_instruction(operation):
    """Wrap a pure ALU operation as an instruction handler."""
    def alu_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        result, flag = operation(int(state.V[instruction.x]), int(state.V[instruction.y]))
        new_V = state.V
        if flag is not None:
            new_V = new_V.at[FLAG_REGISTER].set(flag)
        new_V = new_V.at[instruction.x].set(result)
        return advance(state.replace(V=new_V))
    alu_instruction.__doc__ = operation.__doc__
    return alu_instruction


execute_alu_set = make_alu_instruction(alu_set)
execute_alu_add = make_alu_instruction(alu_add)
execute_alu_sub_xy = make_alu_instruction(alu_sub_xy)
execute_alu_sub_yx = make_alu_instruction(alu_sub_yx)
