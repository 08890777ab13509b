"""CHIP-8 control flow instructions."""

from chipvm.state import EmulatorState, as_u16
from chipvm.decode import DecodedInstruction
from chipvm.constants import INSTRUCTION_SIZE, NUM_KEYS
from chipvm.errors import InvalidKeyError
from chipvm.stack import push
from chipvm.instructions.system import advance


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=as_u16(instruction.addr))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN, saving the call site."""
    state = state.replace(stack=push(state.stack, state.pc))
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        if condition_fn(state, instruction):
            return advance(state, 2 * INSTRUCTION_SIZE)
        return advance(state)
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == inst.kk
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != inst.kk
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == int(state.V[inst.y])
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != int(state.V[inst.y])
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    return state.replace(pc=as_u16(instruction.addr + int(state.V[0])))


def key_pressed(state: EmulatorState, instruction: DecodedInstruction) -> bool:
    """Keypad flag for the key code held in VX."""
    key = int(state.V[instruction.x])
    if key >= NUM_KEYS:
        raise InvalidKeyError(f"V{instruction.x:X} holds 0x{key:02X}, which is not a key code")
    return bool(state.keypad[key])


execute_skip_if_key = make_skip_instruction(key_pressed)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, inst: not key_pressed(state, inst)
)
