"""Main CHIP-8 emulator execution engine."""

from enum import Enum
from typing import Callable, Optional

from chipvm.state import EmulatorState, as_u8, check_memory_range
from chipvm.decode import decode
from chipvm.errors import Chip8Error
from chipvm.opcodes import Opcode, identify
from chipvm.instructions.system import execute_clear_screen, execute_return
from chipvm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chipvm.instructions.alu import (
    execute_alu_set, execute_alu_add, execute_alu_sub_xy, execute_alu_sub_yx
)
from chipvm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipvm.instructions.display import execute_display
from chipvm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)


INSTRUCTION_HANDLERS = {
    Opcode.CLS: execute_clear_screen,
    Opcode.RET: execute_return,
    Opcode.JP: execute_jump,
    Opcode.CALL: execute_call,
    Opcode.SE_IMM: execute_skip_if_equal_immediate,
    Opcode.SNE_IMM: execute_skip_if_not_equal_immediate,
    Opcode.SE_REG: execute_skip_if_equal_register,
    Opcode.LD_IMM: execute_set,
    Opcode.ADD_IMM: execute_add,
    Opcode.LD_REG: execute_alu_set,
    Opcode.ADD_REG: execute_alu_add,
    Opcode.SUB: execute_alu_sub_xy,
    Opcode.SUBN: execute_alu_sub_yx,
    Opcode.SNE_REG: execute_skip_if_not_equal_register,
    Opcode.LD_I: execute_set_index,
    Opcode.JP_V0: execute_jump_with_offset,
    Opcode.RND: execute_random,
    Opcode.DRW: execute_display,
    Opcode.SKP: execute_skip_if_key,
    Opcode.SKNP: execute_skip_if_not_key,
    Opcode.LD_VX_DT: execute_get_delay_timer,
    Opcode.LD_VX_K: execute_wait_for_key,
    Opcode.LD_DT_VX: execute_set_delay_timer,
    Opcode.LD_ST_VX: execute_set_sound_timer,
    Opcode.ADD_I: execute_add_to_index,
    Opcode.LD_F: execute_font_character,
    Opcode.LD_BCD: execute_bcd_conversion,
    Opcode.LD_MEM_VX: execute_store_registers,
    Opcode.LD_VX_MEM: execute_load_registers,
}


class StepStatus(Enum):
    """Outcome of a single ``step``."""
    RUNNING = "running"
    WAITING_FOR_KEY = "waiting_for_key"


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Returns the new state with pc moved on. Raises a ``Chip8Error`` naming the
    instruction and its address if the instruction cannot be applied; the
    input state is never modified.
    """
    decoded_instruction = decode(instruction)
    pc = int(state.pc)

    try:
        handler = INSTRUCTION_HANDLERS[identify(decoded_instruction)]
        return handler(state, decoded_instruction)
    except Chip8Error as error:
        if error.instruction is None:
            error.instruction = decoded_instruction.raw
        if error.pc is None:
            error.pc = pc
        raise


def fetch(state: EmulatorState) -> int:
    """Fetch the big-endian instruction word at pc."""
    pc = int(state.pc)
    try:
        check_memory_range(pc, 2)
    except Chip8Error as error:
        error.pc = pc
        raise
    return (int(state.memory[pc]) << 8) | int(state.memory[pc + 1])


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement the delay and sound timers toward zero."""
    return state.replace(
        delay_timer=as_u8(max(int(state.delay_timer) - 1, 0)),
        sound_timer=as_u8(max(int(state.sound_timer) - 1, 0)),
    )


def step(state: EmulatorState) -> tuple[EmulatorState, StepStatus]:
    """Fetch and execute one instruction.

    A state suspended on ``FX0A`` is returned unchanged until a key press
    resolves it. In ``"instruction"`` timer mode both timers tick after every
    executed instruction.
    """
    if state.is_waiting:
        return state, StepStatus.WAITING_FOR_KEY

    state = execute(state, fetch(state))
    if state.timer_mode == "instruction":
        state = tick_timers(state)

    if state.is_waiting:
        return state, StepStatus.WAITING_FOR_KEY
    return state, StepStatus.RUNNING


def run_frame(state: EmulatorState, gateway=None, instructions_per_frame: int = 10) -> EmulatorState:
    """Run one display frame.

    Drains queued key transitions before every step, executes up to
    ``instructions_per_frame`` instructions (fewer if the program suspends on
    ``FX0A``), then in ``"frame"`` timer mode ticks the timers once. Called at
    60 Hz this gives the timers their fixed cadence independent of
    instruction throughput.
    """
    for _ in range(instructions_per_frame):
        if gateway is not None:
            state = gateway.apply(state)
        state, status = step(state)
        if status is StepStatus.WAITING_FOR_KEY:
            break

    if state.timer_mode == "frame":
        state = tick_timers(state)
    return state


def run_until_blocked(
    state: EmulatorState,
    max_instructions: int,
    progress: Optional[Callable[[int], object]] = None,
    instructions_per_frame: int = 10,
) -> tuple[EmulatorState, int, StepStatus]:
    """Execute until the budget runs out or the program waits for a key.

    Args:
        state: Machine to run
        max_instructions: Instruction budget
        progress: Optional callback invoked with 1 after each instruction
        instructions_per_frame: In ``"frame"`` timer mode the timers tick once
            every this many instructions

    Returns:
        Tuple of (state, instructions executed, last status)
    """
    status = StepStatus.WAITING_FOR_KEY if state.is_waiting else StepStatus.RUNNING
    executed = 0
    while executed < max_instructions and status is StepStatus.RUNNING:
        state, status = step(state)
        executed += 1
        if state.timer_mode == "frame" and executed % instructions_per_frame == 0:
            state = tick_timers(state)
        if progress is not None:
            progress(1)
    return state, executed, status
