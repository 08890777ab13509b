"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chipvm.state import EmulatorState, as_u16, check_memory_range
from chipvm.decode import DecodedInstruction
from chipvm.constants import FONT_START, FONT_GLYPH_SIZE
from chipvm.instructions.system import advance


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return advance(state.replace(V=state.V.at[instruction.x].set(state.delay_timer)))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Suspend until the next key press.

    pc stays on this instruction. The press that resolves the wait stores its
    code in VX and moves pc on (see ``chipvm.keypad.resolve_wait``).
    """
    return state.replace(waiting_register=instruction.x)


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return advance(state.replace(delay_timer=state.V[instruction.x]))


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return advance(state.replace(sound_timer=state.V[instruction.x]))


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, no flag."""
    return advance(state.replace(I=as_u16(int(state.I) + int(state.V[instruction.x]))))


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + int(state.V[instruction.x]) * FONT_GLYPH_SIZE
    return advance(state.replace(I=as_u16(font_address)))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    index = int(state.I)
    check_memory_range(index, 3)
    value = int(state.V[instruction.x])

    digits = jnp.array([value // 100, (value // 10) % 10, value % 10], dtype=jnp.uint8)
    return advance(state.replace(memory=state.memory.at[index:index + 3].set(digits)))


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I, then I += X + 1."""
    index = int(state.I)
    count = instruction.x + 1
    check_memory_range(index, count)

    new_memory = state.memory.at[index:index + count].set(state.V[:count])
    return advance(state.replace(memory=new_memory, I=as_u16(index + count)))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I, then I += X + 1."""
    index = int(state.I)
    count = instruction.x + 1
    check_memory_range(index, count)

    new_V = state.V.at[:count].set(state.memory[index:index + count])
    return advance(state.replace(V=new_V, I=as_u16(index + count)))
