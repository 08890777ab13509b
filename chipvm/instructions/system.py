"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp
from chipvm.state import EmulatorState, as_u16
from chipvm.decode import DecodedInstruction
from chipvm.constants import INSTRUCTION_SIZE
from chipvm.stack import pop


def advance(state: EmulatorState, offset: int = INSTRUCTION_SIZE) -> EmulatorState:
    """Move pc past the current instruction."""
    return state.replace(pc=as_u16(int(state.pc) + offset))


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return advance(state.replace(framebuffer=jnp.zeros_like(state.framebuffer)))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine to the instruction after the call."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=as_u16(int(address) + INSTRUCTION_SIZE))
