"""CHIP-8 memory and register operations."""

import jax
from chipvm.state import EmulatorState, as_u16
from chipvm.decode import DecodedInstruction
from chipvm.instructions.system import advance


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XKK - Set VX = KK."""
    return advance(state.replace(V=state.V.at[instruction.x].set(instruction.kk)))


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XKK - Add KK to VX, wrapping, VF untouched."""
    result = (int(state.V[instruction.x]) + instruction.kk) & 0xFF
    return advance(state.replace(V=state.V.at[instruction.x].set(result)))


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return advance(state.replace(I=as_u16(instruction.addr)))


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """CXKK - Set VX = random byte & KK."""
    key, subkey = jax.random.split(state.rng)
    random_value = int(jax.random.randint(subkey, shape=(), minval=0, maxval=256))
    return advance(state.replace(V=state.V.at[instruction.x].set(random_value & instruction.kk), rng=key))
