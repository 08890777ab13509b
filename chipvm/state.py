"""CHIP-8 machine state structures."""

import jax
import jax.numpy as jnp
import numpy as np
from flax.struct import dataclass, PyTreeNode, field

from chipvm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, FRAMEBUFFER_SIZE, MEMORY_SIZE,
    MAX_ADDRESS, NUM_KEYS, NUM_REGISTERS, STACK_SIZE, TIMER_MODES,
)
from chipvm.errors import MemoryAccessError, ProgramTooLargeError


@dataclass(frozen=True)
class StackState:
    """Return-address stack for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class EmulatorState(PyTreeNode):
    """Architectural state of one CHIP-8 machine.

    The framebuffer is a flat row-major array of 64x32 cells holding 0 or 1,
    cell ``y * 64 + x``. ``waiting_register`` is -1 while running and holds X
    while an ``FX0A`` wait is pending.
    """
    rng: jax.Array
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    framebuffer: jnp.ndarray = field(default_factory=lambda: jnp.zeros(FRAMEBUFFER_SIZE, dtype=jnp.uint8))
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    waiting_register: int = -1
    timer_mode: str = field(pytree_node=False, default="frame")

    @property
    def sp(self) -> int:
        return int(self.stack.pointer)

    @property
    def is_waiting(self) -> bool:
        return self.waiting_register >= 0


def as_u8(value) -> jnp.ndarray:
    return jnp.asarray(int(value) & 0xFF, dtype=jnp.uint8)


def as_u16(value) -> jnp.ndarray:
    return jnp.asarray(int(value) & 0xFFFF, dtype=jnp.uint16)


def create_state(
    rng: jax.Array = None,
    timer_mode: str = "frame",
    with_font: bool = False,
) -> EmulatorState:
    """Create a zeroed machine with pc at 0x200.

    Args:
        rng: PRNG key for the random instruction (default: ``PRNGKey(0)``)
        timer_mode: ``"frame"`` to tick timers once per ``run_frame`` or
            ``"instruction"`` to tick them after every ``step``
        with_font: Write the hex digit glyphs at 0x000

    Returns:
        Fresh EmulatorState
    """
    if timer_mode not in TIMER_MODES:
        raise ValueError(f"Unknown timer mode '{timer_mode}'. Available: {list(TIMER_MODES)}")
    if rng is None:
        rng = jax.random.PRNGKey(0)
    state = EmulatorState(rng, timer_mode=timer_mode)
    if with_font:
        state = state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))
    return state


def load_program(state: EmulatorState, program: bytes, offset: int = PROGRAM_START) -> EmulatorState:
    """Copy raw program bytes into memory starting at ``offset``."""
    program = bytes(program)
    end = offset + len(program)
    if offset < 0 or end > MEMORY_SIZE:
        raise ProgramTooLargeError(
            f"Program of {len(program)} bytes does not fit in memory at 0x{offset:03X}"
        )
    if not program:
        return state
    program_array = jnp.asarray(np.frombuffer(program, dtype=np.uint8))
    return state.replace(memory=state.memory.at[offset:end].set(program_array))


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)


def framebuffer_snapshot(state: EmulatorState) -> np.ndarray:
    """Read-only copy of the 2048 framebuffer cells."""
    snapshot = np.array(state.framebuffer, dtype=np.uint8)
    snapshot.setflags(write=False)
    return snapshot


def check_memory_range(start: int, count: int) -> None:
    """Raise MemoryAccessError unless ``start .. start + count - 1`` is addressable."""
    if count > 0 and (start < 0 or start + count - 1 > MAX_ADDRESS):
        raise MemoryAccessError(
            f"Memory access 0x{start:03X}-0x{start + count - 1:03X} outside 0x000-0x{MAX_ADDRESS:03X}"
        )
