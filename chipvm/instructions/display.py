"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipvm.state import EmulatorState, check_memory_range
from chipvm.decode import DecodedInstruction
from chipvm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH, FLAG_REGISTER
from chipvm.instructions.system import advance

# Bit masks for the eight columns of a sprite row, most significant bit first
column_shifts = jnp.arange(SPRITE_WIDTH - 1, -1, -1)


def sprite_cells(x: int, y: int, height: int) -> jnp.ndarray:
    """Framebuffer indices covered by a sprite at (x, y), shape (height, 8).

    Each axis wraps on its own, so a row that runs off the right edge comes
    back on the left of the same scanline.
    """
    columns = (x + jnp.arange(SPRITE_WIDTH)) % SCREEN_WIDTH
    rows = (y + jnp.arange(height)) % SCREEN_HEIGHT
    return rows[:, None] * SCREEN_WIDTH + columns[None, :]


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N."""
    index = int(state.I)
    height = instruction.n
    check_memory_range(index, height)

    sprite_x = int(state.V[instruction.x])
    sprite_y = int(state.V[instruction.y])

    sprite_bytes = state.memory[index:index + height]
    sprite = ((sprite_bytes[:, None] >> column_shifts[None, :]) & 1).astype(jnp.uint8)

    cells = sprite_cells(sprite_x, sprite_y, height)
    current = state.framebuffer[cells]
    collision = bool(jnp.any((current & sprite) == 1))

    return advance(state.replace(
        framebuffer=state.framebuffer.at[cells].set(current ^ sprite),
        V=state.V.at[FLAG_REGISTER].set(1 if collision else 0)
    ))
