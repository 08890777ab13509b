"""Test configuration and fixtures for CHIP-8 interpreter tests."""

import pytest
import jax.numpy as jnp
from chipvm import create_state, load_program


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def instruction_timer_state():
    """Provide a state whose timers tick after every instruction."""
    return create_state(timer_mode="instruction")


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def load_words(state, words, offset=0x200):
    """Helper to assemble 16-bit instruction words into memory."""
    program = b"".join(word.to_bytes(2, "big") for word in words)
    return load_program(state, program, offset)


def framebuffer_cell(state, x, y):
    return int(state.framebuffer[y * 64 + x])
