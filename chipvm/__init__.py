"""CHIP-8 interpreter core."""

from chipvm.state import EmulatorState, StackState, create_state, load_program, load_rom, framebuffer_snapshot
from chipvm.emulator import execute, fetch, step, tick_timers, run_frame, run_until_blocked, StepStatus
from chipvm.decode import DecodedInstruction, decode
from chipvm.opcodes import Opcode, identify
from chipvm.keypad import InputGateway, press_key, release_key, set_key, resolve_wait, wait_for_key
from chipvm.errors import (
    Chip8Error, UnknownInstructionError, StackOverflowError, StackUnderflowError,
    MemoryAccessError, InvalidKeyError, ProgramTooLargeError, ExecutionCancelled,
)
from chipvm.constants import *

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "load_program",
    "load_rom",
    "framebuffer_snapshot",
    "fetch",
    "execute",
    "step",
    "tick_timers",
    "run_frame",
    "run_until_blocked",
    "StepStatus",
    "DecodedInstruction",
    "decode",
    "Opcode",
    "identify",
    "InputGateway",
    "press_key",
    "release_key",
    "set_key",
    "resolve_wait",
    "wait_for_key",
    "Chip8Error",
    "UnknownInstructionError",
    "StackOverflowError",
    "StackUnderflowError",
    "MemoryAccessError",
    "InvalidKeyError",
    "ProgramTooLargeError",
    "ExecutionCancelled",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
