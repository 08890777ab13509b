"""Fatal interpreter errors.

Every error is terminal for the run. ``execute`` attaches the offending
instruction word and its address before the error leaves the engine, so the
message always names both.
"""

from typing import Optional


class Chip8Error(Exception):
    """Base error for interpreter failures."""

    def __init__(self, message: str, instruction: Optional[int] = None, pc: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.instruction = instruction
        self.pc = pc

    def __str__(self) -> str:
        if self.instruction is None and self.pc is None:
            return self.message
        if self.instruction is None:
            return f"{self.message} (at 0x{self.pc:03X})"
        location = f"0x{self.instruction:04X}"
        if self.pc is not None:
            location += f" at 0x{self.pc:03X}"
        return f"{self.message} ({location})"


class UnknownInstructionError(Chip8Error):
    """Raised when a word decodes to no known instruction."""

    def __init__(self, instruction: int, pc: Optional[int] = None):
        super().__init__("Unknown instruction", instruction, pc)

    def __str__(self) -> str:
        message = f"Unknown instruction 0x{self.instruction:04X}"
        if self.pc is not None:
            message += f" at 0x{self.pc:03X}"
        return message


class StackOverflowError(Chip8Error):
    """Raised when a call is made with a full return stack."""


class StackUnderflowError(Chip8Error):
    """Raised when a return is made with an empty return stack."""


class MemoryAccessError(Chip8Error):
    """Raised when an address falls outside the 4 KiB address space."""


class InvalidKeyError(Chip8Error, ValueError):
    """Raised for key codes outside 0x0-0xF."""


class ProgramTooLargeError(Chip8Error, ValueError):
    """Raised when a program does not fit in memory at its load offset."""


class ExecutionCancelled(Exception):
    """Raised when a blocking key wait is cancelled by the caller."""
