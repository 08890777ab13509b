"""Keypad state and the input gateway.

The keypad is a flat snapshot of the 16 hex keys currently held. Key codes
arrive already translated to 0x0-0xF; mapping physical keys is up to the
caller (see ``chipvm.frontend``).

``InputGateway`` buffers transitions produced by an event pump or another
thread. ``apply`` folds every queued transition into the state in arrival
order before the next step reads the keypad.
"""

import threading
from collections import deque
from typing import Optional

from chipvm.state import EmulatorState, as_u16
from chipvm.constants import INSTRUCTION_SIZE, NUM_KEYS
from chipvm.errors import ExecutionCancelled, InvalidKeyError


def check_key(code: int) -> int:
    code = int(code)
    if not 0 <= code < NUM_KEYS:
        raise InvalidKeyError(f"Invalid key code {code}, expected 0x0-0xF")
    return code


def resolve_wait(state: EmulatorState, code: int) -> EmulatorState:
    """Complete a pending FX0A: VX = code and pc moves past the instruction."""
    if not state.is_waiting:
        return state
    code = check_key(code)
    return state.replace(
        V=state.V.at[state.waiting_register].set(code),
        pc=as_u16(int(state.pc) + INSTRUCTION_SIZE),
        waiting_register=-1,
    )


def set_key(state: EmulatorState, code: int, pressed: bool) -> EmulatorState:
    """Record a key transition; a press resolves a pending FX0A."""
    code = check_key(code)
    state = state.replace(keypad=state.keypad.at[code].set(bool(pressed)))
    if pressed and state.is_waiting:
        state = resolve_wait(state, code)
    return state


def press_key(state: EmulatorState, code: int) -> EmulatorState:
    return set_key(state, code, True)


def release_key(state: EmulatorState, code: int) -> EmulatorState:
    return set_key(state, code, False)


class InputGateway:
    """Thread-safe FIFO of key transitions feeding one machine."""

    def __init__(self):
        self._events = deque()
        self._condition = threading.Condition()
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def set_key(self, code: int, pressed: bool):
        """Queue a transition observed from physical input."""
        code = check_key(code)
        with self._condition:
            self._events.append((code, bool(pressed)))
            self._condition.notify_all()

    def press(self, code: int):
        self.set_key(code, True)

    def release(self, code: int):
        self.set_key(code, False)

    def pending(self) -> int:
        with self._condition:
            return len(self._events)

    def apply(self, state: EmulatorState) -> EmulatorState:
        """Drain queued transitions into ``state`` in arrival order."""
        with self._condition:
            events = list(self._events)
            self._events.clear()
        for code, pressed in events:
            state = set_key(state, code, pressed)
        return state

    def cancel(self):
        """Abort current and future blocking waits."""
        with self._condition:
            self._cancelled = True
            self._condition.notify_all()

    def block_until_next_keypress(self, timeout: Optional[float] = None) -> int:
        """Block until a key press is queued and return its code.

        The press stays queued so the next ``apply`` still sees it alongside
        any releases delivered before it.

        Raises:
            ExecutionCancelled: If ``cancel`` was called
            TimeoutError: If no press arrived within ``timeout`` seconds
        """
        with self._condition:
            arrived = self._condition.wait_for(
                lambda: self._cancelled or self._first_press() is not None,
                timeout=timeout,
            )
            if self._cancelled:
                raise ExecutionCancelled("Key wait cancelled")
            if not arrived:
                raise TimeoutError(f"No key press within {timeout} seconds")
            return self._first_press()

    def _first_press(self) -> Optional[int]:
        for code, pressed in self._events:
            if pressed:
                return code
        return None


def wait_for_key(state: EmulatorState, gateway: InputGateway, timeout: Optional[float] = None) -> EmulatorState:
    """Block on the gateway until a press resolves a pending FX0A."""
    state = gateway.apply(state)
    while state.is_waiting:
        gateway.block_until_next_keypress(timeout)
        state = gateway.apply(state)
    return state
