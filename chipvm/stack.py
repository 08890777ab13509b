"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chipvm.constants import STACK_SIZE
from chipvm.errors import StackOverflowError, StackUnderflowError
from chipvm.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack."""
    if stack.pointer >= STACK_SIZE:
        raise StackOverflowError(f"Stack overflow: call depth exceeds {STACK_SIZE}")
    new_data = stack.data.at[stack.pointer].set(jnp.asarray(address, dtype=jnp.uint16))
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    if stack.pointer <= 0:
        raise StackUnderflowError("Stack underflow: return with empty stack")
    new_pointer = stack.pointer - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
