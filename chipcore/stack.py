"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chipcore.constants import STACK_SIZE
from chipcore.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> tuple[StackState, jnp.ndarray]:
    """Push address onto stack, also returning whether the stack was already full."""
    overflow = stack.pointer >= STACK_SIZE
    new_data = stack.data.at[stack.pointer].set(address, mode="drop")
    return stack.replace(data=new_data, pointer=stack.pointer + 1), overflow


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray, jnp.ndarray]:
    """Pop address from stack, also returning whether the stack was empty."""
    underflow = stack.pointer <= 0
    new_pointer = jnp.maximum(stack.pointer - 1, 0)
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address, underflow
