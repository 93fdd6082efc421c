"""CHIP-8 stack operations."""

import jax.numpy as jnp

from schipax.constants import ADDRESS_MASK, STACK_SIZE
from schipax.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> tuple[StackState, jnp.ndarray]:
    """Push address onto stack.

    Returns the new stack and an overflow flag; a full stack is returned unchanged.
    """
    overflowed = stack.pointer >= STACK_SIZE
    slot = jnp.minimum(stack.pointer, STACK_SIZE - 1)
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    new_data = stack.data.at[slot].set(masked_address)
    return stack.replace(
        data=jnp.where(overflowed, stack.data, new_data),
        pointer=jnp.where(overflowed, stack.pointer, stack.pointer + 1),
    ), overflowed


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray, jnp.ndarray]:
    """Pop address from stack.

    Returns the new stack, the popped address and an underflow flag; an empty
    stack is returned unchanged with address 0.
    """
    underflowed = stack.pointer == 0
    new_pointer = jnp.where(underflowed, stack.pointer, stack.pointer - 1)
    popped_address = jnp.where(underflowed, jnp.zeros((), dtype=jnp.uint16), stack.data[new_pointer])
    new_data = stack.data.at[new_pointer].set(jnp.where(underflowed, stack.data[new_pointer], 0))
    return stack.replace(data=new_data, pointer=new_pointer), popped_address, underflowed
