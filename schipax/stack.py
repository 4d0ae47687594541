"""CHIP-8 stack operations.

The pointer saturates in ``[0, STACK_SIZE]``: pushing onto a full stack drops the
address, popping an empty stack yields address 0.
"""

import jax.numpy as jnp
from schipax.constants import STACK_SIZE
from schipax.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack."""
    new_data = stack.data.at[stack.pointer].set(jnp.astype(address, jnp.uint16), mode="drop")
    return stack.replace(data=new_data, pointer=jnp.minimum(stack.pointer + 1, STACK_SIZE))


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    new_pointer = jnp.maximum(stack.pointer - 1, 0)
    popped_address = jnp.where(stack.pointer > 0, stack.data[new_pointer], 0)
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), jnp.astype(popped_address, jnp.uint16)
