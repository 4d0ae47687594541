"""CHIP-8/SCHIP emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, field, PyTreeNode

from schipax.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, MAX_WIDTH, MAX_HEIGHT, STACK_SIZE,
    REGISTER_COUNT, KEY_COUNT, SCREEN_WIDTH, SCREEN_HEIGHT, EXT_SCREEN_WIDTH, EXT_SCREEN_HEIGHT,
)


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.int32))


class EmulatorState(PyTreeNode):
    """Main CHIP-8/SCHIP machine state.

    The display is always allocated at the extended size and indexed ``[x, y]``;
    ``hires`` selects which part of it is the logical region.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((MAX_WIDTH, MAX_HEIGHT), dtype=jnp.bool_))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(KEY_COUNT, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(REGISTER_COUNT, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    hires: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    halted: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    awaiting_key: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    key_register: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))


def create_state(rng: jax.random.PRNGKey = jax.random.PRNGKey(0)) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(rng)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def logical_width(state: EmulatorState) -> jnp.ndarray:
    """Width of the active logical region."""
    return jnp.where(state.hires, EXT_SCREEN_WIDTH, SCREEN_WIDTH)


def logical_height(state: EmulatorState) -> jnp.ndarray:
    """Height of the active logical region."""
    return jnp.where(state.hires, EXT_SCREEN_HEIGHT, SCREEN_HEIGHT)
