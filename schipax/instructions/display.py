"""CHIP-8/SCHIP display operations: sprite drawing and scrolling.

All operations address the fixed ``(MAX_WIDTH, MAX_HEIGHT)`` backing bitmap and
only touch the cells of the current logical region.
"""

import jax.numpy as jnp
from schipax.state import EmulatorState, logical_width, logical_height
from schipax.decode import DecodedInstruction
from schipax.constants import MAX_WIDTH, MAX_HEIGHT, ADDRESS_MASK

SCROLL_STEP = 4

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(MAX_WIDTH), jnp.arange(MAX_HEIGHT), indexing='ij')


def _in_region(state: EmulatorState) -> jnp.ndarray:
    return (xx < logical_width(state)) & (yy < logical_height(state))


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY); 16x16 in extended mode when N is 0."""
    width = logical_width(state)
    height = logical_height(state)

    wide = state.hires & (instruction.n == 0)
    sprite_width = jnp.where(wide, 16, 8)
    sprite_height = jnp.where(wide, 16, instruction.n)
    bytes_per_row = jnp.where(wide, 2, 1)

    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % width
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % height

    # Offsets are taken modulo the logical size so sprites wrap around edges.
    col_offset = (xx - sprite_x) % width
    row_offset = (yy - sprite_y) % height
    in_sprite = _in_region(state) & (col_offset < sprite_width) & (row_offset < sprite_height)

    address = (jnp.astype(state.I, jnp.int32) + row_offset * bytes_per_row + col_offset // 8) & ADDRESS_MASK
    sprite_bytes = jnp.astype(state.memory[address], jnp.int32)
    sprite = jnp.astype((sprite_bytes >> (7 - col_offset % 8)) & 1, jnp.bool_) & in_sprite

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[15].set(jnp.astype(collision, jnp.uint8))
    )


def execute_scroll_right(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00FB - Scroll logical region right by 4 pixels."""
    source = state.display[jnp.clip(xx - SCROLL_STEP, 0, MAX_WIDTH - 1), yy]
    shifted = source & (xx >= SCROLL_STEP)
    return state.replace(display=jnp.where(_in_region(state), shifted, state.display))


def execute_scroll_left(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00FC - Scroll logical region left by 4 pixels."""
    source = state.display[jnp.clip(xx + SCROLL_STEP, 0, MAX_WIDTH - 1), yy]
    shifted = source & (xx + SCROLL_STEP < logical_width(state))
    return state.replace(display=jnp.where(_in_region(state), shifted, state.display))


def execute_scroll_down(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00CN - Scroll logical region down by N rows."""
    source = state.display[xx, jnp.clip(yy - instruction.n, 0, MAX_HEIGHT - 1)]
    shifted = source & (yy >= instruction.n)
    return state.replace(display=jnp.where(_in_region(state), shifted, state.display))
