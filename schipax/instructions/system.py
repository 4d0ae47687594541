"""CHIP-8/SCHIP system instructions (0x0xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from schipax.state import EmulatorState
from schipax.decode import DecodedInstruction
from schipax.stack import pop
from schipax.instructions.display import (
    execute_scroll_right, execute_scroll_left, execute_scroll_down
)


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """No operation."""
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display (whole backing bitmap)."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=address)


def execute_exit(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00FD - Request interpreter termination."""
    return state.replace(halted=jnp.ones((), dtype=jnp.bool_))


def _set_mode(hires: bool):
    def set_mode(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        return state.replace(
            hires=jnp.full((), hires, dtype=jnp.bool_),
            display=jnp.zeros_like(state.display),
        )
    return set_mode


execute_low_resolution = _set_mode(False)
execute_low_resolution.__doc__ = """00FE - Leave extended mode (64x32) and clear display."""

execute_high_resolution = _set_mode(True)
execute_high_resolution.__doc__ = """00FF - Enter extended mode (128x64) and clear display."""


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions, extended opcodes first."""
    masked = instruction.raw & 0xF0FF
    is_0xFB = masked == 0x00FB
    is_0xFC = masked == 0x00FC
    is_0xFD = masked == 0x00FD
    is_0xFE = masked == 0x00FE
    is_0xFF = masked == 0x00FF
    is_0xCN = (instruction.raw & 0xF0F0) == 0x00C0
    is_0xE0 = instruction.raw == 0x00E0
    is_0xEE = instruction.raw == 0x00EE

    switch_index = (
        is_0xFB * 0 +
        is_0xFC * 1 +
        is_0xFD * 2 +
        is_0xFE * 3 +
        is_0xFF * 4 +
        is_0xCN * 5 +
        is_0xE0 * 6 +
        is_0xEE * 7 +
        (~(is_0xFB | is_0xFC | is_0xFD | is_0xFE | is_0xFF | is_0xCN | is_0xE0 | is_0xEE)) * 8
    )

    return jax.lax.switch(
        switch_index,
        [
            execute_scroll_right,
            execute_scroll_left,
            execute_exit,
            execute_low_resolution,
            execute_high_resolution,
            execute_scroll_down,
            execute_clear_screen,
            execute_return,
            no_op,
        ],
        state, instruction
    )
