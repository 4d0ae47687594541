"""CHIP-8 ALU operations (8xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from schipax.state import EmulatorState
from schipax.decode import DecodedInstruction


def _flag(condition) -> jnp.ndarray:
    return jnp.astype(condition, jnp.uint8)


def alu_set(vx: int, vy: int) -> tuple[int, int]:
    """8XY0 - Set: VX = VY."""
    return vy, jnp.zeros((), dtype=jnp.uint8)


def alu_or(vx: int, vy: int) -> tuple[int, int]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, jnp.zeros((), dtype=jnp.uint8)


def alu_and(vx: int, vy: int) -> tuple[int, int]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, jnp.zeros((), dtype=jnp.uint8)


def alu_xor(vx: int, vy: int) -> tuple[int, int]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, jnp.zeros((), dtype=jnp.uint8)


def alu_add(vx: int, vy: int) -> tuple[int, int]:
    """8XY4 - Add: VX += VY, VF = carry."""
    result = jnp.astype(vx, jnp.int32) + jnp.astype(vy, jnp.int32)
    return jnp.astype(result & 0xFF, jnp.uint8), _flag(result > 255)


def alu_sub_xy(vx: int, vy: int) -> tuple[int, int]:
    """8XY5 - Subtract: VX -= VY, VF = VX > VY."""
    return vx - vy, _flag(vx > vy)


def alu_shift_right(vx: int, vy: int) -> tuple[int, int]:
    """8XY6 - Shift right: VX >>= 1, VF = old bit 0."""
    return vx >> 1, _flag(vx & 1)


def alu_sub_yx(vx: int, vy: int) -> tuple[int, int]:
    """8XY7 - Subtract: VX = VY - VX, VF = VY > VX."""
    return vy - vx, _flag(vy > vx)


def alu_shift_left(vx: int, vy: int) -> tuple[int, int]:
    """8XYE - Shift left: VX <<= 1, VF = old bit 7."""
    return vx << 1, _flag(vx >> 7)


# Sub-opcodes that exist, and the ones among them that write VF.
VALID_OPS = jnp.array([1, 1, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 1, 0], dtype=bool)
FLAG_OPS = jnp.array([0, 0, 0, 0, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 1, 0], dtype=bool)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher.

    VF is written before VX. Apart from ADD, whose sum is taken up front, the
    result is computed from the registers as they are after the VF write, so
    X or Y being F sees the new flag.
    """
    operations = [alu_set, alu_or, alu_and, alu_xor, alu_add,
                  alu_sub_xy, alu_shift_right, alu_sub_yx, alu_shift_left]
    # Map valid operations 0..7,14 onto 0..8
    branch = jnp.where(instruction.n == 14, 8, instruction.n)

    def _apply(state: EmulatorState) -> EmulatorState:
        vx = state.V[instruction.x]
        vy = state.V[instruction.y]
        sum_result, flag = jax.lax.switch(branch, operations, vx, vy)

        vf = jnp.where(FLAG_OPS[instruction.n], flag, state.V[15])
        new_V = state.V.at[15].set(vf)

        result, _ = jax.lax.switch(branch, operations, new_V[instruction.x], new_V[instruction.y])
        result = jnp.where(instruction.n == 4, sum_result, result)
        return state.replace(V=new_V.at[instruction.x].set(jnp.astype(result, jnp.uint8)))

    return jax.lax.cond(VALID_OPS[instruction.n], _apply, lambda s: s, state)
