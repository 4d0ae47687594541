"""CHIP-8/SCHIP instruction decoding.

An instruction word is split into fixed bit fields; which of them an opcode
actually reads is up to its handler.
"""

import jax.numpy as jnp
from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Operand fields of one 16-bit instruction word."""
    raw: jnp.ndarray
    opcode: jnp.ndarray  # bits 12-15, selects the handler
    x: jnp.ndarray       # bits 8-11, register index
    y: jnp.ndarray       # bits 4-7, register index
    n: jnp.ndarray       # bits 0-3
    kk: jnp.ndarray      # bits 0-7
    nnn: jnp.ndarray     # bits 0-11, address


def _bits(word: jnp.ndarray, shift: int, width: int) -> jnp.ndarray:
    return (word >> shift) & ((1 << width) - 1)


def decode(instruction) -> DecodedInstruction:
    """Split an instruction word into its operand fields.

    Works on Python ints and traced scalars alike. Fields are widened to int32
    so they can index arrays and select ``lax.switch`` branches directly.
    """
    word = jnp.asarray(instruction, dtype=jnp.int32) & 0xFFFF
    return DecodedInstruction(
        raw=word,
        opcode=_bits(word, 12, 4),
        x=_bits(word, 8, 4),
        y=_bits(word, 4, 4),
        n=_bits(word, 0, 4),
        kk=_bits(word, 0, 8),
        nnn=_bits(word, 0, 12),
    )
