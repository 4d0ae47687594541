"""Main CHIP-8/SCHIP execution engine."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
from schipax.state import EmulatorState
from schipax.decode import decode
from schipax.constants import PROGRAM_START, MAX_PROGRAM_SIZE, ADDRESS_MASK
from schipax.errors import ImageTooLarge, ImageUnreadable
from schipax.timers import tick
from schipax.logging import scan_with_progress
from schipax.instructions.system import execute_system_instruction
from schipax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from schipax.instructions.alu import execute_alu_operation
from schipax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from schipax.instructions.display import execute_display
from schipax.instructions.misc import execute_misc_instruction


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single instruction (``pc`` must already point past it)."""
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.opcode,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register,
            execute_set_index,
            execute_jump_with_offset,
            execute_random,
            execute_display,
            execute_skip_if_key,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory and advance ``pc`` by 2."""
    address = jnp.astype(state.pc, jnp.int32)
    instruction = _pack_u16(
        state.memory[address & ADDRESS_MASK],
        state.memory[(address + 1) & ADDRESS_MASK],
    )
    return state.replace(pc=state.pc + 2), instruction


def _cycle(state: EmulatorState) -> EmulatorState:
    state, instruction = fetch(state)
    return execute(state, instruction)


def is_suspended(state: EmulatorState) -> jnp.ndarray:
    """Whether dispatch is paused (halted, or waiting on FX0A)."""
    return state.halted | state.awaiting_key


def step(state: EmulatorState) -> EmulatorState:
    """Run one fetch-decode-execute cycle unless the machine is suspended."""
    return jax.lax.cond(is_suspended(state), lambda s: s, _cycle, state)


def resolve_key_wait(state: EmulatorState, key: int) -> EmulatorState:
    """Complete a pending FX0A by storing ``key`` in its register."""
    return state.replace(
        V=state.V.at[state.key_register].set(jnp.asarray(key, dtype=jnp.uint8)),
        awaiting_key=jnp.zeros((), dtype=jnp.bool_),
    )


@partial(jax.jit, static_argnums=1)
def run_cycles(state: EmulatorState, n: int) -> EmulatorState:
    """Run ``n`` cycles (timers untouched)."""
    state, _ = jax.lax.scan(lambda s, _: (step(s), None), state, length=n)
    return state


@partial(jax.jit, static_argnums=1)
def run_cycles_with_modes(state: EmulatorState, n: int) -> tuple[EmulatorState, jnp.ndarray]:
    """Run ``n`` cycles, also returning the ``hires`` flag after each one."""
    def cycle(state, _):
        state = step(state)
        return state, state.hires

    return jax.lax.scan(cycle, state, length=n)


@partial(jax.jit, static_argnums=(1, 2, 3))
def run_frames(
    state: EmulatorState,
    num_frames: int,
    cycles_per_frame: int = 1,
    show_progress: bool = False,
) -> tuple[EmulatorState, jnp.ndarray]:
    """Run ``num_frames`` frames of ``cycles_per_frame`` cycles, ticking timers once per frame.

    Returns:
        Tuple of:
            - state: Final emulator state
            - frames: Tuple ``(displays, hires)`` stacked over frames, with
              displays shaped ``(num_frames, MAX_WIDTH, MAX_HEIGHT)``
    """
    def frame(state, _):
        state = jax.lax.fori_loop(0, cycles_per_frame, lambda _, s: step(s), state)
        state = tick(state)
        return state, (state.display, state.hires)

    if show_progress:
        frame = scan_with_progress(num_frames, desc=f"Running ({num_frames:,} frames)")(frame)

    return jax.lax.scan(frame, state, jnp.arange(num_frames))


def load_program(state: EmulatorState, data: bytes) -> EmulatorState:
    """Copy a program image into memory at 0x200."""
    if len(data) > MAX_PROGRAM_SIZE:
        raise ImageTooLarge(len(data), MAX_PROGRAM_SIZE)
    if not data:
        return state
    rom_array = jnp.array(list(data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(data)].set(rom_array)
    return state.replace(memory=new_memory)


class FileProgramLoader:
    """Reads a program image from disk."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> bytes:
        try:
            with open(self.path, 'rb') as f:
                return f.read()
        except OSError as e:
            raise ImageUnreadable(f"Failed to open ROM '{self.path}': {e}") from e


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM file into memory starting at 0x200."""
    return load_program(state, FileProgramLoader(filename).load())
