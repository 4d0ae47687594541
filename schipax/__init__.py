"""CHIP-8/SCHIP interpreter package."""

from schipax.state import EmulatorState, create_state, logical_width, logical_height
from schipax.emulator import (
    execute, fetch, step, resolve_key_wait, run_cycles, run_cycles_with_modes, run_frames, load_program, load_rom,
    FileProgramLoader,
)
from schipax.decode import DecodedInstruction, decode
from schipax.errors import Chip8Error, ImageTooLarge, ImageUnreadable
from schipax.timers import tick, TimerClock, SoundLatch
from schipax.constants import *

__all__ = [
    "EmulatorState",
    "create_state",
    "logical_width",
    "logical_height",
    "fetch",
    "execute",
    "step",
    "resolve_key_wait",
    "run_cycles",
    "run_cycles_with_modes",
    "run_frames",
    "load_program",
    "load_rom",
    "FileProgramLoader",
    "DecodedInstruction",
    "decode",
    "Chip8Error",
    "ImageTooLarge",
    "ImageUnreadable",
    "tick",
    "TimerClock",
    "SoundLatch",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "EXT_SCREEN_WIDTH",
    "EXT_SCREEN_HEIGHT",
    "MAX_WIDTH",
    "MAX_HEIGHT",
]
