"""Delay/sound timer subsystem.

Timers tick at a single fixed cadence (60 Hz by default), independent of the
instruction rate. The sound timer is the only value read from another thread
(the audio sink), and it is shared exclusively through :class:`SoundLatch`.
"""

import threading
import time
from typing import Callable

import jax.numpy as jnp

from schipax.constants import TIMER_FREQUENCY
from schipax.state import EmulatorState


def _decrement(timer: jnp.ndarray) -> jnp.ndarray:
    return jnp.where(timer > 0, timer - 1, timer).astype(jnp.uint8)


def tick(state: EmulatorState) -> EmulatorState:
    """Decrement each non-zero timer by one."""
    return state.replace(
        delay_timer=_decrement(state.delay_timer),
        sound_timer=_decrement(state.sound_timer),
    )


class TimerClock:
    """Wall-clock gate deciding when timer ticks are due.

    Args:
        frequency: Tick rate in Hz
        clock: Monotonic time source in seconds, injectable for tests
        max_catch_up: Upper bound on ticks reported by a single :meth:`due` call
    """

    def __init__(
        self,
        frequency: int = TIMER_FREQUENCY,
        clock: Callable[[], float] = time.monotonic,
        max_catch_up: int = 4,
    ):
        if frequency <= 0:
            raise ValueError(f"Timer frequency must be positive, got {frequency}")
        self.period = 1.0 / frequency
        self.clock = clock
        self.max_catch_up = max_catch_up
        self._last = clock()

    def due(self) -> int:
        """Return the number of ticks owed since the previous call."""
        now = self.clock()
        ticks = int((now - self._last) / self.period)
        if ticks <= 0:
            return 0
        if ticks > self.max_catch_up:
            # Drop the backlog after a stall instead of draining it all at once.
            self._last = now
            return self.max_catch_up
        self._last += ticks * self.period
        return ticks


class SoundLatch:
    """Lock-guarded copy of the sound timer for the audio thread."""

    def __init__(self, value: int = 0):
        self._lock = threading.Lock()
        self._value = value

    def publish(self, value: int):
        with self._lock:
            self._value = int(value)

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    @property
    def active(self) -> bool:
        """Whether a tone should currently be emitted."""
        return self.value > 0
