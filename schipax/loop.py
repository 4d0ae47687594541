"""Execution loop driving the interpreter against its external collaborators."""

import time
from typing import Callable, Optional

import jax
import jax.numpy as jnp
import numpy as np

from schipax.constants import KEY_COUNT, TIMER_FREQUENCY
from schipax.emulator import resolve_key_wait, run_cycles_with_modes
from schipax.interfaces import AudioSink, DisplaySink, InputEvents, InputSource
from schipax.logging import ConsoleLogger, get_logger
from schipax.rendering import color_pair, logical_pixels, logical_size
from schipax.state import EmulatorState
from schipax.timers import SoundLatch, TimerClock, tick

_tick = jax.jit(tick)


class ExecutionLoop:
    """Owns the emulator state for the lifetime of a run.

    Each iteration pumps input into the keypad latch, dispatches a batch of
    cycles (or, while an FX0A is pending, waits for a key-down event), ticks the
    timers on their own cadence, publishes the sound timer to the audio sink and
    presents a frame.

    Args:
        state: Initial emulator state with the program already loaded
        display: Display sink receiving frames and resize requests
        input_source: Source of keypad transitions and the quit signal
        audio: Optional audio sink fed through a :class:`SoundLatch`
        cycles_per_frame: Cycles dispatched per iteration
        cycle_delay: Seconds slept at the end of every iteration
        timer_clock: Timer cadence gate, defaults to a 60 Hz wall clock
        sleep: Sleep function, injectable for tests
        logger: Console logger
    """

    def __init__(
        self,
        state: EmulatorState,
        display: DisplaySink,
        input_source: InputSource,
        audio: Optional[AudioSink] = None,
        cycles_per_frame: int = 10,
        cycle_delay: float = 1 / TIMER_FREQUENCY,
        timer_clock: Optional[TimerClock] = None,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[ConsoleLogger] = None,
    ):
        self.state = state
        self.display = display
        self.input_source = input_source
        self.audio = audio
        self.cycles_per_frame = cycles_per_frame
        self.cycle_delay = cycle_delay
        self.timer_clock = timer_clock if timer_clock is not None else TimerClock()
        self.sleep = sleep
        self.logger = logger if logger is not None else get_logger()

        self.sound_latch = SoundLatch(int(state.sound_timer))
        self.frames = 0
        self._keys = np.array(state.keypad, dtype=np.bool_)
        self._hires: Optional[bool] = None

    def pump_input(self) -> InputEvents:
        """Poll the input source and latch key transitions into the state."""
        events = self.input_source.poll()
        for key, pressed in events.key_events:
            if 0 <= key < KEY_COUNT:
                self._keys[key] = pressed
        if events.key_events:
            self.state = self.state.replace(keypad=jnp.asarray(self._keys))
        return events

    def _follow_mode(self, hires: bool):
        """Send a resize request when the display mode differs from the last one seen."""
        if hires == self._hires:
            return
        width, height = logical_size(hires)
        if self._hires is not None:
            self.logger.debug(f"Display mode changed to {width}x{height}")
        self.display.resize(width, height, color_pair(hires))
        self._hires = hires

    def _dispatch(self, events: InputEvents):
        self._follow_mode(bool(self.state.hires))
        if bool(self.state.awaiting_key):
            pressed = [key for key in events.keys_down if 0 <= key < KEY_COUNT]
            if not pressed:
                return
            self.logger.debug(f"Key {pressed[0]:X} resumes FX0A into V{int(self.state.key_register):X}")
            self.state = resolve_key_wait(self.state, pressed[0])
        self.state, modes = run_cycles_with_modes(self.state, self.cycles_per_frame)
        # Every switch inside the batch is reported, even one undone before the frame.
        for hires in np.asarray(modes):
            self._follow_mode(bool(hires))

    def _tick_timers(self):
        for _ in range(self.timer_clock.due()):
            self.state = _tick(self.state)
        self.sound_latch.publish(int(self.state.sound_timer))

    def _present(self):
        hires = bool(self.state.hires)
        colors = color_pair(hires)
        self._follow_mode(hires)
        self.display.present(logical_pixels(self.state.display, hires), colors)

    def run_frame(self) -> bool:
        """Run one loop iteration; return False once the run should end."""
        events = self.pump_input()
        if events.quit:
            self.logger.info("Quit requested")
            return False

        self._dispatch(events)
        if bool(self.state.halted):
            self.logger.info(f"Program exited (00FD) at PC=0x{int(self.state.pc) - 2:04X}")
            return False

        self._tick_timers()
        self._present()
        self.frames += 1
        self.sleep(self.cycle_delay)
        return True

    def run(self, max_frames: Optional[int] = None) -> int:
        """Run until quit, 00FD, or ``max_frames`` iterations; return the exit code."""
        if self.audio is not None:
            self.audio.start(self.sound_latch)
        try:
            while max_frames is None or self.frames < max_frames:
                if not self.run_frame():
                    break
        finally:
            if self.audio is not None:
                self.audio.stop()
        return 0
