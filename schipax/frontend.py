"""pygame implementations of the display, input and audio collaborators."""

import threading
from typing import Optional

import numpy as np
import pygame

from schipax.constants import KEY_LAYOUT, SCREEN_WIDTH, SCREEN_HEIGHT
from schipax.interfaces import ColorPair, InputEvents
from schipax.logging import ConsoleLogger, get_logger
from schipax.rendering import display_to_rgb
from schipax.timers import SoundLatch

KEY_MAP = {getattr(pygame, f"K_{name}"): value for name, value in KEY_LAYOUT.items()}


class PygameInput:
    """Translates pygame keyboard events into keypad transitions.

    ESC and closing the window both request quit.
    """

    def poll(self) -> InputEvents:
        events = InputEvents()
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                events.quit = True
            elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                if event.key == pygame.K_ESCAPE:
                    events.quit = True
                elif event.key in KEY_MAP:
                    events.key_events.append((KEY_MAP[event.key], event.type == pygame.KEYDOWN))
        return events


class PygameDisplay:
    """Window sized to the logical region times ``scale``.

    ``scale`` is given for the standard 64x32 mode; extended frames use half of
    it so the window keeps a constant size across mode switches.
    """

    def __init__(self, scale: int = 10, caption: str = "schipax"):
        pygame.display.init()
        pygame.display.set_caption(caption)
        self.scale = scale
        self.pixel_scale = scale
        self.screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))

    def resize(self, width: int, height: int, colors: ColorPair) -> None:
        self.pixel_scale = max(1, self.scale * SCREEN_WIDTH // width)
        self.screen = pygame.display.set_mode((width * self.pixel_scale, height * self.pixel_scale))
        self.screen.fill(colors[1])

    def present(self, pixels: np.ndarray, colors: ColorPair) -> None:
        on_color, off_color = colors
        rgb = display_to_rgb(pixels, self.pixel_scale, on_color, off_color)
        # surfarray expects (width, height, 3)
        pygame.surfarray.blit_array(self.screen, rgb.swapaxes(0, 1))
        pygame.display.flip()

    def close(self):
        pygame.display.quit()


class PygameAudio:
    """Continuous sine tone gated by the sound timer.

    A background thread samples the :class:`SoundLatch` every ``poll_interval``
    seconds and starts or stops a looping tone accordingly.
    """

    def __init__(
        self,
        tone_frequency: int = 440,
        sample_rate: int = 44100,
        volume: float = 0.25,
        poll_interval: float = 0.005,
        logger: Optional[ConsoleLogger] = None,
    ):
        self.tone_frequency = tone_frequency
        self.sample_rate = sample_rate
        self.volume = volume
        self.poll_interval = poll_interval
        self.logger = logger if logger is not None else get_logger()
        self._sound: Optional[pygame.mixer.Sound] = None
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()

    def _build_tone(self) -> pygame.mixer.Sound:
        frequency, _, channels = pygame.mixer.get_init()
        # One second of whole periods loops without clicks.
        t = np.arange(frequency) / frequency
        wave = (32767 * np.sin(2 * np.pi * self.tone_frequency * t)).astype(np.int16)
        if channels > 1:
            wave = np.repeat(wave[:, None], channels, axis=1)
        sound = pygame.sndarray.make_sound(np.ascontiguousarray(wave))
        sound.set_volume(self.volume)
        return sound

    def start(self, latch: SoundLatch) -> None:
        try:
            pygame.mixer.init(self.sample_rate, -16, 1, 512)
            self._sound = self._build_tone()
        except pygame.error as e:
            self.logger.warning(f"Audio disabled: {e}")
            self._sound = None
            return

        self._stop.clear()
        self._thread = threading.Thread(target=self._run, args=(latch,), name="schipax-audio", daemon=True)
        self._thread.start()

    def _run(self, latch: SoundLatch):
        playing = False
        while not self._stop.wait(self.poll_interval):
            active = latch.active
            if active and not playing:
                self._sound.play(loops=-1)
                playing = True
            elif not active and playing:
                self._sound.stop()
                playing = False
        if playing:
            self._sound.stop()

    def stop(self) -> None:
        if self._thread is not None:
            self._stop.set()
            self._thread.join()
            self._thread = None
        if self._sound is not None:
            pygame.mixer.quit()
            self._sound = None
