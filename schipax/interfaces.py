"""Collaborator interfaces consumed by the execution loop.

Concrete implementations live in :mod:`schipax.frontend`; tests substitute
in-memory fakes.
"""

from dataclasses import dataclass, field
from typing import List, Protocol, Tuple

import numpy as np

from schipax.timers import SoundLatch

Color = Tuple[int, int, int]
ColorPair = Tuple[Color, Color]


@dataclass
class InputEvents:
    """Input gathered by one poll.

    Attributes:
        key_events: ``(key, pressed)`` transitions of the hex keypad, in arrival order
        quit: Whether the user asked to close the interpreter
    """
    key_events: List[Tuple[int, bool]] = field(default_factory=list)
    quit: bool = False

    @property
    def keys_down(self) -> List[int]:
        return [key for key, pressed in self.key_events if pressed]


class ProgramLoader(Protocol):
    def load(self) -> bytes:
        """Return the raw program image."""


class InputSource(Protocol):
    def poll(self) -> InputEvents:
        """Drain pending keyboard events without blocking."""


class DisplaySink(Protocol):
    def resize(self, width: int, height: int, colors: ColorPair) -> None:
        """Adapt the output surface to a new logical resolution."""

    def present(self, pixels: np.ndarray, colors: ColorPair) -> None:
        """Show a frame; ``pixels`` is a boolean ``(width, height)`` array."""


class AudioSink(Protocol):
    def start(self, latch: SoundLatch) -> None:
        """Begin sampling ``latch`` on the sink's own schedule."""

    def stop(self) -> None:
        """Stop sampling and release the audio device."""
