"""Interpreter configuration backed by OmegaConf.

Values come from the packaged ``conf/config.yaml``, optionally merged with a
user YAML file and ``key=value`` overrides, and are validated against
:class:`EmulatorConfig`.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from omegaconf import OmegaConf

DEFAULT_CONFIG_PATH = Path(__file__).parent / "conf" / "config.yaml"


@dataclass
class EmulatorConfig:
    """Settings of the interactive and headless frontends.

    Attributes:
        scale: Window pixels per standard-mode cell
        cycles_per_frame: Instructions executed between two presented frames
        cycle_delay_ms: Sleep after each frame, bounding CPU usage
        timer_frequency: Delay/sound timer rate in Hz
        tone_frequency: Pitch of the beep in Hz
        sample_rate: Audio sample rate
        audio: Whether to open an audio device at all
        seed: PRNG seed for CXKK; time-based when None
        log_level: Console logger threshold
        caption: Window title
    """
    scale: int = 10
    cycles_per_frame: int = 10
    cycle_delay_ms: float = 16.0
    timer_frequency: int = 60
    tone_frequency: int = 440
    sample_rate: int = 44100
    audio: bool = True
    seed: Optional[int] = None
    log_level: str = "INFO"
    caption: str = "schipax"


def load_config(path: Optional[str] = None, overrides: Iterable[str] = ()) -> EmulatorConfig:
    """Build the effective configuration.

    Args:
        path: Optional user YAML file merged over the packaged defaults
        overrides: Dotlist entries such as ``"scale=8"``, applied last

    Returns:
        Validated EmulatorConfig instance

    Raises:
        omegaconf.errors.OmegaConfBaseException: On unknown keys or ill-typed values
        OSError: If ``path`` cannot be read
    """
    schema = OmegaConf.structured(EmulatorConfig)
    layers = [schema, OmegaConf.load(DEFAULT_CONFIG_PATH)]
    if path is not None:
        layers.append(OmegaConf.load(path))
    overrides = list(overrides)
    if overrides:
        layers.append(OmegaConf.from_dotlist(overrides))
    cfg = OmegaConf.merge(*layers)

    if cfg.scale < 1:
        raise ValueError(f"scale must be at least 1, got {cfg.scale}")
    if cfg.cycles_per_frame < 1:
        raise ValueError(f"cycles_per_frame must be at least 1, got {cfg.cycles_per_frame}")
    if cfg.timer_frequency < 1:
        raise ValueError(f"timer_frequency must be at least 1, got {cfg.timer_frequency}")
    if cfg.cycle_delay_ms < 0:
        raise ValueError(f"cycle_delay_ms must not be negative, got {cfg.cycle_delay_ms}")

    return OmegaConf.to_object(cfg)
