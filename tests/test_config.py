"""Tests for configuration loading."""

import pytest
from omegaconf.errors import OmegaConfBaseException
from schipax.config import EmulatorConfig, load_config


def test_defaults():
    cfg = load_config()

    assert isinstance(cfg, EmulatorConfig)
    assert cfg.scale == 10
    assert cfg.cycles_per_frame == 10
    assert cfg.timer_frequency == 60
    assert cfg.seed is None
    assert cfg.audio is True


def test_dotlist_overrides():
    cfg = load_config(overrides=["scale=4", "seed=42", "audio=false", "log_level=DEBUG"])

    assert cfg.scale == 4
    assert cfg.seed == 42
    assert cfg.audio is False
    assert cfg.log_level == "DEBUG"


def test_user_file_then_overrides(tmp_path):
    path = tmp_path / "user.yaml"
    path.write_text("scale: 6\ncycles_per_frame: 20\n")

    cfg = load_config(str(path), ["cycles_per_frame=5"])

    assert cfg.scale == 6
    assert cfg.cycles_per_frame == 5


def test_unknown_key_rejected():
    with pytest.raises(OmegaConfBaseException):
        load_config(overrides=["no_such_setting=1"])


def test_ill_typed_value_rejected():
    with pytest.raises(OmegaConfBaseException):
        load_config(overrides=["scale=huge"])


@pytest.mark.parametrize(
    "override", ["scale=0", "cycles_per_frame=0", "timer_frequency=0", "timer_frequency=-60", "cycle_delay_ms=-1"]
)
def test_out_of_range_rejected(override):
    with pytest.raises(ValueError):
        load_config(overrides=[override])


def test_missing_user_file(tmp_path):
    with pytest.raises(OSError):
        load_config(str(tmp_path / "absent.yaml"))
