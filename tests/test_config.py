"""Tests for clock configuration loading."""

import pytest
from pydantic import ValidationError

from timewarp import ClockConfig, InvalidLocationError, SimClock
from timewarp.config import CONFIG_ENV_VAR


def test_defaults():
    """Defaults describe a real-time UTC clock starting 2024-01-01 00:00."""
    config = ClockConfig()
    assert config.start_date == "2024-01-01"
    assert config.start_time == "00:00"
    assert config.time_zone == "UTC"
    assert config.multiplier == 1.0
    assert config.sync_url is None
    assert config.sync_timeout_s == 5.0


def test_from_yaml_missing_file_returns_defaults(tmp_path):
    """A path that does not exist yields the default config."""
    assert ClockConfig.from_yaml(tmp_path / "absent.yaml") == ClockConfig()


def test_from_yaml_flat_mapping(tmp_path):
    """Top-level keys map straight onto the config."""
    path = tmp_path / "clock.yaml"
    path.write_text(
        "start_date: '2030-12-24'\n"
        "start_time: '18:00'\n"
        "time_zone: Europe/Berlin\n"
        "multiplier: 120\n"
        "sync_url: http://authority/time\n"
    )
    config = ClockConfig.from_yaml(path)
    assert config.start_date == "2030-12-24"
    assert config.time_zone == "Europe/Berlin"
    assert config.multiplier == 120.0
    assert config.sync_url == "http://authority/time"


def test_from_yaml_clock_section(tmp_path):
    """Settings nested under `clock:` are picked up."""
    path = tmp_path / "app.yaml"
    path.write_text("clock:\n  multiplier: 0.25\n  sync_timeout_s: 1.5\nother: ignored\n")
    config = ClockConfig.from_yaml(path)
    assert config.multiplier == 0.25
    assert config.sync_timeout_s == 1.5


def test_from_yaml_empty_file_returns_defaults(tmp_path):
    """An empty YAML document is the default config."""
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert ClockConfig.from_yaml(path) == ClockConfig()


def test_non_positive_timeout_rejected():
    """The sync timeout must be positive."""
    with pytest.raises(ValidationError):
        ClockConfig(sync_timeout_s=0)


def test_from_env_reads_named_file(tmp_path, monkeypatch):
    """TIMEWARP_CONFIG points at the YAML file to load."""
    path = tmp_path / "clock.yaml"
    path.write_text("multiplier: -1\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    assert ClockConfig.from_env().multiplier == -1.0


def test_from_env_unset_returns_defaults(monkeypatch):
    """Without TIMEWARP_CONFIG the defaults apply."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    assert ClockConfig.from_env() == ClockConfig()


def test_bad_zone_surfaces_at_clock_construction(real_time):
    """Config accepts any zone string; the clock rejects unknown ones."""
    config = ClockConfig(time_zone="Atlantis/Capital")
    with pytest.raises(InvalidLocationError):
        SimClock.from_config(config, real_time=real_time)


def test_from_yaml_unquoted_date_and_time(tmp_path):
    """Unquoted YAML dates and HH:MM values still load as strings."""
    path = tmp_path / "clock.yaml"
    path.write_text("start_date: 2030-12-24\nstart_time: 18:05\n")
    config = ClockConfig.from_yaml(path)
    assert config.start_date == "2030-12-24"
    assert config.start_time == "18:05"
