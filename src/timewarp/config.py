"""Tuneable clock parameters."""

import os
from datetime import date
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

CONFIG_ENV_VAR = "TIMEWARP_CONFIG"


class ClockConfig(BaseModel):
    """Simulated clock configuration."""

    start_date: str = "2024-01-01"  # YYYY-MM-DD
    start_time: str = "00:00"  # HH:MM, 24-hour
    time_zone: str = "UTC"  # IANA identifier, "UTC" or "Local"
    multiplier: float = 1.0  # Simulated seconds per real second
    sync_url: str | None = None  # Default time authority for synchronize()
    sync_timeout_s: float = Field(default=5.0, gt=0)

    @field_validator("start_date", mode="before")
    @classmethod
    def _date_to_str(cls, v: Any) -> Any:
        # Unquoted YAML dates load as datetime.date
        if isinstance(v, date):
            return v.isoformat()
        return v

    @field_validator("start_time", mode="before")
    @classmethod
    def _sexagesimal_to_str(cls, v: Any) -> Any:
        # YAML 1.1 reads an unquoted 18:00 as the base-60 integer 1080
        if isinstance(v, int) and not isinstance(v, bool) and 0 <= v < 24 * 60:
            hours, minutes = divmod(v, 60)
            return f"{hours:02d}:{minutes:02d}"
        return v

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ClockConfig":
        """Load config from YAML file. A missing file yields the defaults."""
        path = Path(path)
        if not path.exists():
            return cls()
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(_clock_section(data))

    @classmethod
    def from_env(cls) -> "ClockConfig":
        """Load config from the YAML file named by TIMEWARP_CONFIG, if set."""
        config_path = os.getenv(CONFIG_ENV_VAR)
        if config_path:
            return cls.from_yaml(config_path)
        return cls()


def _clock_section(data: Any) -> Any:
    """Accept either a bare mapping or one nested under ``clock:``."""
    if isinstance(data, dict) and isinstance(data.get("clock"), dict):
        return data["clock"]
    return data
