"""Configuration model for the deferred auto-stop dispatcher."""

from __future__ import annotations

import sys
from dataclasses import dataclass


class SchedulerConfigurationError(Exception):
    """Raised when scheduler configuration is invalid."""


@dataclass(frozen=True)
class SchedulerConfig:
    """Validated scheduler configuration derived from app settings."""
    enabled: bool = True
    python_executable: str = ""
    max_rounds: int = 3
    config_file: str = ""

    def __post_init__(self) -> None:
        if self.max_rounds < 1:
            raise SchedulerConfigurationError(
                f"scheduler.max_rounds must be >= 1, got: {self.max_rounds}"
            )

    @property
    def interpreter(self) -> str:
        return self.python_executable or sys.executable

    @classmethod
    def from_settings(cls, settings, *, config_file: str = "") -> "SchedulerConfig":
        return cls(
            enabled=bool(settings.enabled),
            python_executable=(settings.python_executable or "").strip(),
            max_rounds=int(settings.max_rounds),
            config_file=config_file,
        )
