"""Configuration model for the completion tone."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class NotifierConfigurationError(Exception):
    """Raised when notification configuration is invalid."""


@dataclass(frozen=True)
class NotifierConfig:
    enabled: bool = True
    frequency_hz: float = 900.0
    duration_ms: int = 250
    volume: float = 0.3
    sample_rate_hz: int = 44100
    output_device: Optional[int] = None

    def __post_init__(self) -> None:
        if not 20.0 <= self.frequency_hz <= 20000.0:
            raise NotifierConfigurationError(
                f"notification.frequency_hz must be in [20, 20000], got: {self.frequency_hz}"
            )
        if self.duration_ms <= 0:
            raise NotifierConfigurationError("notification.duration_ms must be > 0")
        if not 0.0 <= self.volume <= 1.0:
            raise NotifierConfigurationError(
                f"notification.volume must be in [0, 1], got: {self.volume}"
            )

    @classmethod
    def from_settings(cls, settings) -> "NotifierConfig":
        return cls(
            enabled=bool(settings.enabled),
            frequency_hz=float(settings.frequency_hz),
            duration_ms=int(settings.duration_ms),
            volume=float(settings.volume),
            output_device=settings.output_device,
        )
