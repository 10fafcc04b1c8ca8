"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_DATA_DIR = "~/.pomo"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class StorageSettings:
    """Session log and active-slot locations from `[storage]`."""
    data_dir: str = DEFAULT_DATA_DIR
    sessions_file: str = "pomo_sessions.json"
    active_file: str = "pomo_active.json"
    lock_file: str = "pomo.lock"


@dataclass(frozen=True)
class SchedulerSettings:
    """Detached auto-stop settings from `[scheduler]`."""
    enabled: bool = True
    python_executable: str = ""
    max_rounds: int = 3


@dataclass(frozen=True)
class NotificationSettings:
    """Completion tone settings from `[notification]`."""
    enabled: bool = True
    frequency_hz: float = 900.0
    duration_ms: int = 250
    volume: float = 0.3
    output_device: Optional[int] = None


@dataclass(frozen=True)
class ReportingSettings:
    """Report defaults from `[reporting]`."""
    stats_days: int = 7


@dataclass(frozen=True)
class LoggingSettings:
    """Log level and background log file from `[logging]`."""
    level: str = "WARNING"
    log_file: str = ""


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    storage: StorageSettings
    scheduler: SchedulerSettings
    notification: NotificationSettings
    reporting: ReportingSettings
    logging: LoggingSettings
    source_file: str
