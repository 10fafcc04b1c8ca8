"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    DEFAULT_DATA_DIR,
    AppConfig,
    AppConfigurationError,
    LoggingSettings,
    NotificationSettings,
    ReportingSettings,
    SchedulerSettings,
    StorageSettings,
)

_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    storage = _parse_storage_settings(_section(raw, "storage"), base_dir=base_dir)
    scheduler = _parse_scheduler_settings(_section(raw, "scheduler"))
    notification = _parse_notification_settings(_section(raw, "notification"))
    reporting = _parse_reporting_settings(_section(raw, "reporting"))
    logging_settings = _parse_logging_settings(
        _section(raw, "logging"),
        base_dir=base_dir,
        data_dir=storage.data_dir,
    )

    return AppConfig(
        storage=storage,
        scheduler=scheduler,
        notification=notification,
        reporting=reporting,
        logging=logging_settings,
        source_file=source_file,
    )


def _parse_storage_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> StorageSettings:
    data_dir = _as_str(section.get("data_dir", DEFAULT_DATA_DIR), "storage.data_dir")
    return StorageSettings(
        data_dir=_resolve_path(base_dir, data_dir or DEFAULT_DATA_DIR),
        sessions_file=_file_name(section, "sessions_file", "pomo_sessions.json"),
        active_file=_file_name(section, "active_file", "pomo_active.json"),
        lock_file=_file_name(section, "lock_file", "pomo.lock"),
    )


def _parse_scheduler_settings(section: Mapping[str, Any]) -> SchedulerSettings:
    max_rounds = _as_int(section.get("max_rounds", 3), "scheduler.max_rounds")
    if max_rounds < 1:
        raise AppConfigurationError("scheduler.max_rounds must be >= 1.")
    return SchedulerSettings(
        enabled=_as_bool(section.get("enabled", True), "scheduler.enabled"),
        python_executable=_as_str(
            section.get("python_executable", ""),
            "scheduler.python_executable",
        ),
        max_rounds=max_rounds,
    )


def _parse_notification_settings(section: Mapping[str, Any]) -> NotificationSettings:
    return NotificationSettings(
        enabled=_as_bool(section.get("enabled", True), "notification.enabled"),
        frequency_hz=_as_float(
            section.get("frequency_hz", 900.0),
            "notification.frequency_hz",
        ),
        duration_ms=_as_int(section.get("duration_ms", 250), "notification.duration_ms"),
        volume=_as_float(section.get("volume", 0.3), "notification.volume"),
        output_device=(
            _as_int(section.get("output_device"), "notification.output_device")
            if "output_device" in section
            else None
        ),
    )


def _parse_reporting_settings(section: Mapping[str, Any]) -> ReportingSettings:
    stats_days = _as_int(section.get("stats_days", 7), "reporting.stats_days")
    if stats_days < 1:
        raise AppConfigurationError("reporting.stats_days must be >= 1.")
    return ReportingSettings(stats_days=stats_days)


def _parse_logging_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
    data_dir: str,
) -> LoggingSettings:
    level = _as_str(section.get("level", "WARNING"), "logging.level").upper() or "WARNING"
    if level not in _ALLOWED_LOG_LEVELS:
        allowed = ", ".join(sorted(_ALLOWED_LOG_LEVELS))
        raise AppConfigurationError(f"logging.level must be one of: {allowed}")
    log_file = _as_str(section.get("log_file", ""), "logging.log_file")
    return LoggingSettings(
        level=level,
        log_file=(
            _resolve_path(base_dir, log_file)
            if log_file
            else str(Path(data_dir) / "pomo.log")
        ),
    )


def log_level(settings: LoggingSettings) -> int:
    return logging.getLevelName(settings.level)


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _file_name(section: Mapping[str, Any], field: str, default: str) -> str:
    name = _as_str(section.get(field, default), f"storage.{field}") or default
    if Path(name).name != name:
        raise AppConfigurationError(f"storage.{field} must be a plain file name.")
    return name


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)
