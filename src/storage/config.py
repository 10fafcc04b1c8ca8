"""Configuration model for the session store documents."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class StorageError(Exception):
    """Raised when a storage document cannot be written."""


DEFAULT_SESSIONS_FILE = "pomo_sessions.json"
DEFAULT_ACTIVE_FILE = "pomo_active.json"
DEFAULT_LOCK_FILE = "pomo.lock"


@dataclass(frozen=True)
class StoreConfig:
    """Validated document locations derived from app settings."""
    data_dir: str
    sessions_file: str = DEFAULT_SESSIONS_FILE
    active_file: str = DEFAULT_ACTIVE_FILE
    lock_file: str = DEFAULT_LOCK_FILE

    def __post_init__(self) -> None:
        if not self.data_dir.strip():
            raise StorageError("storage.data_dir cannot be empty")
        names = (self.sessions_file, self.active_file, self.lock_file)
        if any(not name.strip() for name in names):
            raise StorageError("storage file names cannot be empty")
        if len(set(names)) != len(names):
            raise StorageError("storage file names must be distinct")

    @property
    def sessions_path(self) -> Path:
        return Path(self.data_dir) / self.sessions_file

    @property
    def active_path(self) -> Path:
        return Path(self.data_dir) / self.active_file

    @property
    def lock_path(self) -> Path:
        return Path(self.data_dir) / self.lock_file

    @classmethod
    def from_settings(cls, settings) -> "StoreConfig":
        return cls(
            data_dir=settings.data_dir,
            sessions_file=settings.sessions_file or DEFAULT_SESSIONS_FILE,
            active_file=settings.active_file or DEFAULT_ACTIVE_FILE,
            lock_file=settings.lock_file or DEFAULT_LOCK_FILE,
        )
