"""Atomic read/write of a single pretty-printed JSON document."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from .config import StorageError


class DocumentReadError(Exception):
    """Raised when a document exists but cannot be read or decoded."""


class JsonDocument:
    """One human-inspectable JSON file; absence of the file means no value."""
    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def read(self, default: Any = None) -> Any:
        if not self.exists():
            return default
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as error:
            raise DocumentReadError(f"Failed to read {self._path}: {error}") from error
        if not text.strip():
            return default
        try:
            return json.loads(text)
        except json.JSONDecodeError as error:
            raise DocumentReadError(f"Corrupt JSON in {self._path}: {error}") from error

    def write(self, payload: Any) -> None:
        """Replace the document atomically so readers never see a partial file."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=str(self._path.parent),
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, ensure_ascii=False)
                handle.write("\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except OSError as error:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise StorageError(f"Failed to write {self._path}: {error}") from error

    def delete(self) -> bool:
        try:
            self._path.unlink()
        except FileNotFoundError:
            return False
        except OSError as error:
            raise StorageError(f"Failed to delete {self._path}: {error}") from error
        return True

    def quarantine(self, suffix: str) -> Path | None:
        """Move an unreadable document aside instead of overwriting it."""
        if not self.exists():
            return None
        target = self._path.with_name(f"{self._path.name}.corrupt-{suffix}")
        try:
            os.replace(self._path, target)
        except OSError as error:
            raise StorageError(f"Failed to move aside {self._path}: {error}") from error
        return target
