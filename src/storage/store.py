"""Append-only session log plus the single active-slot document."""

from __future__ import annotations

import contextlib
import datetime as dt
import logging
from typing import Any, Iterator, Optional

from pomodoro.models import ActiveSlot, Session

from .config import StoreConfig
from .documents import DocumentReadError, JsonDocument
from .lock import exclusive_lock


class SessionStore:
    """Durable storage for finalized sessions and the active slot.

    Reads never fail: a corrupt or schema-violating document is logged and
    treated as empty (log) or absent (slot). Mutating callers must hold
    ``locked()`` across their whole read-check-write sequence.
    """
    def __init__(
        self,
        config: StoreConfig,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger("storage")
        self._sessions = JsonDocument(config.sessions_path)
        self._active = JsonDocument(config.active_path)

    @property
    def config(self) -> StoreConfig:
        return self._config

    @contextlib.contextmanager
    def locked(self) -> Iterator[None]:
        with exclusive_lock(self._config.lock_path):
            yield

    def load_active(self) -> Optional[ActiveSlot]:
        try:
            raw = self._active.read()
        except DocumentReadError as error:
            self._logger.warning("Ignoring unreadable active session: %s", error)
            return None
        if raw is None:
            return None
        try:
            return ActiveSlot.from_dict(raw)
        except ValueError as error:
            self._logger.warning("Ignoring invalid active session document: %s", error)
            return None

    def save_active(self, slot: ActiveSlot) -> None:
        self._active.write(slot.to_dict())

    def clear_active(self) -> bool:
        return self._active.delete()

    def load_sessions(self) -> list[Session]:
        sessions: list[Session] = []
        for index, entry in enumerate(self._load_raw_log()):
            try:
                sessions.append(Session.from_dict(entry))
            except ValueError as error:
                self._logger.warning("Skipping invalid session #%d: %s", index + 1, error)
        return sessions

    def append_session(self, session: Session) -> None:
        entries = self._load_raw_log(quarantine=True)
        entries.append(session.to_dict())
        self._sessions.write(entries)
        self._logger.info(
            "Session logged: label=%s elapsed=%ss reason=%s",
            session.label,
            session.elapsed_seconds,
            session.end_reason,
        )

    def _load_raw_log(self, *, quarantine: bool = False) -> list[Any]:
        # Malformed entries inside a valid list are kept verbatim so appends
        # never drop history; only typed reads skip them.
        try:
            raw = self._sessions.read(default=[])
        except DocumentReadError as error:
            self._logger.warning("Session log unreadable, treating as empty: %s", error)
            raw = None
        if isinstance(raw, list):
            return list(raw)

        if raw is not None:
            self._logger.warning("Session log is not a list, treating as empty")
        if quarantine:
            suffix = dt.datetime.now().strftime("%Y%m%d%H%M%S")
            moved = self._sessions.quarantine(suffix)
            if moved is not None:
                self._logger.warning("Moved unreadable session log to %s", moved)
        return []
