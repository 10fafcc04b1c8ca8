"""Persistent focus-session state machine with idempotent finalization."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable, Literal, Optional

from .clock import Clock, SystemClock
from .constants import (
    ACTION_AUTOSTOP,
    ACTION_CANCEL,
    ACTION_FINALIZE,
    ACTION_START,
    ACTION_STOP,
    END_REASON_COMPLETED,
    END_REASON_STOPPED_EARLY,
    PHASE_IDLE,
    PHASE_JUST_COMPLETED,
    PHASE_RUNNING,
    REASON_CANCELLED,
    REASON_FINALIZED,
    REASON_NOT_EXPIRED,
    REASON_NOTHING_TO_CANCEL,
    REASON_NOTHING_TO_FINALIZE,
    REASON_NOTHING_TO_STOP,
    REASON_STALE_IDENTITY,
    REASON_STARTED,
)
from .errors import InvalidDurationError, SessionAlreadyActiveError
from .models import ActiveSlot, Session, parse_timestamp, sanitize_label

if TYPE_CHECKING:
    from scheduler import DeferredFinalizer
    from storage import SessionStore

SessionPhase = Literal["idle", "running", "just_completed"]
SessionAction = Literal["start", "stop", "cancel", "finalize", "autostop"]


@dataclass(frozen=True)
class SessionStatus:
    """What `status` observed, after any lazy finalization it performed."""
    phase: SessionPhase
    label: Optional[str] = None
    planned_minutes: Optional[int] = None
    remaining_seconds: int = 0
    session: Optional[Session] = None
    # Set when the expired slot was finalized by a racing caller first.
    already_saved: bool = False


@dataclass(frozen=True)
class SessionActionResult:
    """Result envelope returned after applying a session action."""
    action: SessionAction
    accepted: bool
    reason: str
    label: Optional[str] = None
    slot: Optional[ActiveSlot] = None
    session: Optional[Session] = None
    remaining_seconds: Optional[int] = None


class PomodoroSessionService:
    """Single-active-session state machine backed by a durable store.

    Every mutation holds the store lock for its whole read-check-act
    sequence, so racing finalizers (status, stop, and the detached autostop
    callback) append at most one log entry per session. Losing a race is a
    no-op result, never an error.
    """

    def __init__(
        self,
        store: "SessionStore",
        *,
        clock: Optional[Clock] = None,
        dispatcher: Optional["DeferredFinalizer"] = None,
        on_completed: Optional[Callable[[Session], None]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._dispatcher = dispatcher
        self._on_completed = on_completed
        self._logger = logger or logging.getLogger("pomodoro")

    def start(self, planned_minutes: int, label: Optional[str] = None) -> SessionActionResult:
        if isinstance(planned_minutes, bool) or not isinstance(planned_minutes, int):
            raise InvalidDurationError("Please provide minutes > 0.")
        if planned_minutes <= 0:
            raise InvalidDurationError("Please provide minutes > 0.")

        session_label = sanitize_label(label)
        with self._store.locked():
            existing = self._store.load_active()
            if existing is not None:
                raise SessionAlreadyActiveError(
                    f"A session is already running: {existing.label}"
                )
            slot = ActiveSlot(
                start_time=self._clock.now(),
                planned_minutes=planned_minutes,
                label=session_label,
            )
            self._store.save_active(slot)

        self._logger.info(
            "Session started: label=%s planned=%smin identity=%s",
            slot.label,
            slot.planned_minutes,
            slot.identity,
        )
        self._schedule_autostop(slot)
        return SessionActionResult(
            action=ACTION_START,
            accepted=True,
            reason=REASON_STARTED,
            label=slot.label,
            slot=slot,
            remaining_seconds=slot.planned_seconds,
        )

    def status(self) -> SessionStatus:
        slot = self._store.load_active()
        if slot is None:
            return SessionStatus(phase=PHASE_IDLE)

        remaining = slot.remaining_seconds(self._clock.now())
        if remaining > 0:
            return SessionStatus(
                phase=PHASE_RUNNING,
                label=slot.label,
                planned_minutes=slot.planned_minutes,
                remaining_seconds=remaining,
            )

        result = self.finalize(
            END_REASON_COMPLETED,
            expected_identity=slot.identity,
            only_if_expired=True,
        )
        if not result.accepted:
            return SessionStatus(phase=PHASE_IDLE, already_saved=True)
        return SessionStatus(
            phase=PHASE_JUST_COMPLETED,
            label=result.label,
            planned_minutes=slot.planned_minutes,
            session=result.session,
        )

    def stop(self) -> SessionActionResult:
        result = self.finalize(END_REASON_STOPPED_EARLY)
        if not result.accepted:
            return SessionActionResult(
                action=ACTION_STOP,
                accepted=False,
                reason=REASON_NOTHING_TO_STOP,
            )
        return replace(result, action=ACTION_STOP)

    def cancel(self) -> SessionActionResult:
        with self._store.locked():
            slot = self._store.load_active()
            if slot is None:
                return SessionActionResult(
                    action=ACTION_CANCEL,
                    accepted=False,
                    reason=REASON_NOTHING_TO_CANCEL,
                )
            self._store.clear_active()

        self._logger.info("Session cancelled: label=%s identity=%s", slot.label, slot.identity)
        return SessionActionResult(
            action=ACTION_CANCEL,
            accepted=True,
            reason=REASON_CANCELLED,
            label=slot.label,
            slot=slot,
        )

    def autostop(self, identity: str) -> SessionActionResult:
        """Deferred-callback entry point: finalize only the tagged, expired session."""
        result = self.finalize(
            END_REASON_COMPLETED,
            expected_identity=identity,
            only_if_expired=True,
        )
        return replace(result, action=ACTION_AUTOSTOP)

    def finalize(
        self,
        reason: str,
        *,
        expected_identity: Optional[str] = None,
        only_if_expired: bool = False,
    ) -> SessionActionResult:
        with self._store.locked():
            slot = self._store.load_active()
            if slot is None:
                return self._rejected(REASON_NOTHING_TO_FINALIZE)

            if expected_identity is not None and not _same_identity(slot, expected_identity):
                self._logger.debug(
                    "Ignoring stale finalize: expected=%s active=%s",
                    expected_identity,
                    slot.identity,
                )
                return self._rejected(REASON_STALE_IDENTITY)

            now = self._clock.now()
            remaining = slot.remaining_seconds(now)
            if only_if_expired and remaining > 0:
                return self._rejected(
                    REASON_NOT_EXPIRED,
                    label=slot.label,
                    remaining_seconds=remaining,
                )

            session = Session.close(slot, now, reason)
            self._store.append_session(session)
            self._store.clear_active()

        self._logger.info(
            "Session finalized: label=%s elapsed=%ss reason=%s",
            session.label,
            session.elapsed_seconds,
            session.end_reason,
        )
        if session.end_reason == END_REASON_COMPLETED:
            self._notify_completed(session)
        return SessionActionResult(
            action=ACTION_FINALIZE,
            accepted=True,
            reason=REASON_FINALIZED,
            label=session.label,
            slot=slot,
            session=session,
            remaining_seconds=0,
        )

    def _schedule_autostop(self, slot: ActiveSlot) -> None:
        if self._dispatcher is None:
            return
        try:
            self._dispatcher.schedule(slot.planned_seconds, slot.identity)
        except Exception as error:
            # `status` finalizes lazily, so a lost timer only delays completion.
            self._logger.warning("Auto-stop not scheduled: %s", error)

    def _notify_completed(self, session: Session) -> None:
        if self._on_completed is None:
            return
        try:
            self._on_completed(session)
        except Exception as error:
            self._logger.warning("Completion notification failed: %s", error)

    @staticmethod
    def _rejected(
        reason: str,
        *,
        label: Optional[str] = None,
        remaining_seconds: Optional[int] = None,
    ) -> SessionActionResult:
        return SessionActionResult(
            action=ACTION_FINALIZE,
            accepted=False,
            reason=reason,
            label=label,
            remaining_seconds=remaining_seconds,
        )


def _same_identity(slot: ActiveSlot, expected: str) -> bool:
    if slot.identity == expected:
        return True
    try:
        return parse_timestamp(expected, "identity") == slot.start_time
    except ValueError:
        return False


def format_remaining(seconds: int) -> str:
    """Format seconds as `MM:SS`, or `HH:MM:SS` from one hour up."""
    total = max(0, int(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"
