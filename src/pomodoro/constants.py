"""State, action, and reason constants used by the session state machine."""

from __future__ import annotations

DEFAULT_SESSION_LABEL = "Focus"
MAX_LABEL_LENGTH = 120

PHASE_IDLE = "idle"
PHASE_RUNNING = "running"
PHASE_JUST_COMPLETED = "just_completed"

END_REASON_COMPLETED = "completed"
END_REASON_STOPPED_EARLY = "stopped_early"

# Only these reasons are ever written to the session log.
LOGGED_END_REASONS: frozenset[str] = frozenset(
    {END_REASON_COMPLETED, END_REASON_STOPPED_EARLY}
)

ACTION_START = "start"
ACTION_STOP = "stop"
ACTION_CANCEL = "cancel"
ACTION_FINALIZE = "finalize"
ACTION_AUTOSTOP = "autostop"

REASON_STARTED = "started"
REASON_FINALIZED = "finalized"
REASON_CANCELLED = "cancelled"
REASON_NOTHING_TO_FINALIZE = "nothing_to_finalize"
REASON_NOTHING_TO_STOP = "nothing_to_stop"
REASON_NOTHING_TO_CANCEL = "nothing_to_cancel"
REASON_STALE_IDENTITY = "stale_identity"
REASON_NOT_EXPIRED = "not_expired"
