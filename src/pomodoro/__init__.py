from .clock import Clock, SystemClock
from .constants import DEFAULT_SESSION_LABEL
from .errors import (
    InvalidDurationError,
    PomodoroError,
    SchedulingError,
    SessionAlreadyActiveError,
)
from .models import ActiveSlot, Session
from .service import (
    PomodoroSessionService,
    SessionAction,
    SessionActionResult,
    SessionPhase,
    SessionStatus,
    format_remaining,
)

__all__ = [
    "DEFAULT_SESSION_LABEL",
    "ActiveSlot",
    "Clock",
    "InvalidDurationError",
    "PomodoroError",
    "PomodoroSessionService",
    "SchedulingError",
    "Session",
    "SessionAction",
    "SessionActionResult",
    "SessionAlreadyActiveError",
    "SessionPhase",
    "SessionStatus",
    "SystemClock",
    "format_remaining",
]
