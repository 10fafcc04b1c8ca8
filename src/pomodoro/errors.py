class PomodoroError(Exception):
    """Base exception for session state machine failures."""


class InvalidDurationError(PomodoroError):
    """Raised when a session is started with a non-positive duration."""


class SessionAlreadyActiveError(PomodoroError):
    """Raised when a session is started while another one is running."""


class SchedulingError(PomodoroError):
    """Raised when the deferred finalize callback cannot be scheduled."""
