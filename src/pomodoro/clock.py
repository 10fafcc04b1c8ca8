"""Wall-clock source for session timestamps."""

from __future__ import annotations

import datetime as dt
from typing import Protocol


class Clock(Protocol):
    def now(self) -> dt.datetime:
        """Return the current local time as a timezone-aware datetime."""
        ...


class SystemClock:
    """Local wall clock, truncated to whole seconds."""

    def now(self) -> dt.datetime:
        return dt.datetime.now().astimezone().replace(microsecond=0)
