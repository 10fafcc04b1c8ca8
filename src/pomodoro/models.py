"""Typed records for the active slot and finalized sessions."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Mapping

from .constants import (
    DEFAULT_SESSION_LABEL,
    END_REASON_COMPLETED,
    LOGGED_END_REASONS,
    MAX_LABEL_LENGTH,
)


def format_timestamp(value: dt.datetime) -> str:
    return value.isoformat(timespec="seconds")


def parse_timestamp(raw: Any, field: str) -> dt.datetime:
    """Parse an ISO-8601 string; naive values are read as local time."""
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError(f"{field} must be an ISO-8601 string")
    try:
        parsed = dt.datetime.fromisoformat(raw.strip())
    except ValueError as error:
        raise ValueError(f"{field} is not a valid timestamp: {raw!r}") from error
    return parsed.astimezone()


def sanitize_label(label: str | None) -> str:
    compact = " ".join((label or "").split())
    return compact[:MAX_LABEL_LENGTH] or DEFAULT_SESSION_LABEL


def _positive_int(raw: Any, field: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int) or raw <= 0:
        raise ValueError(f"{field} must be a positive integer")
    return raw


def _non_negative_int(raw: Any, field: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise ValueError(f"{field} must be a non-negative integer")
    return raw


@dataclass(frozen=True)
class ActiveSlot:
    """The single running, not yet finalized session."""
    start_time: dt.datetime
    planned_minutes: int
    label: str

    @property
    def identity(self) -> str:
        return format_timestamp(self.start_time)

    @property
    def planned_seconds(self) -> int:
        return self.planned_minutes * 60

    def remaining_seconds(self, now: dt.datetime) -> int:
        elapsed = int((now - self.start_time).total_seconds())
        return self.planned_seconds - elapsed

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_time": self.identity,
            "planned_minutes": self.planned_minutes,
            "label": self.label,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ActiveSlot":
        if not isinstance(raw, Mapping):
            raise ValueError("active slot must be an object")
        label = raw.get("label")
        return cls(
            start_time=parse_timestamp(raw.get("start_time"), "start_time"),
            planned_minutes=_positive_int(raw.get("planned_minutes"), "planned_minutes"),
            label=sanitize_label(label if isinstance(label, str) else None),
        )


@dataclass(frozen=True)
class Session:
    """Immutable record of one completed or early-stopped focus interval."""
    start_time: dt.datetime
    end_time: dt.datetime
    planned_minutes: int
    elapsed_seconds: int
    label: str
    end_reason: str = END_REASON_COMPLETED

    @property
    def elapsed_minutes(self) -> float:
        return round(self.elapsed_seconds / 60.0, 1)

    @classmethod
    def close(cls, slot: ActiveSlot, end_time: dt.datetime, reason: str) -> "Session":
        if reason not in LOGGED_END_REASONS:
            raise ValueError(f"end_reason {reason!r} is never logged")
        # A wall clock moved backwards must not produce a negative duration.
        end_time = max(end_time, slot.start_time)
        elapsed = int((end_time - slot.start_time).total_seconds())
        return cls(
            start_time=slot.start_time,
            end_time=end_time,
            planned_minutes=slot.planned_minutes,
            elapsed_seconds=max(0, elapsed),
            label=slot.label,
            end_reason=reason,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_time": format_timestamp(self.start_time),
            "end_time": format_timestamp(self.end_time),
            "planned_minutes": self.planned_minutes,
            "elapsed_seconds": self.elapsed_seconds,
            "label": self.label,
            "end_reason": self.end_reason,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Session":
        if not isinstance(raw, Mapping):
            raise ValueError("session entry must be an object")
        start_time = parse_timestamp(raw.get("start_time"), "start_time")
        end_time = parse_timestamp(raw.get("end_time"), "end_time")
        if end_time < start_time:
            raise ValueError("end_time must not precede start_time")
        reason = raw.get("end_reason") or END_REASON_COMPLETED
        if reason not in LOGGED_END_REASONS:
            raise ValueError(f"unknown end_reason: {reason!r}")
        label = raw.get("label")
        return cls(
            start_time=start_time,
            end_time=end_time,
            planned_minutes=_positive_int(raw.get("planned_minutes"), "planned_minutes"),
            elapsed_seconds=_non_negative_int(raw.get("elapsed_seconds"), "elapsed_seconds"),
            label=sanitize_label(label if isinstance(label, str) else None),
            end_reason=reason,
        )
