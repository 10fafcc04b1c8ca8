"""Detached, delay-triggered invocation of the session finalizer."""

from .config import SchedulerConfig, SchedulerConfigurationError
from .dispatcher import (
    DeferredFinalizer,
    DetachedProcessDispatcher,
    NullDispatcher,
    build_dispatcher,
    wait_and_autostop,
)

__all__ = [
    "DeferredFinalizer",
    "DetachedProcessDispatcher",
    "NullDispatcher",
    "SchedulerConfig",
    "SchedulerConfigurationError",
    "build_dispatcher",
    "wait_and_autostop",
]
