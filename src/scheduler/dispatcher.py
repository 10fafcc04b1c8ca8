"""Dispatchers that run the auto-stop callback after the caller has exited."""

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Optional, Protocol

from pomodoro.constants import REASON_NOT_EXPIRED
from pomodoro.errors import SchedulingError

from .config import SchedulerConfig

if TYPE_CHECKING:
    from pomodoro import PomodoroSessionService, SessionActionResult

_SRC_DIR = Path(__file__).resolve().parents[1]


class DeferredFinalizer(Protocol):
    def schedule(self, delay_seconds: int, identity: str) -> None:
        """Arrange for `autostop(identity)` to run once after the delay."""
        ...


class NullDispatcher:
    """Schedules nothing; expiry is picked up by the next `status`."""
    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("scheduler")

    def schedule(self, delay_seconds: int, identity: str) -> None:
        self._logger.debug(
            "Auto-stop disabled; not scheduling identity=%s delay=%ss",
            identity,
            delay_seconds,
        )


class DetachedProcessDispatcher:
    """Spawns `python -m main autostop <identity> --after <delay>` detached."""
    def __init__(
        self,
        config: SchedulerConfig,
        *,
        logger: Optional[logging.Logger] = None,
        popen: Callable[..., Any] = subprocess.Popen,
    ):
        self._config = config
        self._logger = logger or logging.getLogger("scheduler")
        self._popen = popen

    def build_command(self, delay_seconds: int, identity: str) -> list[str]:
        command = [self._config.interpreter, "-m", "main"]
        if self._config.config_file:
            command += ["--config", self._config.config_file]
        command += ["autostop", identity, "--after", str(max(0, int(delay_seconds)))]
        return command

    def schedule(self, delay_seconds: int, identity: str) -> None:
        command = self.build_command(delay_seconds, identity)
        try:
            process = self._popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                close_fds=True,
                env=_child_environment(),
                **_detach_options(),
            )
        except (OSError, ValueError, subprocess.SubprocessError) as error:
            raise SchedulingError(f"Failed to spawn auto-stop process: {error}") from error

        self._logger.info(
            "Auto-stop scheduled: identity=%s delay=%ss pid=%s",
            identity,
            delay_seconds,
            getattr(process, "pid", None),
        )


def build_dispatcher(
    config: SchedulerConfig,
    *,
    logger: Optional[logging.Logger] = None,
) -> DeferredFinalizer:
    if not config.enabled:
        return NullDispatcher(logger=logger)
    return DetachedProcessDispatcher(config, logger=logger)


def wait_and_autostop(
    service: "PomodoroSessionService",
    identity: str,
    delay_seconds: float,
    *,
    max_rounds: int = 3,
    sleep: Callable[[float], None] = time.sleep,
    logger: Optional[logging.Logger] = None,
) -> "SessionActionResult":
    """Sleep, then finalize the tagged session once it has expired.

    Wake-ups that arrive early (wall clock adjusted while sleeping) sleep
    again for the remaining time recomputed from the stored start time.
    """
    log = logger or logging.getLogger("scheduler")
    delay = max(0.0, float(delay_seconds))
    result = None
    for attempt in range(1, max(1, max_rounds) + 1):
        if delay > 0:
            sleep(delay)
        result = service.autostop(identity)
        if result.reason != REASON_NOT_EXPIRED:
            log.info(
                "Auto-stop finished: identity=%s accepted=%s reason=%s",
                identity,
                result.accepted,
                result.reason,
            )
            return result
        delay = float(max(1, result.remaining_seconds or 1))
        log.debug(
            "Auto-stop woke early (attempt %d): identity=%s remaining=%ss",
            attempt,
            identity,
            delay,
        )
    return result


def _detach_options() -> dict[str, Any]:
    if os.name == "nt":
        flags = getattr(subprocess, "DETACHED_PROCESS", 0) | getattr(
            subprocess, "CREATE_NEW_PROCESS_GROUP", 0
        )
        return {"creationflags": flags}
    return {"start_new_session": True}


def _child_environment() -> dict[str, str]:
    env = dict(os.environ)
    existing = env.get("PYTHONPATH", "")
    paths = [str(_SRC_DIR)] + [p for p in existing.split(os.pathsep) if p]
    env["PYTHONPATH"] = os.pathsep.join(dict.fromkeys(paths))
    return env
