"""Wires configuration into the store, dispatcher, notifier, and service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from app_config_schema import AppConfig
from notify import NotifierConfig, ToneNotifier
from pomodoro import Clock, PomodoroSessionService, SystemClock
from scheduler import DeferredFinalizer, SchedulerConfig, build_dispatcher
from storage import SessionStore, StoreConfig


@dataclass(frozen=True)
class CliRuntime:
    """Everything a command needs, built once per invocation."""
    config: AppConfig
    store: SessionStore
    service: PomodoroSessionService
    clock: Clock
    scheduler: SchedulerConfig


def build_runtime(
    app_config: AppConfig,
    *,
    clock: Optional[Clock] = None,
    dispatcher: Optional[DeferredFinalizer] = None,
) -> CliRuntime:
    clock = clock or SystemClock()
    store = SessionStore(
        StoreConfig.from_settings(app_config.storage),
        logger=logging.getLogger("storage"),
    )
    scheduler_config = SchedulerConfig.from_settings(
        app_config.scheduler,
        config_file=app_config.source_file,
    )
    if dispatcher is None:
        dispatcher = build_dispatcher(
            scheduler_config,
            logger=logging.getLogger("scheduler"),
        )
    notifier = ToneNotifier(
        NotifierConfig.from_settings(app_config.notification),
        logger=logging.getLogger("notify"),
    )
    service = PomodoroSessionService(
        store,
        clock=clock,
        dispatcher=dispatcher,
        on_completed=notifier,
        logger=logging.getLogger("pomodoro"),
    )
    return CliRuntime(
        config=app_config,
        store=store,
        service=service,
        clock=clock,
        scheduler=scheduler_config,
    )
