"""Sounddevice-backed completion beep with a terminal-bell fallback."""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

import numpy as np

from pomodoro.models import Session

from .config import NotifierConfig


def build_tone(config: NotifierConfig) -> np.ndarray:
    """Mono float32 sine burst with short fades to avoid clicks."""
    samples = max(1, int(config.sample_rate_hz * config.duration_ms / 1000))
    t = np.arange(samples, dtype=np.float32) / float(config.sample_rate_hz)
    wave = np.sin(2.0 * np.pi * config.frequency_hz * t).astype(np.float32)
    fade = min(samples // 2, int(config.sample_rate_hz * 0.01))
    if fade > 0:
        ramp = np.linspace(0.0, 1.0, fade, dtype=np.float32)
        wave[:fade] *= ramp
        wave[-fade:] *= ramp[::-1]
    return wave * np.float32(config.volume)


class ToneNotifier:
    """Plays a short tone when a session completes. Never raises."""
    def __init__(
        self,
        config: Optional[NotifierConfig] = None,
        *,
        stream: Optional[IO[str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config or NotifierConfig()
        self._stream = stream
        self._logger = logger or logging.getLogger("notify")

    def __call__(self, session: Session) -> None:
        self.notify(session)

    def notify(self, session: Optional[Session] = None) -> None:
        if not self._config.enabled:
            return
        label = session.label if session is not None else "session"
        try:
            self._play()
            self._logger.debug("Completion tone played for %s", label)
        except Exception as error:
            self._logger.warning("Audio notification failed, using bell: %s", error)
            self._bell()

    def _play(self) -> None:
        # Imported here: loading PortAudio fails on hosts without audio.
        import sounddevice as sd

        sd.play(
            build_tone(self._config),
            samplerate=self._config.sample_rate_hz,
            device=self._config.output_device,
            blocking=True,
        )

    def _bell(self) -> None:
        stream = self._stream or sys.stdout
        try:
            stream.write("\a")
            stream.flush()
        except (OSError, ValueError):
            pass
