"""Fire-and-forget completion notification."""

from .config import NotifierConfig, NotifierConfigurationError
from .tone import ToneNotifier, build_tone

__all__ = [
    "NotifierConfig",
    "NotifierConfigurationError",
    "ToneNotifier",
    "build_tone",
]
