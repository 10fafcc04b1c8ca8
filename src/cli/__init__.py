"""Command-line surface for focus sessions."""

from .app import app, setup_logging
from .runtime import CliRuntime, build_runtime

__all__ = [
    "CliRuntime",
    "app",
    "build_runtime",
    "setup_logging",
]
