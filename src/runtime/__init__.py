"""Runtime exports."""

from .commands import RuntimeCommandDispatcher
from .loop import ChronoZenRuntime, RuntimeBootstrap, RuntimeHooks

__all__ = [
    "ChronoZenRuntime",
    "RuntimeBootstrap",
    "RuntimeCommandDispatcher",
    "RuntimeHooks",
]
