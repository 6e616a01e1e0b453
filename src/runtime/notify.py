"""Completion side effects: toast, haptic hint, and best-effort chime."""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from audio import AudioCueError

from .ui import RuntimeUIPublisher


class ChimeLike(Protocol):
    def play(self) -> None:
        ...


@dataclass(frozen=True)
class NotifierDependencies:
    """Dependencies required for completion notifications."""
    ui: RuntimeUIPublisher
    logger: logging.Logger
    chime: Optional[ChimeLike] = None
    vibrate_ms: int = 200


class CompletionNotifier:
    """Publishes the user-visible notification and plays the chime off-loop."""

    def __init__(self, dependencies: NotifierDependencies):
        self._dependencies = dependencies
        self._executor: Optional[concurrent.futures.ThreadPoolExecutor] = None
        if dependencies.chime is not None:
            self._executor = concurrent.futures.ThreadPoolExecutor(
                max_workers=1,
                thread_name_prefix="chime",
            )

    def notify_completion(self, title: str, message: str) -> None:
        deps = self._dependencies
        deps.ui.publish_notification(title, message, vibrate_ms=deps.vibrate_ms)
        self._play_chime()

    def notify(self, title: str, message: str) -> None:
        self._dependencies.ui.publish_notification(title, message)

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    def _play_chime(self) -> None:
        chime = self._dependencies.chime
        if chime is None or self._executor is None:
            return

        future = asyncio.get_running_loop().run_in_executor(self._executor, chime.play)
        future.add_done_callback(self._log_chime_failure)

    def _log_chime_failure(self, future: "asyncio.Future[None]") -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is None:
            return
        if isinstance(error, AudioCueError):
            self._dependencies.logger.warning("Completion chime failed: %s", error)
        else:
            self._dependencies.logger.error(
                "Unexpected completion chime failure: %s",
                error,
                exc_info=error,
            )
