"""Rate-limited, stale-safe application of pace advice to the presentation."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional

from llm import DEFAULT_PACE_ADVICE, PaceAdvice
from pomodoro import CountdownSnapshot

from .advisor import PaceAdvisor

DEFAULT_MIN_INTERVAL_SECONDS = 5.0
DEFAULT_TIMEOUT_SECONDS = 10.0

PaceListener = Callable[[PaceAdvice, CountdownSnapshot], None]


class PaceController:
    """Fetches pace advice without ever gating the countdown.

    While the countdown runs, requests are limited to one per
    ``min_interval_seconds``. A response is applied only if the countdown has
    not been re-armed since the request was made; failures fall back to a
    pace of 1.
    """

    def __init__(
        self,
        advisor: PaceAdvisor,
        *,
        current_snapshot: Callable[[], CountdownSnapshot],
        on_pace: PaceListener,
        min_interval_seconds: float = DEFAULT_MIN_INTERVAL_SECONDS,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None,
    ):
        self._advisor = advisor
        self._current_snapshot = current_snapshot
        self._on_pace = on_pace
        self._min_interval_seconds = min_interval_seconds
        self._timeout_seconds = timeout_seconds
        self._clock = clock
        self._logger = logger or logging.getLogger("pace")
        self._last_request_at: Optional[float] = None
        self._pending: Optional[asyncio.Task[None]] = None
        self._advice = DEFAULT_PACE_ADVICE

    @property
    def advice(self) -> PaceAdvice:
        return self._advice

    @property
    def pending(self) -> Optional["asyncio.Task[None]"]:
        return self._pending

    def refresh(self, snapshot: CountdownSnapshot, *, force: bool = False) -> bool:
        """Schedule an advisor call for ``snapshot``; returns False when skipped."""
        if snapshot.selected_seconds <= 0:
            return False

        now = self._clock()
        if (
            not force
            and snapshot.is_running
            and self._last_request_at is not None
            and now - self._last_request_at < self._min_interval_seconds
        ):
            return False

        self._last_request_at = now
        self.cancel()
        self._pending = asyncio.get_running_loop().create_task(self._fetch(snapshot))
        return True

    def cancel(self) -> None:
        pending = self._pending
        self._pending = None
        if pending is not None and not pending.done():
            pending.cancel()

    async def _fetch(self, requested: CountdownSnapshot) -> None:
        try:
            advice = await asyncio.wait_for(
                self._advisor.advise(
                    requested.selected_seconds,
                    requested.remaining_seconds,
                ),
                timeout=self._timeout_seconds,
            )
        except asyncio.CancelledError:
            raise
        except Exception as error:
            self._logger.warning("Pace advisor failed, using normal pace: %s", error)
            advice = DEFAULT_PACE_ADVICE

        current = self._current_snapshot()
        if (
            current.revision != requested.revision
            or current.selected_seconds != requested.selected_seconds
        ):
            self._logger.debug(
                "Dropping stale pace advice (revision %s != %s)",
                requested.revision,
                current.revision,
            )
            return

        self._advice = advice
        self._on_pace(advice, current)
