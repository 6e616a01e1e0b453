"""Pace advisors: the async contract plus rule-based and LLM implementations."""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from typing import Optional, Protocol

from llm import PaceAdvice, PaceAssistantLLM


class PaceAdvisor(Protocol):
    async def advise(self, selected_seconds: int, remaining_seconds: int) -> PaceAdvice:
        ...


class RulePaceAdvisor:
    """Deterministic pacing used when no model is configured."""

    async def advise(self, selected_seconds: int, remaining_seconds: int) -> PaceAdvice:
        return rule_based_pace(selected_seconds, remaining_seconds)


def rule_based_pace(selected_seconds: int, remaining_seconds: int) -> PaceAdvice:
    if selected_seconds <= 0:
        return PaceAdvice(pace=1.0, reasoning="Aucune durée sélectionnée.")

    ratio = max(0, remaining_seconds) / selected_seconds
    if ratio <= 0.25:
        return PaceAdvice(pace=1.0, reasoning="Peu de temps restant : vitesse normale.")
    if ratio <= 0.5:
        return PaceAdvice(pace=0.9, reasoning="Moitié du temps écoulée : légère accélération.")
    return PaceAdvice(pace=0.75, reasoning="Beaucoup de temps restant : animation plus lente.")


class LLMPaceAdvisor:
    """Runs the blocking model call on a single worker thread."""

    def __init__(
        self,
        assistant: PaceAssistantLLM,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._assistant = assistant
        self._logger = logger or logging.getLogger("pace")
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="pace-llm",
        )

    async def advise(self, selected_seconds: int, remaining_seconds: int) -> PaceAdvice:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor,
            self._assistant.advise,
            selected_seconds,
            remaining_seconds,
        )

    def close(self) -> None:
        self._logger.info("Stopping pace model executor...")
        self._executor.shutdown(wait=False, cancel_futures=True)
