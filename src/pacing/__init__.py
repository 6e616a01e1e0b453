"""Pace advice for the progress ring animation."""

from .advisor import LLMPaceAdvisor, PaceAdvisor, RulePaceAdvisor, rule_based_pace
from .controller import PaceController

__all__ = [
    "LLMPaceAdvisor",
    "PaceAdvisor",
    "PaceController",
    "RulePaceAdvisor",
    "rule_based_pace",
]
