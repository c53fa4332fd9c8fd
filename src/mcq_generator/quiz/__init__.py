"""Quiz state, scoring and the generation runner."""

from __future__ import annotations

from .runner import run_generation
from .state import (
    DEFAULT_REVEAL_INTERVAL,
    NO_USABLE_QUESTIONS,
    QuizController,
    QuizState,
    RevealHandle,
    Score,
)

__all__ = [
    "run_generation",
    "DEFAULT_REVEAL_INTERVAL",
    "NO_USABLE_QUESTIONS",
    "QuizController",
    "QuizState",
    "RevealHandle",
    "Score",
]
