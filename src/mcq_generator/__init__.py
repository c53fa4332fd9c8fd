"""Generate multiple-choice quizzes with Gemini, practice them, export PDFs."""

from __future__ import annotations

from .generation import (
    Difficulty,
    GenerationClient,
    GenerationError,
    GenerationRequest,
    Question,
    extract,
)
from .quiz import QuizController, QuizState, Score, run_generation

__all__ = [
    "Difficulty",
    "GenerationClient",
    "GenerationError",
    "GenerationRequest",
    "Question",
    "extract",
    "QuizController",
    "QuizState",
    "Score",
    "run_generation",
]
