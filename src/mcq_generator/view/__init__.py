"""Textual presentation layer."""

from __future__ import annotations

from .app import QuestionView, QuizApp, option_classes, option_label
from .form import FormState

__all__ = [
    "FormState",
    "QuestionView",
    "QuizApp",
    "option_classes",
    "option_label",
]
