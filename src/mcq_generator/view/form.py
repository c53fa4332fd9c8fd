"""Form state owned by the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass

from mcq_generator.generation.models import (
    MAX_QUESTIONS,
    MIN_QUESTIONS,
    Difficulty,
    GenerationRequest,
)

DEFAULT_COUNT = 5


@dataclass
class FormState:
    """What the user has typed so far; validated only on submit."""

    topic: str = ""
    count: int = DEFAULT_COUNT
    difficulty: Difficulty = Difficulty.MEDIUM

    def set_count(self, raw: str) -> None:
        """Parse the count field; unparsable input falls back to 1."""
        try:
            value = int(str(raw).strip())
        except ValueError:
            value = 1
        self.count = value or 1

    def count_warning(self) -> str | None:
        if self.count > MAX_QUESTIONS:
            return "Cannot generate more than 100 questions."
        return None

    def can_submit(self) -> bool:
        return (
            bool(self.topic.strip())
            and MIN_QUESTIONS <= self.count <= MAX_QUESTIONS
        )

    def to_request(self) -> GenerationRequest:
        """Raises ``RequestValidationError`` with a user-facing message."""
        return GenerationRequest.create(
            self.topic, self.count, self.difficulty
        )
