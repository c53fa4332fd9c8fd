"""Typed question records and validated generation parameters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping

MAX_QUESTIONS = 100
MIN_QUESTIONS = 1


class RequestValidationError(ValueError):
    """Raised for user input that must be corrected before generating."""


class Difficulty(Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def from_value(cls, value: "str | Difficulty") -> "Difficulty":
        if isinstance(value, Difficulty):
            return value
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        expected = ", ".join(member.value for member in cls)
        raise RequestValidationError(
            f"Unknown difficulty '{value}'. Expected one of: {expected}."
        )


@dataclass(frozen=True)
class GenerationRequest:
    """Parameters for one generation call; build it with :meth:`create`."""

    topic: str
    count: int
    difficulty: Difficulty

    @classmethod
    def create(
        cls,
        topic: str,
        count: int,
        difficulty: "str | Difficulty" = Difficulty.MEDIUM,
    ) -> "GenerationRequest":
        if count > MAX_QUESTIONS:
            raise RequestValidationError(
                "You can generate a maximum of 100 questions at a time."
            )
        if count < MIN_QUESTIONS:
            raise RequestValidationError("Question count must be at least 1.")
        cleaned = (topic or "").strip()
        if not cleaned:
            raise RequestValidationError("Please enter a topic.")
        return cls(
            topic=cleaned,
            count=int(count),
            difficulty=Difficulty.from_value(difficulty),
        )


@dataclass(frozen=True)
class Question:
    """A validated multiple-choice question.

    ``options`` keeps the order the model returned the keys in.
    """

    prompt: str
    options: Mapping[str, str]
    correct_key: str

    @property
    def correct_text(self) -> str:
        return self.options[self.correct_key]

    def is_correct(self, key: str | None) -> bool:
        return key is not None and key == self.correct_key


def question_from_record(record: Any) -> Question | None:
    """Convert one decoded JSON value into a :class:`Question`.

    Returns ``None`` for anything that does not have a non-empty
    ``question``, a non-empty ``options`` object and an ``answer`` naming
    one of the option keys.
    """

    if not isinstance(record, Mapping):
        return None
    prompt = record.get("question")
    options = record.get("options")
    answer = record.get("answer")
    if not isinstance(prompt, str) or not prompt.strip():
        return None
    if not isinstance(options, Mapping) or not options:
        return None
    if not isinstance(answer, str):
        return None

    normalized: dict[str, str] = {}
    for key, text in options.items():
        if text is None or isinstance(text, (dict, list)):
            return None
        normalized[str(key).strip()] = str(text)
    correct_key = answer.strip()
    if correct_key not in normalized:
        return None
    return Question(
        prompt=prompt.strip(),
        options=MappingProxyType(normalized),
        correct_key=correct_key,
    )


def partition_records(
    records: Iterable[Any],
) -> tuple[list[Question], list[Any]]:
    """Split raw records into (valid questions, rejected records)."""

    valid: list[Question] = []
    rejected: list[Any] = []
    for record in records:
        question = question_from_record(record)
        if question is None:
            rejected.append(record)
        else:
            valid.append(question)
    return valid, rejected
