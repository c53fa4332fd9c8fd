"""Prompt text sent to the generation API."""

from __future__ import annotations

from .models import GenerationRequest

_TEMPLATE = """\
Generate exactly {count} multiple-choice questions on the topic "{topic}" \
with a difficulty level of "{difficulty}".
Respond ONLY with a valid raw JSON array of objects, without markdown or \
explanation.
Each MCQ must include:
{{
  "question": "string",
  "options": {{
    "A": "string",
    "B": "string",
    "C": "string",
    "D": "string"
  }},
  "answer": "A"
}}
"""


def build_prompt(request: GenerationRequest) -> str:
    return _TEMPLATE.format(
        count=request.count,
        topic=request.topic,
        difficulty=request.difficulty.value,
    )


def build_payload(prompt: str) -> dict[str, object]:
    """Wrap ``prompt`` in a ``generateContent`` request body."""

    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {"responseMimeType": "application/json"},
    }
