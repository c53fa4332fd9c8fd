"""Pull the JSON question array out of raw model output."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from .errors import ParseError

logger = logging.getLogger("mcq_generator.generation")

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fence(text: str) -> str:
    """Trim whitespace and drop ```json / ``` fence markers."""

    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_RE.sub("", cleaned).strip()
    return cleaned


def extract(raw_text: str | None) -> list[Any]:
    """Decode the first ``[`` .. last ``]`` span of ``raw_text``.

    Records are returned untouched; validating them is left to
    :func:`mcq_generator.generation.models.partition_records`.
    """

    if not raw_text or not raw_text.strip():
        raise ParseError("empty response")

    cleaned = strip_code_fence(raw_text)
    start = cleaned.find("[")
    end = cleaned.rfind("]")
    if start == -1 or end == -1 or end < start:
        logger.error(
            "No JSON array found in model output",
            extra={"preview": cleaned[:200]},
        )
        raise ParseError("no array found")

    try:
        data = json.loads(cleaned[start : end + 1])
    except json.JSONDecodeError as exc:
        logger.error("JSON parse error: %s", exc)
        raise ParseError("malformed JSON") from exc
    return data
