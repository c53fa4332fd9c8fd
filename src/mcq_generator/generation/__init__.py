"""Question generation: prompt, HTTP client, response extraction."""

from __future__ import annotations

from .client import (
    DEFAULT_ENDPOINT,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT,
    GenerationClient,
    RetryPolicy,
)
from .errors import (
    ConfigurationError,
    ExhaustedRetriesError,
    GenerationError,
    ParseError,
    PermanentServerError,
    TransientServerError,
)
from .extractor import extract, strip_code_fence
from .models import (
    Difficulty,
    GenerationRequest,
    Question,
    RequestValidationError,
    partition_records,
    question_from_record,
)
from .prompts import build_payload, build_prompt

__all__ = [
    "DEFAULT_ENDPOINT",
    "DEFAULT_MODEL",
    "DEFAULT_TIMEOUT",
    "GenerationClient",
    "RetryPolicy",
    "ConfigurationError",
    "ExhaustedRetriesError",
    "GenerationError",
    "ParseError",
    "PermanentServerError",
    "TransientServerError",
    "extract",
    "strip_code_fence",
    "Difficulty",
    "GenerationRequest",
    "Question",
    "RequestValidationError",
    "partition_records",
    "question_from_record",
    "build_payload",
    "build_prompt",
]
