"""Failures raised while requesting and decoding generated questions."""

from __future__ import annotations

__all__ = [
    "GenerationError",
    "ConfigurationError",
    "TransientServerError",
    "PermanentServerError",
    "ExhaustedRetriesError",
    "ParseError",
]


class GenerationError(RuntimeError):
    """Base class; ``str(exc)`` is the single-line message shown to users."""


class ConfigurationError(GenerationError):
    """No API credential is configured."""


class TransientServerError(GenerationError):
    """The API answered 429/500/503; the request may be retried."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


class PermanentServerError(GenerationError):
    """The API answered with a non-retryable error status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


class ExhaustedRetriesError(GenerationError):
    """Every attempt ended in a transient failure."""

    def __init__(self, attempts: int, last_error: TransientServerError | None):
        super().__init__("Gemini API failed after retries.")
        self.attempts = attempts
        self.last_error = last_error


class ParseError(GenerationError):
    """The model output did not contain a decodable JSON array."""
