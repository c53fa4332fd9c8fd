"""Shared testing helpers for the mcq_generator test suite."""

from .gemini import (  # noqa: F401
    GeminiServer,
    RecordingSleep,
    error,
    gemini_body,
    mcq,
    mcq_array,
    ok,
)
from .pdf_backend import CSSRecorder, HTMLRecorder, RenderedPDF  # noqa: F401
