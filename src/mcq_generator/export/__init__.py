"""PDF export of generated quizzes."""

from __future__ import annotations

from .pdf import (
    ExportError,
    PageGeometry,
    artifact_name,
    export,
    export_quiz,
    layout_quiz,
    paginate,
    render_html,
)

__all__ = [
    "ExportError",
    "PageGeometry",
    "artifact_name",
    "export",
    "export_quiz",
    "layout_quiz",
    "paginate",
    "render_html",
]
