"""Quiz to PDF export (WeasyPrint backend).

Design:
- ``layout_quiz`` is a pure pagination pass. It wraps text to the printable
  width and walks a vertical cursor down an A4 page, starting a new page
  whenever the next block would cross the bottom margin.
- ``render_html`` turns the placed blocks into absolutely positioned HTML,
  one ``<section>`` per page, so WeasyPrint reproduces the computed pages
  exactly.
- WeasyPrint is imported lazily in ``export``.
"""

from __future__ import annotations

import logging
import re
import textwrap
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from jinja2 import Environment, Template

from mcq_generator.generation.models import Question

logger = logging.getLogger("mcq_generator.export")

CHECK_MARK = "✔"
# Whitespace runs and path separators both collapse to "_".
_FILENAME_SEP_RE = re.compile(r"[\s/\\]+")


class ExportError(RuntimeError):
    """Raised when the PDF backend is unavailable or fails."""


@dataclass(frozen=True)
class PageGeometry:
    """A4 portrait measured in millimetres."""

    width: float = 210.0
    height: float = 297.0
    margin: float = 15.0
    line_height: float = 7.0
    char_width: float = 2.1
    font_size_pt: int = 12

    @property
    def bottom_limit(self) -> float:
        return self.height - self.margin

    def columns(self, indent: float) -> int:
        usable = self.width - 2 * self.margin - indent
        return max(10, int(usable / self.char_width))


@dataclass(frozen=True)
class Block:
    lines: Tuple[str, ...]
    indent: float = 0.0
    bold: bool = False
    css_class: str = ""
    gap_after: float = 0.0


@dataclass(frozen=True)
class PlacedBlock:
    block: Block
    top: float


@dataclass
class Page:
    blocks: List[PlacedBlock] = field(default_factory=list)


# ------------- Layout -------------


def _wrap(text: str, geometry: PageGeometry, indent: float) -> Tuple[str, ...]:
    lines = textwrap.wrap(
        text,
        width=geometry.columns(indent),
        break_long_words=True,
        replace_whitespace=True,
    )
    return tuple(lines) or ("",)


def build_blocks(
    topic: str,
    questions: Sequence[Question],
    answers: Mapping[int, str],
    practice_mode: bool,
    geometry: PageGeometry,
) -> List[Block]:
    """Return the document content in reading order."""

    option_indent = 5.0
    blocks = [
        Block(
            _wrap(f"MCQs on: {topic}", geometry, 0.0),
            bold=True,
            css_class="title",
            gap_after=5.0,
        )
    ]
    for index, question in enumerate(questions):
        blocks.append(
            Block(
                _wrap(f"Q{index + 1}: {question.prompt}", geometry, 0.0),
                bold=True,
                css_class="question",
                gap_after=2.0,
            )
        )
        for key, text in question.options.items():
            correct = key == question.correct_key
            label = f"{key}) {text}"
            if correct:
                label = f"{CHECK_MARK} {label}"
            blocks.append(
                Block(
                    _wrap(label, geometry, option_indent),
                    indent=option_indent,
                    bold=correct,
                    css_class="option correct" if correct else "option",
                    gap_after=1.0,
                )
            )
        selected = answers.get(index) if practice_mode else None
        if selected:
            ok = question.is_correct(selected)
            verdict = "Correct" if ok else "Incorrect"
            blocks.append(
                Block(
                    _wrap(
                        f"Your Answer: {selected} ({verdict})",
                        geometry,
                        option_indent,
                    ),
                    indent=option_indent,
                    css_class=f"answer {verdict.lower()}",
                )
            )
        blocks.append(Block((), gap_after=8.0))
    return blocks


def paginate(
    blocks: Sequence[Block], geometry: PageGeometry = PageGeometry()
) -> List[Page]:
    """Place blocks on pages using a running vertical cursor."""

    pages = [Page()]
    cursor = geometry.margin
    for block in blocks:
        height = len(block.lines) * geometry.line_height
        if block.lines:
            if cursor + height > geometry.bottom_limit:
                pages.append(Page())
                cursor = geometry.margin
            pages[-1].blocks.append(PlacedBlock(block=block, top=cursor))
        cursor += height + block.gap_after
    return pages


def layout_quiz(
    topic: str,
    questions: Sequence[Question],
    answers: Mapping[int, str],
    practice_mode: bool,
    geometry: PageGeometry = PageGeometry(),
) -> List[Page]:
    blocks = build_blocks(topic, questions, answers, practice_mode, geometry)
    return paginate(blocks, geometry)


# ------------- HTML -------------


def _page_template() -> Template:
    tpl = """
    <!DOCTYPE html>
    <html>
    <head>
      <meta charset="utf-8">
      <title>MCQs on: {{ topic }}</title>
      <style>
        body { margin: 0; font-family: Helvetica, Arial, sans-serif; }
        .page {
          position: relative;
          width: {{ g.width }}mm;
          height: {{ g.height }}mm;
          overflow: hidden;
          page-break-after: always;
        }
        .page:last-child { page-break-after: auto; }
        .block { position: absolute; margin: 0; }
        .line {
          display: block;
          height: {{ g.line_height }}mm;
          line-height: {{ g.line_height }}mm;
          font-size: {{ g.font_size_pt }}pt;
          white-space: pre;
        }
        .bold { font-weight: bold; }
        .answer.incorrect { color: #a40000; }
        .answer.correct { color: #1f6f2b; }
      </style>
    </head>
    <body>
      {% for page in pages %}
      <section class="page">
        {% for placed in page.blocks %}
        <div class="block {{ placed.block.css_class }}{% if placed.block.bold %} bold{% endif %}"
             style="top: {{ placed.top }}mm; left: {{ g.margin + placed.block.indent }}mm;">
          {% for line in placed.block.lines %}<span class="line">{{ line }}</span>{% endfor %}
        </div>
        {% endfor %}
      </section>
      {% endfor %}
    </body>
    </html>
    """
    env = Environment(autoescape=True)
    return env.from_string(tpl)


def render_html(
    topic: str,
    pages: Sequence[Page],
    geometry: PageGeometry = PageGeometry(),
) -> str:
    return _page_template().render(topic=topic, pages=pages, g=geometry)


def page_css(geometry: PageGeometry = PageGeometry()) -> str:
    return (
        "@page {\n"
        f"  size: {geometry.width}mm {geometry.height}mm;\n"
        "  margin: 0;\n"
        "}\n"
    )


# ------------- Export -------------


def artifact_name(topic: str) -> str:
    """File name for a quiz PDF; never contains a directory component."""

    stem = _FILENAME_SEP_RE.sub("_", topic).lstrip(".")
    return f"{stem or 'quiz'}-mcqs.pdf"


def export(
    topic: str,
    questions: Sequence[Question],
    answers: Mapping[int, str],
    practice_mode: bool,
    geometry: PageGeometry = PageGeometry(),
) -> Optional[bytes]:
    """Render the quiz to PDF bytes; ``None`` when there are no questions."""

    if not questions:
        return None
    pages = layout_quiz(topic, questions, answers, practice_mode, geometry)
    html_doc = render_html(topic, pages, geometry)
    html_cls, css_cls = _load_weasyprint()
    try:
        document = html_cls(string=html_doc, base_url=Path.cwd().as_uri())
        stylesheets = [css_cls(string=page_css(geometry))]
        data = document.write_pdf(stylesheets=stylesheets)
    except Exception as exc:
        raise ExportError(f"PDF rendering failed: {exc}") from exc
    logger.info(
        "Rendered PDF",
        extra={
            "topic": topic,
            "questions": len(questions),
            "pages": len(pages),
        },
    )
    return data


def export_quiz(
    topic: str,
    questions: Sequence[Question],
    answers: Mapping[int, str],
    practice_mode: bool,
    *,
    out_dir: Path,
) -> Optional[Path]:
    """Write the PDF into ``out_dir`` and return its path."""

    data = export(topic, questions, answers, practice_mode)
    if data is None:
        return None
    target = out_dir / artifact_name(topic)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as exc:
        raise ExportError(f"Could not write {target}: {exc}") from exc
    logger.info("Wrote PDF", extra={"path": target})
    return target


def _load_weasyprint() -> Tuple[Any, Any]:
    try:
        from weasyprint import CSS, HTML
    except Exception as exc:
        raise ExportError(
            "WeasyPrint is required. Install system libraries (Cairo, Pango) "
            "and the 'weasyprint' package."
        ) from exc
    return HTML, CSS
