"""Rich rendering of a generated quiz for the non-interactive command."""

from __future__ import annotations

from collections.abc import Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from mcq_generator.generation.models import Question


def render_question(console: Console, index: int, question: Question) -> None:
    console.print()
    console.rule(Text(f"Question {index + 1}", style="bold cyan"))
    console.print(Text(question.prompt, style="bold"))

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("Key", justify="center", style="cyan")
    table.add_column("Option")
    for key, text in question.options.items():
        row = Text(text)
        marker = " "
        if key == question.correct_key:
            row.stylize("bold green")
            marker = "✔"
        table.add_row(key, Text(f"{marker} ") + row)
    console.print(table)


def render_quiz(
    console: Console, topic: str, questions: Sequence[Question]
) -> None:
    """Print every question with its correct option highlighted."""

    console.rule(Text(f"MCQs on: {topic}", style="bold magenta"))
    if not questions:
        console.print("[yellow]No questions to show.[/]")
        return
    for index, question in enumerate(questions):
        render_question(console, index, question)
    console.print(
        Text(f"{len(questions)} question(s) generated.", style="dim")
    )
