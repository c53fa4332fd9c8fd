"""``mcq generate``: one-shot generation printed to the console."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Sequence

from rich.console import Console

from mcq_generator.config import McqConfigError
from mcq_generator.console import render_quiz
from mcq_generator.export.pdf import ExportError, export_quiz
from mcq_generator.generation.client import GenerationClient
from mcq_generator.generation.errors import ConfigurationError
from mcq_generator.generation.models import (
    Difficulty,
    GenerationRequest,
    RequestValidationError,
)
from mcq_generator.quiz.runner import run_generation
from mcq_generator.quiz.state import QuizController, QuizState

from .common import (
    add_config_arguments,
    client_factory,
    load_from_args,
    setup_logging,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcq generate",
        description="Generate multiple-choice questions on a topic.",
    )
    parser.add_argument("topic", help="Subject of the questions.")
    parser.add_argument(
        "-n",
        "--count",
        type=int,
        default=5,
        help="Number of questions (1-100).",
    )
    parser.add_argument(
        "-d",
        "--difficulty",
        default=Difficulty.MEDIUM.value,
        help="Easy, Medium or Hard.",
    )
    parser.add_argument(
        "--pdf",
        action="store_true",
        help="Also write the quiz to a PDF in the export directory.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Override the PDF export directory.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log output to stderr.",
    )
    add_config_arguments(parser)
    return parser


async def collect_questions(
    client: GenerationClient, request: GenerationRequest
) -> QuizState:
    """Run a generation to completion and return the final snapshot."""

    controller = QuizController(reveal_interval=0.0, practice_mode=False)
    handle = await run_generation(controller, client, request)
    if handle is not None:
        await handle.wait()
    return controller.state


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        request = GenerationRequest.create(
            args.topic, args.count, args.difficulty
        )
    except RequestValidationError as exc:
        parser.error(str(exc))

    try:
        loaded = load_from_args(args, output_dir=args.output_dir)
    except McqConfigError as exc:
        parser.error(str(exc))

    logger, log_path = setup_logging(loaded, verbose=args.verbose)
    logger.debug("generate command invoked")
    console = Console()

    try:
        client = client_factory(loaded.config)()
    except ConfigurationError as exc:
        console.print(f"[red]{exc}[/]")
        return 1

    with console.status("Generating... Please wait."):
        state = asyncio.run(collect_questions(client, request))

    if state.error:
        console.print(f"[red]{state.error}[/]")
        console.print(f"[dim]Log file: {log_path}[/]")
        return 1

    render_quiz(console, request.topic, state.questions)

    if args.pdf:
        try:
            path = export_quiz(
                request.topic,
                state.questions,
                state.answers,
                state.practice_mode,
                out_dir=loaded.config.output_dir,
            )
        except ExportError as exc:
            sys.stderr.write(str(exc) + "\n")
            return 1
        if path is not None:
            console.print(f"Wrote PDF to {path}")
    return 0
