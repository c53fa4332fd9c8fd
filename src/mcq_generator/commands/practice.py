"""``mcq practice``: launch the Textual practice UI."""

from __future__ import annotations

import argparse
from typing import Sequence

from mcq_generator.config import McqConfigError
from mcq_generator.quiz.state import QuizController
from mcq_generator.view.app import QuizApp

from .common import (
    add_config_arguments,
    client_factory,
    load_from_args,
    setup_logging,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcq practice",
        description=(
            "Open the interactive quiz UI: generate questions, answer them in "
            "practice mode and download a PDF."
        ),
    )
    add_config_arguments(parser)
    return parser


def build_app(
    args: argparse.Namespace, parser: argparse.ArgumentParser
) -> QuizApp:
    """Config problems are reported through ``parser.error`` (exit 2)."""
    try:
        loaded = load_from_args(args)
    except McqConfigError as exc:
        parser.error(str(exc))
    logger, _ = setup_logging(loaded)
    logger.debug("practice UI starting")
    controller = QuizController(reveal_interval=loaded.config.reveal_interval)
    return QuizApp(
        client_factory(loaded.config),
        controller=controller,
        export_dir=loaded.config.output_dir,
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    build_app(args, parser).run()
    return 0
