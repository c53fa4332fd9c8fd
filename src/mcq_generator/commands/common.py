"""Helpers shared by the generate and practice commands."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Callable

from mcq_generator.config import (
    ConfigOverrides,
    LoadResult,
    McqConfig,
    load_config,
)
from mcq_generator.core.credentials import load_api_key
from mcq_generator.core.logging import configure_logger
from mcq_generator.generation.client import GenerationClient


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a TOML config file (defaults to the workspace config).",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root.",
    )
    parser.add_argument(
        "--model",
        help="Gemini model identifier to request questions from.",
    )
    parser.add_argument(
        "--log-level",
        help="Set the log file level (defaults to INFO).",
    )


def load_from_args(
    args: argparse.Namespace, *, output_dir: Path | None = None
) -> LoadResult:
    """Raises ``McqConfigError``; callers turn it into a usage error."""
    overrides = ConfigOverrides(
        model=args.model,
        output_dir=output_dir,
        log_level=args.log_level,
    )
    return load_config(
        config_path=args.config,
        overrides=overrides,
        workspace_path=args.workspace,
    )


def setup_logging(
    result: LoadResult, *, verbose: bool = False
) -> tuple[logging.Logger, Path]:
    return configure_logger(
        "mcq_generator",
        log_dir=result.layout.path_for("logs"),
        level=result.config.log_level,
        verbose=verbose,
    )


def client_factory(config: McqConfig) -> Callable[[], GenerationClient]:
    """Return a factory that reads the API key at call time.

    Raises ``ConfigurationError`` when the key is missing.
    """

    def _build() -> GenerationClient:
        return GenerationClient(
            load_api_key(),
            model=config.model,
            endpoint=config.endpoint,
            timeout=config.timeout,
            retry=config.retry,
        )

    return _build
