"""Glue one generation call to the quiz controller."""

from __future__ import annotations

import logging

from mcq_generator.generation.client import GenerationClient
from mcq_generator.generation.errors import GenerationError
from mcq_generator.generation.models import GenerationRequest

from .state import QuizController, RevealHandle

logger = logging.getLogger("mcq_generator.quiz")


async def run_generation(
    controller: QuizController,
    client: GenerationClient,
    request: GenerationRequest,
) -> RevealHandle | None:
    """Reset the quiz, fetch questions and start revealing them.

    Generation failures are reported through ``controller.fail`` and yield
    ``None``; nothing is raised to the caller.
    """

    controller.begin_generation()
    try:
        records = await client.generate(request)
    except GenerationError as exc:
        logger.error(
            "Generation failed: %s", exc, extra={"error": type(exc).__name__}
        )
        controller.fail(str(exc) or "An unexpected error occurred.")
        return None
    return controller.ingest(records)
