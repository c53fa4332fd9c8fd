"""API credential lookup."""

from __future__ import annotations

import os
from typing import Mapping

from dotenv import load_dotenv

from mcq_generator.generation.errors import ConfigurationError

__all__ = ["API_KEY_ENV", "load_api_key"]

API_KEY_ENV = "GEMINI_API_KEY"


def load_api_key(env: Mapping[str, str] | None = None) -> str:
    """Return the Gemini API key from the environment (or a ``.env`` file).

    Passing ``env`` skips ``.env`` loading and reads only that mapping.
    """

    if env is None:
        load_dotenv()
        env = os.environ
    key = (env.get(API_KEY_ENV) or "").strip()
    if not key:
        raise ConfigurationError(
            f"API key missing. Set {API_KEY_ENV} in your environment or .env "
            "file."
        )
    return key
