from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import (  # noqa: E402
    CSSRecorder,
    GeminiServer,
    HTMLRecorder,
    RecordingSleep,
)
from mcq_generator.export import pdf as pdf_mod  # noqa: E402

_ENV_NAMES = (
    "GEMINI_API_KEY",
    "MCQ_GENERATOR_CONFIG",
    "MCQ_GENERATOR_ENDPOINT",
    "MCQ_GENERATOR_MODEL",
    "MCQ_GENERATOR_TIMEOUT",
    "MCQ_GENERATOR_MAX_ATTEMPTS",
    "MCQ_GENERATOR_BACKOFF_BASE",
    "MCQ_GENERATOR_REVEAL_INTERVAL",
    "MCQ_GENERATOR_OUTPUT_DIR",
    "MCQ_GENERATOR_LOG_LEVEL",
)


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    return tmp_path / "ws"


@pytest.fixture(autouse=True)
def _isolated_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, workspace_root: Path
) -> Iterator[None]:
    """Keep tests away from the real workspace, .env file and API key."""

    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MCQ_GENERATOR_HOME", str(workspace_root))
    monkeypatch.setattr(
        "mcq_generator.core.credentials.load_dotenv", lambda *a, **k: None
    )
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("mcq_generator")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def gemini() -> GeminiServer:
    return GeminiServer()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def pdf_backend(monkeypatch: pytest.MonkeyPatch) -> Iterator[type]:
    """Swap WeasyPrint for recorders; yields the HTML recorder class."""

    HTMLRecorder.pop_calls()
    monkeypatch.setattr(
        pdf_mod, "_load_weasyprint", lambda: (HTMLRecorder, CSSRecorder)
    )
    yield HTMLRecorder
    HTMLRecorder.pop_calls()
