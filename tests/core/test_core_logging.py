from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from mcq_generator.core import logging as core_logging


def _flush(logger: logging.Logger) -> None:
    for handler in logger.handlers:
        handler.flush()


def test_configure_logger_writes_json_lines(tmp_path):
    logger, log_path = core_logging.configure_logger(
        "mcq_generator.test_json",
        log_dir=tmp_path / "logs",
        filename="test.log",
    )
    logger.info("hello", extra={"topic": "Cells", "path": tmp_path})
    try:
        raise ValueError("boom")
    except ValueError:
        logger.exception("failed", extra={"nested": {"items": [1, "x"]}})
    _flush(logger)

    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    first, last = (json.loads(line) for line in (lines[0], lines[-1]))
    assert first["message"] == "hello"
    assert first["level"] == "INFO"
    assert first["logger"] == "mcq_generator.test_json"
    assert first["extra"] == {"topic": "Cells", "path": str(tmp_path)}
    assert "ValueError: boom" in last["exception"]
    assert last["extra"]["nested"] == {"items": [1, "x"]}

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_level_filters_file_output(tmp_path):
    logger, log_path = core_logging.configure_logger(
        "mcq_generator.test_level", log_dir=tmp_path, level="warning"
    )
    logger.info("quiet")
    logger.warning("loud")
    _flush(logger)
    messages = [
        json.loads(line)["message"]
        for line in log_path.read_text(encoding="utf-8").splitlines()
    ]
    assert messages == ["loud"]
    assert log_path.name == "test_level.log"

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_reconfigure_reuses_handlers(tmp_path):
    name = "mcq_generator.test_reuse"
    logger, _ = core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=True
    )
    assert len(logger.handlers) == 2
    logger, _ = core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=True
    )
    assert len(logger.handlers) == 2
    logger, _ = core_logging.configure_logger(name, log_dir=tmp_path)
    assert len(logger.handlers) == 1

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_unwritable_dir_falls_back_to_tmp(tmp_path, monkeypatch):
    fallback = tmp_path / "fallback"
    monkeypatch.setattr(core_logging, "_fallback_dir", lambda: fallback)
    original_mkdir = Path.mkdir

    def _mkdir(self, *args, **kwargs):
        if self == tmp_path / "locked":
            raise PermissionError("denied")
        return original_mkdir(self, *args, **kwargs)

    monkeypatch.setattr(Path, "mkdir", _mkdir)
    logger, log_path = core_logging.configure_logger(
        "mcq_generator.test_fallback", log_dir=tmp_path / "locked"
    )
    assert log_path.parent == fallback.resolve()

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_default_fallback_dir_is_under_tmp():
    assert core_logging._fallback_dir().parent == Path(tempfile.gettempdir())
