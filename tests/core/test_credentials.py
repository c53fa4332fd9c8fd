from __future__ import annotations

import pytest

from mcq_generator.core import credentials
from mcq_generator.generation.errors import ConfigurationError


def test_load_api_key_from_mapping():
    assert credentials.load_api_key({"GEMINI_API_KEY": " abc "}) == "abc"


@pytest.mark.parametrize("env", [{}, {"GEMINI_API_KEY": "   "}])
def test_missing_key_raises(env):
    with pytest.raises(ConfigurationError) as excinfo:
        credentials.load_api_key(env)
    assert str(excinfo.value) == (
        "API key missing. Set GEMINI_API_KEY in your environment or .env "
        "file."
    )


def test_environment_lookup_loads_dotenv(monkeypatch):
    calls: list[bool] = []

    def _fake_load_dotenv(*args, **kwargs):
        calls.append(True)
        monkeypatch.setenv("GEMINI_API_KEY", "from-dotenv")
        return True

    monkeypatch.setattr(credentials, "load_dotenv", _fake_load_dotenv)
    assert credentials.load_api_key() == "from-dotenv"
    assert calls == [True]
