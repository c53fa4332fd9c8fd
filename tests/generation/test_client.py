from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from fixtures import error, mcq, mcq_array, ok
from mcq_generator.generation.client import GenerationClient, RetryPolicy
from mcq_generator.generation.errors import (
    ConfigurationError,
    ExhaustedRetriesError,
    GenerationError,
    ParseError,
    PermanentServerError,
)
from mcq_generator.generation.models import GenerationRequest

REQUEST = GenerationRequest.create("Photosynthesis", 2, "Medium")


def _client(gemini, sleep, **kwargs):
    return GenerationClient(
        "secret-key",
        sleep=sleep,
        transport=gemini.transport,
        **kwargs,
    )


def _run(client):
    return asyncio.run(client.generate(REQUEST))


def test_generate_returns_raw_records(gemini, recording_sleep):
    gemini.queue(ok(mcq_array(mcq("Q1"), mcq("Q2", answer="B"))))
    records = _run(_client(gemini, recording_sleep))

    assert [record["question"] for record in records] == ["Q1", "Q2"]
    assert recording_sleep.delays == []


def test_generate_sends_prompt_and_key(gemini, recording_sleep):
    gemini.queue(ok("[]"))
    _run(_client(gemini, recording_sleep, model="gemini-test"))

    (request,) = gemini.requests
    assert request.method == "POST"
    assert request.url.path.endswith("/models/gemini-test:generateContent")
    assert request.url.params["key"] == "secret-key"
    body = json.loads(request.content)
    prompt = body["contents"][0]["parts"][0]["text"]
    assert '"Photosynthesis"' in prompt
    assert body["generationConfig"]["responseMimeType"] == "application/json"


def test_generate_accepts_fenced_candidate_text(gemini, recording_sleep):
    gemini.queue(ok("```json\n" + mcq_array(mcq()) + "\n```"))
    assert len(_run(_client(gemini, recording_sleep))) == 1


def test_missing_key_fails_before_any_request(gemini, recording_sleep):
    client = GenerationClient(
        "  ", sleep=recording_sleep, transport=gemini.transport
    )
    with pytest.raises(ConfigurationError, match="API key missing"):
        asyncio.run(client.generate(REQUEST))
    assert gemini.requests == []


def test_transient_failure_then_success(gemini, recording_sleep):
    gemini.queue(error(429), ok(mcq_array(mcq())))
    records = _run(_client(gemini, recording_sleep))

    assert len(records) == 1
    assert len(gemini.requests) == 2
    assert recording_sleep.delays == [1.0]


def test_two_transient_failures_then_success(gemini, recording_sleep):
    gemini.queue(error(503), error(503), ok(mcq_array(mcq())))
    records = _run(_client(gemini, recording_sleep))

    assert len(records) == 1
    assert len(gemini.requests) == 3
    assert recording_sleep.delays == [1.0, 2.0]


def test_retries_are_bounded(gemini, recording_sleep):
    gemini.queue(error(503), error(503), error(503))
    with pytest.raises(ExhaustedRetriesError) as excinfo:
        _run(_client(gemini, recording_sleep))

    assert str(excinfo.value) == "Gemini API failed after retries."
    assert excinfo.value.attempts == 3
    assert excinfo.value.last_error.status_code == 503
    assert len(gemini.requests) == 3
    assert recording_sleep.delays == [1.0, 2.0]


def test_permanent_failure_is_not_retried(gemini, recording_sleep):
    gemini.queue(error(400, "API key not valid."))
    with pytest.raises(PermanentServerError) as excinfo:
        _run(_client(gemini, recording_sleep))

    assert excinfo.value.status_code == 400
    assert str(excinfo.value) == "API Error: API key not valid."
    assert len(gemini.requests) == 1
    assert recording_sleep.delays == []


def test_permanent_failure_without_body_uses_reason(gemini, recording_sleep):
    gemini.queue(error(404))
    with pytest.raises(PermanentServerError, match="API Error: Not Found"):
        _run(_client(gemini, recording_sleep))


def test_custom_retry_policy(gemini, recording_sleep):
    policy = RetryPolicy(max_attempts=2, backoff_base=0.5)
    gemini.queue(error(429), error(429))
    with pytest.raises(ExhaustedRetriesError):
        _run(_client(gemini, recording_sleep, retry=policy))
    assert recording_sleep.delays == [0.5]


def test_retry_policy_delays_double():
    policy = RetryPolicy()
    assert [policy.delay_for(n) for n in range(3)] == [1.0, 2.0, 4.0]


def test_missing_candidate_text_is_empty_response(gemini, recording_sleep):
    gemini.queue(ok(None))
    with pytest.raises(ParseError, match="empty response"):
        _run(_client(gemini, recording_sleep))


def test_non_json_body_is_malformed(gemini, recording_sleep):
    gemini.queue(httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(ParseError, match="malformed JSON"):
        _run(_client(gemini, recording_sleep))


def test_unparseable_candidate_text(gemini, recording_sleep):
    gemini.queue(ok("Sorry, I cannot help with that."))
    with pytest.raises(ParseError, match="no array found"):
        _run(_client(gemini, recording_sleep))


def test_network_error_is_reported(gemini, recording_sleep):
    gemini.queue(httpx.ConnectError("connection refused"))
    with pytest.raises(GenerationError, match="Network error"):
        _run(_client(gemini, recording_sleep))


def test_timeout_is_reported(gemini, recording_sleep):
    gemini.queue(httpx.ReadTimeout("slow"))
    with pytest.raises(GenerationError, match="timed out after 5s"):
        _run(_client(gemini, recording_sleep, timeout=5.0))


def test_url_strips_trailing_slash():
    client = GenerationClient(
        "k", endpoint="https://example.test/v1/", model="m"
    )
    assert client.url == "https://example.test/v1/models/m:generateContent"
