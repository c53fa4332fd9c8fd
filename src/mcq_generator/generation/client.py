"""Gemini ``generateContent`` client with bounded retry and backoff."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import httpx

from .errors import (
    ConfigurationError,
    ExhaustedRetriesError,
    GenerationError,
    ParseError,
    PermanentServerError,
    TransientServerError,
)
from .extractor import extract
from .models import GenerationRequest
from .prompts import build_payload, build_prompt

logger = logging.getLogger("mcq_generator.generation")

DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash-preview-05-20"
DEFAULT_TIMEOUT = 60.0
RETRYABLE_STATUSES = frozenset({429, 500, 503})

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """How many attempts to make and how long to wait between them."""

    max_attempts: int = 3
    backoff_base: float = 1.0
    retry_statuses: frozenset[int] = RETRYABLE_STATUSES

    def delay_for(self, attempt: int) -> float:
        """Wait before the attempt following zero-based ``attempt``."""
        return self.backoff_base * (2**attempt)


class GenerationClient:
    """Request MCQs for a topic and return the decoded raw records.

    ``sleep`` and ``transport`` exist so tests can observe backoff waits
    and serve canned HTTP responses.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = DEFAULT_MODEL,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        retry: RetryPolicy | None = None,
        sleep: Sleep = asyncio.sleep,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = (api_key or "").strip()
        self.model = model
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.retry = retry or RetryPolicy()
        self._sleep = sleep
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.endpoint}/models/{self.model}:generateContent"

    async def generate(self, request: GenerationRequest) -> list[Any]:
        if not self.api_key:
            raise ConfigurationError(
                "API key missing. Set GEMINI_API_KEY in your environment or "
                ".env file."
            )
        payload = build_payload(build_prompt(request))
        logger.info(
            "Requesting questions",
            extra={
                "topic": request.topic,
                "count": request.count,
                "difficulty": request.difficulty.value,
                "model": self.model,
            },
        )
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport
        ) as http:
            raw_text = await self._post_with_retries(http, payload)
        records = extract(raw_text)
        logger.info("Decoded %d raw record(s)", len(records))
        return records

    async def _post_with_retries(
        self, http: httpx.AsyncClient, payload: dict[str, object]
    ) -> str | None:
        attempts = self.retry.max_attempts
        last_error: TransientServerError | None = None
        for attempt in range(attempts):
            response = await self._send(http, payload)
            if response.is_success:
                return _candidate_text(response)

            error = _server_error(response, self.retry.retry_statuses)
            if isinstance(error, PermanentServerError):
                logger.error(
                    "Generation request rejected",
                    extra={"status": error.status_code, "attempt": attempt},
                )
                raise error

            last_error = error
            if attempt + 1 >= attempts:
                break
            delay = self.retry.delay_for(attempt)
            logger.warning(
                "Transient API failure; retrying",
                extra={
                    "status": error.status_code,
                    "attempt": attempt + 1,
                    "delay": delay,
                },
            )
            await self._sleep(delay)

        logger.error("Retry budget exhausted after %d attempt(s)", attempts)
        raise ExhaustedRetriesError(attempts, last_error)

    async def _send(
        self, http: httpx.AsyncClient, payload: dict[str, object]
    ) -> httpx.Response:
        try:
            return await http.post(
                self.url, params={"key": self.api_key}, json=payload
            )
        except httpx.TimeoutException as exc:
            raise GenerationError(
                f"Network error: request timed out after {self.timeout:g}s."
            ) from exc
        except httpx.HTTPError as exc:
            raise GenerationError(f"Network error: {exc}") from exc


def _candidate_text(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError as exc:
        raise ParseError("malformed JSON") from exc
    try:
        text = body["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


def _server_error(
    response: httpx.Response, retry_statuses: frozenset[int]
) -> TransientServerError | PermanentServerError:
    message = f"API Error: {_error_message(response)}"
    if response.status_code in retry_statuses:
        return TransientServerError(response.status_code, message)
    return PermanentServerError(response.status_code, message)


def _error_message(response: httpx.Response) -> str:
    try:
        detail = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        detail = None
    if isinstance(detail, str) and detail.strip():
        return detail.strip()
    return response.reason_phrase or f"HTTP {response.status_code}"
