"""Async client for the Gemini `generateContent` endpoint.

Performs exactly one HTTP attempt per call. Retries belong to the caller
(see `core.services.resilience`).
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
from loguru import logger

from ..config.defaults import DEFAULT_BASE_URL, DEFAULT_MODEL, DEFAULT_REQUEST_TIMEOUT, DEFAULT_TEMPERATURE
from .exceptions import (
    ProviderConfigError,
    ProviderHTTPError,
    ProviderResponseError,
    ProviderTimeoutError,
)


class GeminiClient:
    """Single-attempt text generation against the Gemini REST API."""

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        temperature: float = DEFAULT_TEMPERATURE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Provider credential; `None` makes every call fail with
                `ProviderConfigError`
            model: Model id used in the endpoint path
            base_url: API root, e.g. `https://generativelanguage.googleapis.com/v1beta`
            timeout: Hard deadline in seconds for one attempt
            temperature: Sampling temperature sent with every request
            transport: Optional httpx transport (tests use `httpx.MockTransport`)
        """
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self._endpoint = f"/models/{model}:generateContent"
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "GeminiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def build_request_body(
        self,
        prompt: str,
        json_mode: bool,
        system_instruction: str | None = None,
        history: list[dict[str, str]] | None = None,
    ) -> dict[str, Any]:
        """Translate chat-style messages into the Gemini request envelope."""
        contents = []
        for message in history or []:
            role = "model" if message.get("role") == "assistant" else "user"
            contents.append({"role": role, "parts": [{"text": message.get("content", "")}]})
        contents.append({"role": "user", "parts": [{"text": prompt}]})

        body: dict[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "temperature": self.temperature,
                "response_mime_type": "application/json" if json_mode else "text/plain",
            },
        }
        if system_instruction:
            body["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        return body

    async def generate(
        self,
        prompt: str,
        json_mode: bool = False,
        *,
        system_instruction: str | None = None,
        history: list[dict[str, str]] | None = None,
    ) -> str:
        """Send one generation request and return the first text part.

        Raises:
            ProviderConfigError: No API key configured, or the key was rejected
            ProviderTimeoutError: No answer within `timeout` seconds
            ProviderHTTPError: Non-success status or transport failure
            ProviderResponseError: Answer lacks `candidates[0].content.parts[0].text`
        """
        if not self.api_key:
            logger.warning("Gemini API key missing")
            raise ProviderConfigError("Provider API key is not configured")

        body = self.build_request_body(prompt, json_mode, system_instruction, history)

        try:
            response = await asyncio.wait_for(
                self._client.post(self._endpoint, params={"key": self.api_key}, json=body),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise ProviderTimeoutError(
                f"Provider did not respond within {self.timeout:.0f}s"
            ) from e
        except httpx.HTTPError as e:
            raise ProviderHTTPError(f"Provider request failed: {e}") from e

        if not response.is_success:
            if self._is_rejected_key(response):
                raise ProviderConfigError(f"Provider rejected the API key: {self._error_message(response)}")
            raise ProviderHTTPError(
                f"Gemini Error: {self._error_message(response)}",
                status_code=response.status_code,
            )

        return self._extract_text(response)

    @staticmethod
    def _is_rejected_key(response: httpx.Response) -> bool:
        if response.status_code in (401, 403):
            return True
        try:
            details = response.json().get("error", {}).get("details") or []
        except (ValueError, AttributeError):
            return False
        return any(isinstance(d, dict) and d.get("reason") == "API_KEY_INVALID" for d in details)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            message = response.json().get("error", {}).get("message")
        except (ValueError, AttributeError):
            message = None
        return message or response.reason_phrase or f"HTTP {response.status_code}"

    @staticmethod
    def _extract_text(response: httpx.Response) -> str:
        try:
            data = response.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError, ValueError) as e:
            preview = response.text[:400]
            raise ProviderResponseError(f"Invalid response structure from Gemini: {preview}") from e
        if not isinstance(text, str) or not text:
            raise ProviderResponseError("Invalid response structure from Gemini: empty text part")
        return text
