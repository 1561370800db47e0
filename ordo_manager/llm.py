"""LLM client: HTTP connection to a generative-AI backend.

Callers take an LLM callable matching the protocol:

    async def __call__(self, stage: str, prompt: str) -> str: ...

`stage` names the caller (e.g. "npc_generator") and is only used for logging.

HttpLLM is the real client. Tests patch ``httpx.AsyncClient.post`` or pass
their own async callable.
"""

from __future__ import annotations

import logging
from typing import Literal, Protocol

import httpx

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com"
DEFAULT_MODEL = "gemini-2.5-flash"


# ---------------------------------------------------------------------------
# Protocol: every LLM implementation must match this signature
# ---------------------------------------------------------------------------

class LLM(Protocol):
    async def __call__(self, stage: str, prompt: str) -> str: ...


# ---------------------------------------------------------------------------
# HttpLLM: connects to a real backend
# ---------------------------------------------------------------------------

ProviderFormat = Literal["gemini", "openai"]


class HttpLLM:
    """Async HTTP client for text-generation backends.

    Supported formats:
      "gemini"  POST /v1beta/models/{model}:generateContent
                  {"contents": [{"parts": [{"text": ...}]}],
                   "generationConfig": {"responseMimeType": "application/json"}}
                  Response: {"candidates": [{"content": {"parts": [{"text": "..."}]}}]}
      "openai"  POST /v1/completions  {"model": ..., "prompt": ...}
                  Response: {"choices": [{"text": "..."}]}

    Args:
        provider_url:    Base URL of the backend. Defaults to the public Gemini API.
        api_key:         API key; sent as x-goog-api-key (gemini) or a bearer token.
        provider_format: Wire format to use. Defaults to "gemini".
        model:           Model identifier.
        timeout:         HTTP timeout in seconds. Defaults to 60.
    """

    def __init__(
        self,
        provider_url: str = GEMINI_URL,
        api_key: str = "",
        provider_format: ProviderFormat = "gemini",
        model: str = DEFAULT_MODEL,
        timeout: float = 60.0,
    ) -> None:
        self._base_url = provider_url.rstrip("/")
        self._api_key = api_key
        self._format = provider_format
        self._model = model
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if not self._api_key:
            return headers
        if self._format == "gemini":
            headers["x-goog-api-key"] = self._api_key
        else:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def _build_request(self, prompt: str) -> tuple[str, dict]:
        """Return (url, body) for the configured format."""
        if self._format == "openai":
            url = f"{self._base_url}/v1/completions"
            body: dict = {"prompt": prompt}
            if self._model:
                body["model"] = self._model
            return url, body

        # gemini (default)
        url = f"{self._base_url}/v1beta/models/{self._model}:generateContent"
        return url, {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }

    def _parse_response(self, data: dict) -> str:
        """Extract the generated text from the response body."""
        if self._format == "openai":
            choices = data.get("choices")
            if not choices or "text" not in choices[0]:
                raise LLMError("Unexpected response format from OpenAI-compatible backend")
            return choices[0]["text"]

        candidates = data.get("candidates")
        try:
            parts = candidates[0]["content"]["parts"]
            return "".join(p["text"] for p in parts if "text" in p)
        except (TypeError, KeyError, IndexError) as e:
            raise LLMError("Unexpected response format from Gemini backend") from e

    async def __call__(self, stage: str, prompt: str) -> str:
        url, body = self._build_request(prompt)
        logger.debug("llm call stage=%s url=%s prompt_len=%d", stage, url, len(prompt))

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(url, json=body, headers=self._headers())
                resp.raise_for_status()
        except httpx.ConnectError as e:
            raise LLMError(f"Cannot connect to LLM backend at {self._base_url}") from e
        except httpx.HTTPStatusError as e:
            raise LLMError(
                f"LLM backend returned HTTP {e.response.status_code}"
            ) from e
        except httpx.TimeoutException as e:
            raise LLMError(f"LLM backend timed out after {self._timeout}s") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise LLMError(f"LLM request failed: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise LLMError("LLM backend returned a non-JSON body") from e
        if not isinstance(data, dict):
            raise LLMError("Unexpected response format from LLM backend")
        text = self._parse_response(data)
        logger.debug("llm response stage=%s len=%d", stage, len(text))
        return text


# ---------------------------------------------------------------------------
# LLMError: raised by HttpLLM for all connection and protocol failures
# ---------------------------------------------------------------------------

class LLMError(RuntimeError):
    """Raised when the LLM backend cannot be reached or returns an error."""
