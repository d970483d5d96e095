"""
Completion clients for the question generation pipeline.

Single attempt, non-streamed, fail-fast:
  - GeminiClient → generativelanguage REST API over httpx (default)
  - OpenAIClient → Chat Completions through the openai SDK

Provider: QUIZGEN_COMPLETION_PROVIDER = "gemini" | "openai"
"""

import logging
from typing import Optional

import httpx
import openai
from openai import AsyncOpenAI

from quizgen import config
from quizgen.errors import ConfigurationError, EmptyResponseError, MalformedResponseError, ServiceError

log = logging.getLogger(__name__)


class CompletionClient:
    """Interface: send one prompt, get the raw response text back."""

    async def complete(self, prompt: str) -> str:
        raise NotImplementedError


# ─── Gemini ────────────────────────────────────────────────────────────────────

class GeminiClient(CompletionClient):
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._api_key = api_key
        self.model = model or config.GEMINI_MODEL
        self.base_url = (base_url or config.GEMINI_BASE_URL).rstrip("/")
        self.timeout = config.COMPLETION_TIMEOUT if timeout is None else timeout
        self._http_client = http_client

    @property
    def api_key(self) -> str:
        key = self._api_key or config.gemini_api_key()
        if not key:
            raise ConfigurationError("Gemini API key is missing. Set GEMINI_API_KEY in your environment.")
        return key

    @staticmethod
    def build_payload(prompt: str) -> dict:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"response_mime_type": "application/json"},
        }

    @staticmethod
    def extract_text(data: dict) -> str:
        """Pull candidates[0].content.parts[*].text out of a generateContent body."""
        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not candidates:
            raise EmptyResponseError("No candidates found in API response")
        if not isinstance(candidates, list) or not isinstance(candidates[0], dict):
            raise MalformedResponseError("Gemini candidates are not a list of objects")

        content = candidates[0].get("content") or {}
        parts = (content.get("parts") or []) if isinstance(content, dict) else None
        if not isinstance(parts, list):
            raise MalformedResponseError("Gemini candidate content has no parts list")
        text = "".join(p.get("text") or "" for p in parts if isinstance(p, dict))
        if not text.strip():
            raise EmptyResponseError("Generated content is empty or malformed")
        return text

    async def complete(self, prompt: str) -> str:
        api_key = self.api_key
        url = f"{self.base_url}/models/{self.model}:generateContent"

        log.info("Gemini request: model=%s prompt_chars=%s", self.model, len(prompt))
        try:
            if self._http_client is not None:
                response = await self._http_client.post(
                    url, params={"key": api_key}, json=self.build_payload(prompt), timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, params={"key": api_key}, json=self.build_payload(prompt))
        except httpx.HTTPError as e:
            raise ServiceError(f"Gemini request failed: {e}") from e

        if not response.is_success:
            raise ServiceError(
                f"API request failed with status {response.status_code}",
                status=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError("Gemini response body is not JSON") from e

        return self.extract_text(data)


# ─── OpenAI ────────────────────────────────────────────────────────────────────

class OpenAIClient(CompletionClient):
    SYSTEM_PROMPT = "You are an expert exam question setter. Output only what is asked."

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
    ):
        self._api_key = api_key
        self.model = model or config.GPT_MODEL
        self.timeout = config.COMPLETION_TIMEOUT if timeout is None else timeout
        self._http_client = http_client
        self._base_url = base_url
        self._client: Optional[AsyncOpenAI] = None

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            api_key = self._api_key or config.openai_api_key()
            if not api_key:
                raise ConfigurationError("OPENAI_API_KEY is not set. Add it to your .env file.")
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=self._base_url,
                timeout=self.timeout,
                max_retries=0,
                http_client=self._http_client,
            )
        return self._client

    async def complete(self, prompt: str) -> str:
        client = self._get_client()
        log.info("OpenAI request: model=%s prompt_chars=%s", self.model, len(prompt))
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.7,
            )
        except openai.APIStatusError as e:
            raise ServiceError(
                f"API request failed with status {e.status_code}",
                status=e.status_code,
                body=e.response.text,
            ) from e
        except openai.APIError as e:
            raise ServiceError(f"OpenAI request failed: {e}") from e

        if not response.choices:
            raise EmptyResponseError("No choices found in API response")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise EmptyResponseError("Generated content is empty or malformed")
        return content


# ─── Factory ───────────────────────────────────────────────────────────────────

_client: Optional[CompletionClient] = None


def get_completion_client() -> CompletionClient:
    """Lazy singleton for the configured provider (also a FastAPI dependency)."""
    global _client
    if _client is None:
        if config.COMPLETION_PROVIDER == "gemini":
            _client = GeminiClient()
        elif config.COMPLETION_PROVIDER == "openai":
            _client = OpenAIClient()
        else:
            raise ConfigurationError(
                f"Unknown completion provider {config.COMPLETION_PROVIDER!r}; use 'gemini' or 'openai'"
            )
    return _client
