"""Language-model clients used for structured location extraction.

Two providers are supported:
- Gemini through its REST ``generateContent`` endpoint (default)
- Any OpenAI-compatible chat endpoint: GitHub Models, or a local Ollama
  when USE_OLLAMA is set

Both expose ``generate(prompt) -> str`` and raise ``UpstreamError`` on failure.
"""

import logging
from typing import Protocol

import httpx
from openai import AsyncOpenAI, OpenAIError

from routeviz.config import Settings
from routeviz.errors import UpstreamError


logger = logging.getLogger(__name__)


class LanguageModelClient(Protocol):
    """Anything that can turn a prompt into reply text."""

    async def generate(self, prompt: str) -> str:
        ...


class GeminiClient:
    """Call a Gemini model through the Generative Language REST API."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        base_url: str = "https://generativelanguage.googleapis.com",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def generate(self, prompt: str) -> str:
        url = f"{self.base_url}/v1beta/models/{self.model}:generateContent"
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": 0.1,  # Low temp for consistent extraction
            },
        }

        logger.debug("Sending request to Gemini API (%s)", self.model)
        try:
            if self._client is not None:
                response = await self._post(self._client, url, body)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, url, body)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Could not reach Gemini API: {e}") from e

        if not response.is_success:
            raise UpstreamError(
                f"Gemini API error: {response.status_code}",
                status_code=response.status_code,
                details=response.text[:500],
            )

        try:
            data = response.json()
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise UpstreamError("Could not parse Gemini API response") from e

    async def _post(self, client: httpx.AsyncClient, url: str, body: dict) -> httpx.Response:
        return await client.post(
            url,
            params={"key": self.api_key},
            json=body,
            timeout=self.timeout,
        )


class OpenAICompatibleClient:
    """Call any OpenAI-compatible chat completion endpoint."""

    def __init__(self, client: AsyncOpenAI, model: str):
        self.client = client
        self.model = model

    async def generate(self, prompt: str) -> str:
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.1,
                max_tokens=300,  # Short response expected
            )
        except OpenAIError as e:
            raise UpstreamError(f"Language model request failed: {e}") from e

        if not completion.choices:
            raise UpstreamError("Language model returned no choices")
        return completion.choices[0].message.content or ""


def create_llm_client(settings: Settings) -> LanguageModelClient | None:
    """
    Build the configured language-model client.

    Returns None when the provider is disabled or lacks credentials, in
    which case searches use pattern extraction only.
    """
    if not settings.llm_configured():
        logger.info("No language model configured (provider=%s)", settings.llm_provider)
        return None

    if settings.llm_provider == "gemini":
        return GeminiClient(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.http_timeout_seconds,
        )

    if settings.use_ollama:
        # Ollama doesn't need a real key
        openai_client = AsyncOpenAI(
            base_url=settings.ollama_url,
            api_key="ollama",
            timeout=settings.http_timeout_seconds,
        )
        model = settings.model_id or "qwen2.5:7b"
    else:
        openai_client = AsyncOpenAI(
            base_url="https://models.github.ai/inference",
            api_key=settings.github_token,
            timeout=settings.http_timeout_seconds,
        )
        model = settings.model_id or "openai/gpt-4.1"

    return OpenAICompatibleClient(openai_client, model)
