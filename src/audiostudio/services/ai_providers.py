"""
AI Text Providers
HTTP adapters for Anthropic and OpenAI used to describe generated music
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import httpx

from ..core.config import AudioStudioSettings, get_settings
from ..core.logging import job_logger
from ..core.result import Result

MUSIC_DESCRIPTION_PROMPT = (
    "Describe a short piece of music for this request: {prompt}. "
    "Cover genre, tempo, instrumentation and mood in a few sentences."
)


class TextProvider(ABC):
    """Base class for a text-generation API reached over HTTP"""

    name: str = "provider"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        timeout: float = 60.0,
        max_tokens: int = 500,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.model = model
        self.max_tokens = max_tokens
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            headers=self._headers(api_key),
            transport=transport
        )

    @abstractmethod
    def _headers(self, api_key: str) -> Dict[str, str]:
        pass

    @abstractmethod
    async def _complete(self, prompt: str) -> str:
        """Send the prompt and return the generated text"""
        pass

    async def generate_text(self, prompt: str) -> Result[str]:
        try:
            text = await self._complete(prompt)
        except httpx.HTTPStatusError as e:
            return Result.err(f"{self.name} API error: {e.response.status_code} - {_error_message(e.response)}")
        except httpx.RequestError as e:
            return Result.err(f"{self.name} request failed: {e}")
        except (KeyError, IndexError, TypeError, ValueError) as e:
            return Result.err(f"Invalid {self.name} API response: {e}")

        if not text.strip():
            return Result.err(f"Empty response from {self.name}")
        return Result.ok(text)

    async def aclose(self) -> None:
        await self._client.aclose()


class AnthropicProvider(TextProvider):
    name = "Anthropic"
    API_VERSION = "2023-06-01"

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {
            "x-api-key": api_key,
            "anthropic-version": self.API_VERSION,
            "Content-Type": "application/json",
        }

    async def _complete(self, prompt: str) -> str:
        response = await self._client.post("/messages", json={
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        })
        response.raise_for_status()
        content = response.json()["content"]
        return "".join(block.get("text", "") for block in content if block.get("type") == "text")


class OpenAIProvider(TextProvider):
    name = "OpenAI"

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    async def _complete(self, prompt: str) -> str:
        response = await self._client.post("/chat/completions", json={
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        })
        response.raise_for_status()
        return response.json()["choices"][0]["message"]["content"] or ""


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return response.text


class MusicDescriptionService:
    """Describes a music prompt using the first provider that answers"""

    def __init__(self, providers: List[TextProvider]):
        if not providers:
            raise ValueError("At least one provider is required")
        self.providers = providers

    async def describe(self, prompt: str) -> Result[str]:
        message = MUSIC_DESCRIPTION_PROMPT.format(prompt=prompt)
        result: Result[str] = Result.err("No provider answered")
        for provider in self.providers:
            result = await provider.generate_text(message)
            if result.is_ok():
                return result
            job_logger.log_provider_error(provider.name, result.error)
        return result

    async def aclose(self) -> None:
        for provider in self.providers:
            await provider.aclose()


def build_description_service(
    settings: Optional[AudioStudioSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> Optional[MusicDescriptionService]:
    """Anthropic first, OpenAI as fallback; None when no API key is configured"""
    settings = settings or get_settings()
    providers: List[TextProvider] = []

    if settings.ANTHROPIC_API_KEY:
        providers.append(AnthropicProvider(
            settings.ANTHROPIC_API_KEY,
            settings.ANTHROPIC_MODEL,
            settings.ANTHROPIC_BASE_URL,
            timeout=settings.AI_REQUEST_TIMEOUT,
            max_tokens=settings.AI_MAX_TOKENS,
            transport=transport
        ))
    if settings.OPENAI_API_KEY:
        providers.append(OpenAIProvider(
            settings.OPENAI_API_KEY,
            settings.OPENAI_MODEL,
            settings.OPENAI_BASE_URL,
            timeout=settings.AI_REQUEST_TIMEOUT,
            max_tokens=settings.AI_MAX_TOKENS,
            transport=transport
        ))

    return MusicDescriptionService(providers) if providers else None
