"""
AI Gateway

Single entry point for text generation. Requests go to the primary provider
(Groq by default); on any error the configured fallback provider (Gemini by
default) is tried exactly once. There are no retries, no backoff and no
circuit breaker.
"""

from dataclasses import dataclass
from typing import Dict, Optional
from fastapi import Request
from app.config import Settings, get_settings
from app.exceptions import UnknownProviderError
from app.services.ai.base import BaseAIProvider, ChunkHandler
from app.services.ai.factory import AIProviderFactory
from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class GenerationResult:
    """Outcome of a gateway call: either generated text or the error that ended it."""
    value: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def value_or(self, default: str) -> str:
        return self.value if self.ok else default


class AIGateway:
    """Routes generation requests to a provider with one-shot fallback."""

    def __init__(
        self,
        providers: Dict[str, BaseAIProvider],
        primary_provider: str = "groq",
        fallback_provider: Optional[str] = "gemini"
    ):
        self.providers = providers
        self.primary_provider = primary_provider
        self.fallback_provider = fallback_provider

        logger.info(
            f"AI gateway initialized: primary={self.primary_provider}, "
            f"fallback={self.fallback_provider or 'none'}"
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "AIGateway":
        """Build the gateway and its providers from application settings."""
        settings = settings or get_settings()
        names = [settings.AI_PRIMARY_PROVIDER]
        if settings.AI_FALLBACK_PROVIDER and settings.AI_FALLBACK_PROVIDER not in names:
            names.append(settings.AI_FALLBACK_PROVIDER)

        providers = {name: AIProviderFactory.create_provider(name, settings=settings) for name in names}
        return cls(
            providers,
            primary_provider=settings.AI_PRIMARY_PROVIDER,
            fallback_provider=settings.AI_FALLBACK_PROVIDER or None
        )

    def get_provider(self, provider_name: Optional[str] = None) -> BaseAIProvider:
        """Resolve a provider by name (primary when omitted)."""
        name = provider_name or self.primary_provider
        provider = self.providers.get(name)
        if provider is None:
            raise UnknownProviderError(f"Unknown AI provider: {name}", {"provider": name})
        return provider

    def _get_fallback(self, provider_name: str) -> Optional[BaseAIProvider]:
        """The fallback provider, unless it is the provider that just failed."""
        if not self.fallback_provider or self.fallback_provider == provider_name:
            return None
        return self.providers.get(self.fallback_provider)

    async def generate_content(
        self,
        prompt: str,
        provider: Optional[str] = None,
        prefer_fast: bool = False,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        """
        Generate text, falling back once to the secondary provider on error.

        Raises:
            UnknownProviderError: If ``provider`` is not registered
            Exception: The fallback's error when both providers fail, or the
                original error when there is no distinct fallback
        """
        provider_name = provider or self.primary_provider
        selected = self.get_provider(provider_name)
        options = {"prefer_fast": prefer_fast, "temperature": temperature, "max_tokens": max_tokens}

        try:
            return await selected.generate_content(prompt, **options)
        except Exception as e:
            fallback = self._get_fallback(provider_name)
            if fallback is None:
                raise
            logger.warning(f"⚠️ Primary provider {provider_name} failed, falling back to {fallback.name}: {e}")
            return await fallback.generate_content(prompt, **options)

    async def generate_result(
        self,
        prompt: str,
        provider: Optional[str] = None,
        prefer_fast: bool = False,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> GenerationResult:
        """Same as ``generate_content`` but returns the failure instead of raising it."""
        try:
            value = await self.generate_content(
                prompt,
                provider=provider,
                prefer_fast=prefer_fast,
                temperature=temperature,
                max_tokens=max_tokens
            )
            return GenerationResult(value=value)
        except UnknownProviderError:
            raise
        except Exception as e:
            logger.error(f"❌ AI generation failed on all providers: {e}")
            return GenerationResult(error=e)

    async def generate_streaming_content(
        self,
        prompt: str,
        on_chunk: ChunkHandler,
        provider: Optional[str] = None,
        prefer_fast: bool = False,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> None:
        """
        Deliver generated text through ``on_chunk``.

        A provider without streaming support gets a full call whose result is
        delivered as a single chunk. Chunks already delivered before a
        streaming failure are not retracted.
        """
        provider_name = provider or self.primary_provider
        selected = self.get_provider(provider_name)
        options = {"prefer_fast": prefer_fast, "temperature": temperature, "max_tokens": max_tokens}

        if not selected.supports_streaming:
            on_chunk(await self.generate_content(prompt, provider=provider_name, **options))
            return

        try:
            await selected.generate_streaming_content(prompt, on_chunk, **options)
        except Exception as e:
            fallback = self._get_fallback(provider_name)
            if fallback is None:
                raise
            logger.warning(f"⚠️ Streaming failed with {provider_name}, trying {fallback.name}: {e}")
            if fallback.supports_streaming:
                await fallback.generate_streaming_content(prompt, on_chunk, **options)
            else:
                on_chunk(await fallback.generate_content(prompt, **options))

    async def is_provider_available(self, provider_name: str) -> bool:
        """Health check a provider with a tiny generation request."""
        provider = self.providers.get(provider_name)
        if provider is None:
            return False
        try:
            await provider.generate_content("Hello", max_tokens=5)
            return True
        except Exception as e:
            logger.warning(f"Provider {provider_name} is unavailable: {e}")
            return False


def get_ai_gateway(request: Request) -> AIGateway:
    """FastAPI dependency returning the application's AI gateway."""
    return request.app.state.ai_gateway
