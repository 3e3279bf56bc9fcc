"""
AI Provider Factory

Factory for creating text-generation provider instances from settings.
"""

from typing import Any, Dict, Optional
from app.config import Settings, get_settings
from app.exceptions import UnknownProviderError
from app.services.ai.base import BaseAIProvider
from app.services.ai.gemini import GeminiProvider
from app.services.ai.groq import GroqProvider
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Provider registry
PROVIDER_REGISTRY = {
    "groq": GroqProvider,
    "gemini": GeminiProvider
}


class AIProviderFactory:
    """
    Factory for creating AI provider instances.
    """
    PROVIDER_REGISTRY = PROVIDER_REGISTRY

    @staticmethod
    def create_provider(
        provider_name: str,
        config: Optional[Dict[str, Any]] = None,
        settings: Optional[Settings] = None
    ) -> BaseAIProvider:
        """
        Create a provider instance.

        Args:
            provider_name: Registered provider name (groq, gemini)
            config: Optional configuration dictionary. Built from settings if omitted

        Raises:
            UnknownProviderError: If the name is not registered
        """
        provider_name = (provider_name or "").lower()
        if provider_name not in PROVIDER_REGISTRY:
            raise UnknownProviderError(
                f"Unknown AI provider: {provider_name}",
                {"valid_providers": list(PROVIDER_REGISTRY.keys())}
            )

        if config is None:
            config = AIProviderFactory._build_config_from_settings(provider_name, settings or get_settings())

        provider = PROVIDER_REGISTRY[provider_name](config)
        logger.info(f"Created {provider_name} AI provider")
        return provider

    @staticmethod
    def _build_config_from_settings(provider_name: str, settings: Settings) -> Dict[str, Any]:
        if provider_name == "groq":
            return settings.get_groq_config()
        return settings.get_gemini_config()

    @staticmethod
    def get_available_providers() -> list:
        return list(PROVIDER_REGISTRY.keys())
