"""
Base AI Provider Interface

This module defines the abstract base class that all text-generation providers
must implement.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional
from app.utils.logger import get_logger

logger = get_logger(__name__)

ChunkHandler = Callable[[str], None]


class BaseAIProvider(ABC):
    """
    Abstract base class for all AI text-generation providers.

    Providers that can deliver output incrementally set ``supports_streaming``
    and override ``generate_streaming_content``.
    """

    name: str = "base"
    supports_streaming: bool = False

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize the provider.

        Args:
            config: Configuration dictionary containing provider-specific settings
        """
        self.config = config
        logger.debug(f"Initialized {self.name} AI provider")

    @abstractmethod
    async def generate_content(
        self,
        prompt: str,
        prefer_fast: bool = False,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        """
        Generate a completion for ``prompt``.

        Args:
            prompt: Free-text prompt
            prefer_fast: Use the provider's faster, cheaper model when it has one
            temperature: Sampling temperature (provider default when None)
            max_tokens: Output token budget (provider default when None)

        Returns:
            str: Generated text

        Raises:
            ServiceUnavailableError: If the provider is not configured
            Exception: Whatever the underlying SDK raises
        """
        pass

    async def generate_streaming_content(
        self,
        prompt: str,
        on_chunk: ChunkHandler,
        prefer_fast: bool = False,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> None:
        """Deliver a completion incrementally through ``on_chunk``."""
        raise NotImplementedError(f"{self.name} does not support streaming")

    def _temperature(self, temperature: Optional[float]) -> float:
        return self.config.get("temperature", 0.7) if temperature is None else temperature

    def _max_tokens(self, max_tokens: Optional[int]) -> int:
        return self.config.get("max_tokens", 1024) if max_tokens is None else max_tokens
