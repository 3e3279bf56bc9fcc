"""
Groq provider.

Groq exposes an OpenAI-compatible chat completions API, so the OpenAI SDK is
pointed at Groq's base URL.
"""

from typing import Any, Dict, List, Optional
from openai import AsyncOpenAI
from app.exceptions import ServiceUnavailableError
from app.services.ai.base import BaseAIProvider, ChunkHandler
from app.utils.logger import get_logger

logger = get_logger(__name__)


class GroqProvider(BaseAIProvider):
    """Llama models served by Groq; supports streaming."""

    name = "groq"
    supports_streaming = True

    SYSTEM_PROMPT = "You are a helpful AI assistant. Provide clear, concise, and helpful responses."

    def __init__(self, config: Dict[str, Any], client: Optional[AsyncOpenAI] = None):
        super().__init__(config)
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        """Create the SDK client on first use so a missing key only fails the call."""
        if self._client is None:
            if not self.config.get("api_key"):
                raise ServiceUnavailableError("GROQ_API_KEY is required for Groq provider")
            self._client = AsyncOpenAI(
                api_key=self.config["api_key"],
                base_url=self.config.get("base_url")
            )
            logger.info("✅ Groq client initialized successfully")
        return self._client

    def _model(self, prefer_fast: bool) -> str:
        return self.config["fast_model"] if prefer_fast else self.config["model"]

    def _messages(self, prompt: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.SYSTEM_PROMPT},
            {"role": "user", "content": prompt}
        ]

    async def generate_content(
        self,
        prompt: str,
        prefer_fast: bool = False,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        client = self._get_client()
        model = self._model(prefer_fast)
        try:
            response = await client.chat.completions.create(
                model=model,
                messages=self._messages(prompt),
                temperature=self._temperature(temperature),
                max_tokens=self._max_tokens(max_tokens)
            )
        except Exception as e:
            logger.error(f"Error generating content with Groq ({model}): {e}")
            raise

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def generate_streaming_content(
        self,
        prompt: str,
        on_chunk: ChunkHandler,
        prefer_fast: bool = False,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> None:
        client = self._get_client()
        model = self._model(prefer_fast)
        try:
            stream = await client.chat.completions.create(
                model=model,
                messages=self._messages(prompt),
                temperature=self._temperature(temperature),
                max_tokens=self._max_tokens(max_tokens),
                stream=True
            )
            async for chunk in stream:
                if not chunk.choices:
                    continue
                content = chunk.choices[0].delta.content
                if content:
                    on_chunk(content)
        except Exception as e:
            logger.error(f"Error generating streaming content with Groq ({model}): {e}")
            raise
