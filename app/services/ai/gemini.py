"""
Google Gemini provider (no streaming).
"""

from typing import Any, Dict, Optional
import google.generativeai as genai
from app.exceptions import ServiceUnavailableError
from app.services.ai.base import BaseAIProvider
from app.utils.logger import get_logger

logger = get_logger(__name__)


class GeminiProvider(BaseAIProvider):
    """Gemini Flash through the google-generativeai SDK."""

    name = "gemini"

    def __init__(self, config: Dict[str, Any], model: Optional[Any] = None):
        super().__init__(config)
        self._model = model

    def _get_model(self):
        if self._model is None:
            if not self.config.get("api_key"):
                raise ServiceUnavailableError("GOOGLE_API_KEY is required for Gemini provider")
            genai.configure(api_key=self.config["api_key"])
            self._model = genai.GenerativeModel(self.config["model"])
            logger.info(f"✅ Gemini model {self.config['model']} initialized successfully")
        return self._model

    async def generate_content(
        self,
        prompt: str,
        prefer_fast: bool = False,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        # Gemini has a single model here; prefer_fast does not change it
        model = self._get_model()
        try:
            response = await model.generate_content_async(
                prompt,
                generation_config=genai.types.GenerationConfig(
                    temperature=self._temperature(temperature),
                    max_output_tokens=self._max_tokens(max_tokens)
                )
            )
        except Exception as e:
            logger.error(f"Error generating content with Gemini: {e}")
            raise
        return response.text
