"""
Parsing helpers for JSON replies from language models.

Models often wrap JSON in markdown fences or surround it with prose. The
helpers here strip fences and pull out the first balanced ``{...}`` block
before handing it to ``json.loads``.
"""
import json
import re
from typing import Any, Dict, Optional
from app.exceptions import InvalidResponseError
from app.utils.logger import get_logger

logger = get_logger(__name__)

_FENCE_OPEN = re.compile(r"```json\s*", re.IGNORECASE)
_FENCE_ANY = re.compile(r"```\s*")


class ResponseParser:
    """Best-effort extraction of JSON objects from model output."""

    @staticmethod
    def strip_code_fences(text: str) -> str:
        """Remove ```json and ``` markers, keeping their contents."""
        return _FENCE_ANY.sub("", _FENCE_OPEN.sub("", text.strip()))

    @staticmethod
    def find_first_object(text: str) -> Optional[str]:
        """
        Return the first balanced ``{...}`` block in ``text``.

        Braces inside JSON string literals are ignored. Returns None when no
        opening brace has a matching close.
        """
        start = text.find("{")
        while start != -1:
            depth = 0
            in_string = False
            escaped = False
            for index in range(start, len(text)):
                char = text[index]
                if in_string:
                    if escaped:
                        escaped = False
                    elif char == "\\":
                        escaped = True
                    elif char == '"':
                        in_string = False
                    continue
                if char == '"':
                    in_string = True
                elif char == "{":
                    depth += 1
                elif char == "}":
                    depth -= 1
                    if depth == 0:
                        return text[start:index + 1]
            # Unbalanced from this brace; try the next one
            start = text.find("{", start + 1)
        return None

    @classmethod
    def extract_json_object(cls, text: str) -> Dict[str, Any]:
        """
        Parse the first JSON object found in a model reply.

        Raises:
            InvalidResponseError: If no object can be found or parsed
        """
        if not text or not text.strip():
            raise InvalidResponseError("Empty AI response")

        cleaned = cls.strip_code_fences(text)
        candidate = cls.find_first_object(cleaned)
        if candidate is None:
            raise InvalidResponseError("No JSON object found in AI response", {"response": text[:200]})

        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError as e:
            raise InvalidResponseError(f"Invalid JSON in AI response: {e}", {"response": candidate[:200]}) from e

        if not isinstance(parsed, dict):
            raise InvalidResponseError("AI response JSON is not an object")
        return parsed
