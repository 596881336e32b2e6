"""Gemini model client using the google-genai SDK."""
from typing import Optional

from google import genai
from google.genai import types

from ..utils.logger import get_logger
from ..utils.exceptions import ExtractionUnavailableError

logger = get_logger()


class GeminiClient:
    """Thin wrapper returning the model's raw text answer."""

    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash-lite", timeout_seconds: int = 30):
        """
        Initialize Gemini client.

        Args:
            api_key: Google AI API key
            model_name: Gemini model identifier
            timeout_seconds: Per-request timeout; expiry counts as unavailable
        """
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=timeout_seconds * 1000)
        )
        self.model_name = model_name
        logger.info(f"Gemini client initialized with {self.model_name}")

    def generate(self, prompt: str, image_bytes: Optional[bytes] = None, mime_type: Optional[str] = None) -> str:
        """
        Send a prompt, optionally with an image, and return the answer text.

        Raises:
            ExtractionUnavailableError: the model could not be reached
        """
        contents = [prompt]
        if image_bytes is not None:
            contents.append(types.Part.from_bytes(data=image_bytes, mime_type=mime_type or "image/jpeg"))

        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=contents
            )
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            raise ExtractionUnavailableError(f"Model request failed: {e}") from e

        text = response.text or ""
        logger.debug(f"Gemini response ({len(text)} chars): {text[:500]}")
        return text
