"""
Gemini client wrapper: one best-effort text generation call per request
"""
import asyncio
import logging
from typing import Optional

from google import genai

from config.settings import get_settings
from services.errors import GenerationError

logger = logging.getLogger(__name__)


def extract_text(response) -> str:
    """Join the text parts of the first candidate, falling back to response.text."""
    if response and getattr(response, "candidates", None):
        candidate = response.candidates[0]
        content = getattr(candidate, "content", None)
        parts = getattr(content, "parts", None) if content else None
        if parts:
            text_output = "".join(p.text for p in parts if getattr(p, "text", None))
            if text_output:
                return text_output
    return getattr(response, "text", None) or ""


def _backend_message(error: Exception) -> Optional[str]:
    message = getattr(error, "message", None) or str(error)
    return message or None


class GeminiClient:
    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None, client=None):
        settings = get_settings()
        self.api_key = api_key or settings.gemini_api_key
        self.model_name = model_name or settings.gemini_model
        self._client = client

    def _get_client(self):
        if self._client is None:
            if not self.api_key:
                raise GenerationError("GEMINI_API_KEY not found in environment variables")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def generate(self, prompt_text: str) -> str:
        """
        Send ``prompt_text`` to Gemini and return the raw generated text.

        Raises GenerationError on transport or backend failure and on an
        empty response. The text is returned untouched.
        """
        client = self._get_client()
        logger.info(f"Starting generation with model {self.model_name} ({len(prompt_text)} prompt chars)")

        try:
            response = await asyncio.to_thread(
                client.models.generate_content,
                model=self.model_name,
                contents=prompt_text,
            )
        except Exception as e:
            logger.error(f"Error generating code with Gemini: {str(e)}", exc_info=True)
            raise GenerationError(_backend_message(e)) from e

        text_output = extract_text(response)
        if not text_output:
            logger.error("No text parts found in Gemini response")
            raise GenerationError("Empty response from model")

        logger.info(f"Generated {len(text_output)} characters")
        return text_output


# Global client instance - created on first use
gemini_client = None


def get_gemini_client() -> GeminiClient:
    """Get or create the Gemini client instance"""
    global gemini_client
    if gemini_client is None:
        gemini_client = GeminiClient()
    return gemini_client
