"""
Generation backend adapter.
Wraps the Gemini SDK behind a small async interface that returns raw text.
"""

import asyncio
import logging
from typing import Any, Optional, Protocol

import google.generativeai as genai
from google.generativeai.types import GenerationConfig

from errors import GenerationFailure

logger = logging.getLogger(__name__)


class GenerationClient(Protocol):
    """Anything that turns a directive into raw text"""

    async def generate(self, prompt: str, max_output_tokens: int) -> str: ...


def extract_gemini_text(gemini_raw: Any) -> str:
    """
    Extract text content from Gemini response object.

    Prefers a candidate that finished with STOP, then the first candidate with
    any text, then the response-level .text accessor.

    Args:
        gemini_raw: Raw Gemini API response object

    Returns:
        Extracted text content as string

    Raises:
        ValueError: If no text content can be extracted
    """
    gemini_text = ""

    if getattr(gemini_raw, "candidates", None):
        fallback_text = ""
        for candidate in gemini_raw.candidates:
            content = getattr(candidate, "content", None)
            if not content or not getattr(content, "parts", None):
                continue
            candidate_text = "".join(getattr(part, "text", "") or "" for part in content.parts)
            finish_reason = getattr(candidate, "finish_reason", None)
            # SDK versions report finish_reason as an enum or a plain string
            if getattr(finish_reason, "name", finish_reason) == "STOP" and candidate_text:
                gemini_text = candidate_text
                break
            if not fallback_text:
                fallback_text = candidate_text
        if not gemini_text:
            gemini_text = fallback_text

    if not gemini_text:
        try:
            gemini_text = gemini_raw.text
        except Exception:
            gemini_text = ""

    if not gemini_text:
        raise ValueError("Gemini did not return any content")

    return str(gemini_text)


class GeminiGenerationClient:
    """
    Shared, stateless Gemini handle created once at startup.

    The SDK call is blocking, so it runs in the default executor. No retry and
    no timeout beyond the transport default.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str,
        model: Optional[Any] = None,
        temperature: float = 0.7,
    ):
        if model is None:
            genai.configure(api_key=api_key)
            model = genai.GenerativeModel(model_name)
        self.model_name = model_name
        self.temperature = temperature
        self._model = model

    def _generate_sync(self, prompt: str, max_output_tokens: int) -> Any:
        generation_config = GenerationConfig(
            temperature=self.temperature,
            max_output_tokens=max_output_tokens,
        )
        return self._model.generate_content(prompt, generation_config=generation_config)

    async def generate(self, prompt: str, max_output_tokens: int) -> str:
        """
        Send the directive and return the raw text output.

        Raises:
            GenerationFailure: If the API call errors or returns no content
        """
        loop = asyncio.get_running_loop()
        try:
            gemini_raw = await loop.run_in_executor(
                None, self._generate_sync, prompt, max_output_tokens
            )
        except Exception as e:
            logger.error(
                '{"event": "gemini_call_error", "model": "%s", "error": "%s"}',
                self.model_name,
                str(e).replace('"', '\\"'),
            )
            raise GenerationFailure(f"Gemini API error: {e}") from e

        if getattr(gemini_raw, "prompt_feedback", None):
            logger.debug(
                '{"event": "gemini_prompt_feedback", "feedback": "%s"}',
                str(gemini_raw.prompt_feedback).replace('"', '\\"'),
            )

        try:
            return extract_gemini_text(gemini_raw)
        except ValueError as e:
            logger.error(
                '{"event": "gemini_empty_response", "model": "%s"}',
                self.model_name,
            )
            raise GenerationFailure(str(e)) from e
