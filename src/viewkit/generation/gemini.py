"""Gemini generation collaborator."""

import asyncio
from typing import Protocol

import google.generativeai as genai

from ..core.config import Settings
from ..core.logging_config import get_logger
from .errors import GenerationFailedError, MissingCredentialError

logger = get_logger(__name__)


class Generator(Protocol):
    """Anything that turns a system/user prompt pair into reply text."""

    async def generate(self, system: str, user_message: str) -> str: ...


class GeminiGenerator:
    """Gemini API wrapper producing JSON replies."""

    def __init__(self, settings: Settings) -> None:
        if not settings.gemini_api_key:
            raise MissingCredentialError(
                "No Gemini API key configured (set VIEWKIT_GEMINI_API_KEY or GEMINI_API_KEY)"
            )

        genai.configure(api_key=settings.gemini_api_key)
        self.model_name = settings.gemini_model
        self.generation_config = genai.GenerationConfig(
            temperature=settings.gemini_temperature,
            max_output_tokens=settings.gemini_max_tokens,
            response_mime_type="application/json",
        )

        logger.info("model_loaded", model=self.model_name)

    def invoke(self, system: str, user_message: str) -> str:
        """Non-streaming generation."""
        model = genai.GenerativeModel(
            model_name=self.model_name,
            generation_config=self.generation_config,
            system_instruction=system,
        )
        try:
            response = model.generate_content(user_message)
            return response.text
        except Exception as e:
            logger.error("invoke_error", model=self.model_name, error=str(e))
            raise GenerationFailedError(f"Gemini call failed: {e}") from e

    async def generate(self, system: str, user_message: str) -> str:
        """Async generation (runs sync API in thread pool)."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.invoke, system, user_message)
