"""Generative AI client used for consultant replies."""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import google.generativeai as genai
import structlog
from google.api_core import exceptions

from ..domain.errors import LLMError

logger = structlog.get_logger()

DEFAULT_MODEL = "gemini-1.5-flash"


@dataclass(frozen=True)
class Generation:
    """Raw model output plus how long the provider call took."""

    text: str
    duration_ms: int


def is_api_key_error(message: str) -> bool:
    lowered = message.lower()
    return "api key" in lowered or "api_key" in lowered


class LLMClient(ABC):
    """Anything that turns a prompt into text."""

    @abstractmethod
    async def generate(self, prompt: str) -> Generation:
        """Return the model reply, raising LLMError on provider failure."""
        pass


class GeminiClient(LLMClient):
    """LLM client backed by Google's Gemini models.

    Built once at application start-up and handed to the orchestrator, so
    tests can swap in their own LLMClient.
    """

    def __init__(self, api_key: Optional[str], model_name: str = DEFAULT_MODEL):
        self.api_key = api_key
        self.model_name = model_name
        if api_key:
            genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name)
        logger.info("llm_client_init", model=model_name, api_key_configured=bool(api_key))

    async def generate(self, prompt: str) -> Generation:
        if not self.api_key:
            raise LLMError("GEMINI_API_KEY is not configured", is_api_key_error=True)

        start = time.perf_counter()
        try:
            response = await self.model.generate_content_async(prompt)
            text = response.text
        except exceptions.ResourceExhausted as e:
            logger.warning("gemini_quota_exhausted", model=self.model_name)
            raise LLMError(str(e)) from e
        except Exception as e:
            raise LLMError(str(e), is_api_key_error=is_api_key_error(str(e))) from e

        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.info(
            "llm_generation_complete",
            model=self.model_name,
            duration_ms=duration_ms,
            prompt_length=len(prompt),
            response_length=len(text)
        )
        return Generation(text=text, duration_ms=duration_ms)
