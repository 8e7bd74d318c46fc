"""Shared fixtures: settings, a scripted LLM client and an app wired to both."""

from typing import List, Optional

import pytest

from smart_business_docs.api.app import create_app
from smart_business_docs.api.auth import create_access_token
from smart_business_docs.config import Settings
from smart_business_docs.repositories.memory import InMemoryRepository
from smart_business_docs.services.llm import Generation, LLMClient

COFFEE_SHOP_MESSAGE = (
    "I want to start a coffee shop targeting young professionals in Riyadh mall area, "
    "subscription model with monthly coffee boxes, initial budget $50000 SAR"
)


class FakeLLMClient(LLMClient):
    """Returns a canned reply, or raises the configured error."""

    def __init__(self, reply: str = "Tell me more about your customers.", error: Optional[Exception] = None,
                 duration_ms: int = 420):
        self.reply = reply
        self.error = error
        self.duration_ms = duration_ms
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> Generation:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return Generation(text=self.reply, duration_ms=self.duration_ms)


@pytest.fixture
def coffee_shop_message() -> str:
    return COFFEE_SHOP_MESSAGE


@pytest.fixture
def settings() -> Settings:
    return Settings(
        gemini_api_key=None,
        jwt_secret="test-secret",
        rate_limit=1000,
        rate_limit_window=60
    )


@pytest.fixture
def repository() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def app(settings, repository, llm):
    return create_app(settings=settings, repository=repository, llm_client=llm)


@pytest.fixture
def auth_headers(settings) -> dict:
    return {"Authorization": f"Bearer {create_access_token('user-1', settings)}"}
