"""FastAPI dependencies resolving the collaborators stored on app.state."""

from fastapi import Depends, Request

from ..config import Settings
from ..repositories.base import Repository
from ..services.llm import LLMClient
from ..services.orchestrator import ConversationOrchestrator


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_repository(request: Request) -> Repository:
    """Returns the conversation storage instance"""
    return request.app.state.repository


def get_llm_client(request: Request) -> LLMClient:
    """Returns the client created at start-up or injected by the caller"""
    client = request.app.state.llm_client
    if client is None:
        raise RuntimeError("LLM client has not been initialised")
    return client


def get_orchestrator(
    repository: Repository = Depends(get_repository),
    llm_client: LLMClient = Depends(get_llm_client),
    settings: Settings = Depends(get_app_settings)
) -> ConversationOrchestrator:
    return ConversationOrchestrator(repository, llm_client, settings)
