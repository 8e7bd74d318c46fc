"""Request bodies accepted by the HTTP API."""

from typing import List, Optional

from pydantic import Field

from ..domain.models import DomainModel, Turn


class AdvancedConversationRequest(DomainModel):
    """Body of POST /api/chat/advanced-conversation.

    `message` is optional here so that a missing or blank message can be
    answered with 400 instead of a validation error.
    """

    message: Optional[str] = None
    conversation_id: Optional[str] = None
    planning_session_id: Optional[str] = None
    project_id: Optional[str] = None
    country: str = "global"
    mode: str = "advanced"
    message_history: List[Turn] = Field(default_factory=list)


class ProjectCreate(DomainModel):
    name: Optional[str] = None
    description: Optional[str] = None
    industry: Optional[str] = None
    country: Optional[str] = None


class ProjectSummaryCreate(DomainModel):
    summary: str
    message_range: Optional[str] = None
