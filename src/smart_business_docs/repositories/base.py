"""Base repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from ..domain.models import (
    Conversation,
    Message,
    Project,
    ProjectSession,
    ProjectSummary,
)


class Repository(ABC):
    """Abstract base class for repositories."""

    @abstractmethod
    async def get_conversation(self, conversation_id: UUID, user_id: str) -> Optional[Conversation]:
        """Retrieve a conversation owned by the given user."""
        pass

    @abstractmethod
    async def create_conversation(self, conversation: Conversation) -> Conversation:
        """Store a new conversation."""
        pass

    @abstractmethod
    async def update_conversation(self, conversation: Conversation) -> Conversation:
        """Replace the stored status and metadata of a conversation."""
        pass

    @abstractmethod
    async def add_message(self, message: Message) -> Message:
        """Append a message to a conversation."""
        pass

    @abstractmethod
    async def get_messages(
        self, conversation_id: UUID, limit: int = 100, offset: int = 0
    ) -> List[Message]:
        """Get messages for a conversation with pagination."""
        pass

    @abstractmethod
    async def create_project(self, project: Project) -> Project:
        pass

    @abstractmethod
    async def get_project(self, project_id: UUID, user_id: str) -> Optional[Project]:
        """Retrieve a project owned by the given user."""
        pass

    @abstractmethod
    async def update_project(self, project: Project) -> Project:
        pass

    @abstractmethod
    async def add_project_summary(self, summary: ProjectSummary) -> ProjectSummary:
        pass

    @abstractmethod
    async def get_project_summaries(self, project_id: UUID, limit: int = 3) -> List[ProjectSummary]:
        """Newest summaries first."""
        pass

    @abstractmethod
    async def add_project_session(self, session: ProjectSession) -> ProjectSession:
        pass

    @abstractmethod
    async def get_latest_project_session(self, project_id: UUID) -> Optional[ProjectSession]:
        pass
