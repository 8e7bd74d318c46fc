"""In-memory repository implementation."""

import asyncio
from typing import Dict, List, Optional
from uuid import UUID
import structlog

from ..domain.errors import ConversationNotFound, ProjectNotFound
from ..domain.models import (
    Conversation,
    Message,
    Project,
    ProjectSession,
    ProjectSummary,
    utcnow,
)
from .base import Repository

logger = structlog.get_logger()


class InMemoryRepository(Repository):
    """Async-safe in-memory store for conversations, messages and projects."""

    def __init__(self) -> None:
        self._conversations: Dict[UUID, Conversation] = {}
        self._messages: Dict[UUID, List[Message]] = {}
        self._projects: Dict[UUID, Project] = {}
        self._summaries: Dict[UUID, List[ProjectSummary]] = {}
        self._sessions: Dict[UUID, List[ProjectSession]] = {}
        self._lock = asyncio.Lock()
        logger.info("repository_initialized", backend="memory")

    async def get_conversation(self, conversation_id: UUID, user_id: str) -> Optional[Conversation]:
        async with self._lock:
            conversation = self._conversations.get(conversation_id)
            if conversation is None or conversation.user_id != user_id:
                logger.warning("conversation_not_found", conversation_id=str(conversation_id))
                return None
            return conversation

    async def create_conversation(self, conversation: Conversation) -> Conversation:
        async with self._lock:
            self._conversations[conversation.id] = conversation
            self._messages[conversation.id] = []
            logger.info("conversation_created", conversation_id=str(conversation.id))
        return conversation

    async def update_conversation(self, conversation: Conversation) -> Conversation:
        async with self._lock:
            if conversation.id not in self._conversations:
                raise ConversationNotFound(conversation.id)
            updated = conversation.model_copy(update={"updated_at": utcnow()})
            self._conversations[conversation.id] = updated
            logger.info(
                "conversation_updated",
                conversation_id=str(conversation.id),
                status=updated.status.value
            )
            return updated

    async def add_message(self, message: Message) -> Message:
        async with self._lock:
            if message.conversation_id not in self._conversations:
                logger.error(
                    "conversation_not_found_for_message",
                    conversation_id=str(message.conversation_id)
                )
                raise ConversationNotFound(message.conversation_id)

            self._messages.setdefault(message.conversation_id, []).append(message)
            logger.info(
                "message_added",
                conversation_id=str(message.conversation_id),
                message_role=message.role.value
            )
            return message

    async def get_messages(
        self, conversation_id: UUID, limit: int = 100, offset: int = 0
    ) -> List[Message]:
        async with self._lock:
            if conversation_id not in self._conversations:
                logger.error(
                    "conversation_not_found_for_messages",
                    conversation_id=str(conversation_id)
                )
                raise ConversationNotFound(conversation_id)

            messages = sorted(self._messages.get(conversation_id, []), key=lambda m: m.timestamp)
            return messages[offset : offset + limit]

    async def create_project(self, project: Project) -> Project:
        async with self._lock:
            self._projects[project.id] = project
            logger.info("project_created", project_id=str(project.id))
        return project

    async def get_project(self, project_id: UUID, user_id: str) -> Optional[Project]:
        async with self._lock:
            project = self._projects.get(project_id)
            if project is None or project.user_id != user_id:
                return None
            return project

    async def update_project(self, project: Project) -> Project:
        async with self._lock:
            if project.id not in self._projects:
                raise ProjectNotFound(project.id)
            updated = project.model_copy(update={"updated_at": utcnow()})
            self._projects[project.id] = updated
            return updated

    async def add_project_summary(self, summary: ProjectSummary) -> ProjectSummary:
        async with self._lock:
            if summary.project_id not in self._projects:
                raise ProjectNotFound(summary.project_id)
            self._summaries.setdefault(summary.project_id, []).append(summary)
            return summary

    async def get_project_summaries(self, project_id: UUID, limit: int = 3) -> List[ProjectSummary]:
        async with self._lock:
            summaries = self._summaries.get(project_id, [])
            return list(reversed(summaries))[:limit]

    async def add_project_session(self, session: ProjectSession) -> ProjectSession:
        async with self._lock:
            if session.project_id not in self._projects:
                raise ProjectNotFound(session.project_id)
            self._sessions.setdefault(session.project_id, []).append(session)
            return session

    async def get_latest_project_session(self, project_id: UUID) -> Optional[ProjectSession]:
        async with self._lock:
            sessions = self._sessions.get(project_id)
            if not sessions:
                return None
            return sessions[-1]
