"""HTTP routes for planning conversations and projects."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from structlog import get_logger

from ..domain.models import Message, Project, ProjectSummary, TurnResult
from ..repositories.base import Repository
from ..services.orchestrator import ConversationOrchestrator
from ..services.tokens import estimate_tokens
from .auth import get_current_user_id
from .dependencies import get_orchestrator, get_repository
from .schemas import AdvancedConversationRequest, ProjectCreate, ProjectSummaryCreate

logger = get_logger()

router = APIRouter(prefix="/api")


def parse_identifier(value: Optional[str], field: str) -> Optional[UUID]:
    """Lenient id parsing: unknown formats are treated as absent."""
    if not value:
        return None
    try:
        return UUID(value)
    except ValueError:
        logger.warning("invalid_identifier_ignored", field=field, value=value)
        return None


@router.post("/chat/advanced-conversation", response_model=TurnResult)
async def advanced_conversation(
    payload: AdvancedConversationRequest,
    user_id: str = Depends(get_current_user_id),
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator)
) -> TurnResult:
    """
    Runs one planning turn: stores the user message, scores the gathered
    business information, asks the consultant model and stores its reply.
    """
    if not payload.message or not payload.message.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message is required")

    try:
        return await orchestrator.handle(
            user_id=user_id,
            message=payload.message,
            country=payload.country,
            message_history=payload.message_history,
            conversation_id=parse_identifier(payload.conversation_id, "conversationId"),
            planning_session_id=payload.planning_session_id,
            project_id=parse_identifier(payload.project_id, "projectId"),
            mode=payload.mode
        )
    except Exception as e:
        logger.error("advanced_conversation_error", user_id=user_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process advanced conversation"
        )


@router.get("/chat/conversations/{conversation_id}/messages", response_model=List[Message])
async def get_messages(
    conversation_id: UUID,
    limit: int = Query(100, ge=1),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(get_current_user_id),
    repository: Repository = Depends(get_repository)
) -> List[Message]:
    """Gets paginated message history for an owned conversation"""
    conversation = await repository.get_conversation(conversation_id, user_id)
    if conversation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conversation not found")
    return await repository.get_messages(conversation_id, limit=limit, offset=offset)


@router.post("/projects", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: ProjectCreate,
    user_id: str = Depends(get_current_user_id),
    repository: Repository = Depends(get_repository)
) -> Project:
    if not payload.name or not payload.name.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Project name is required")

    project = Project(
        user_id=user_id,
        name=payload.name.strip(),
        description=payload.description.strip() if payload.description else None,
        industry=payload.industry,
        country=payload.country
    )
    return await repository.create_project(project)


@router.get("/projects/{project_id}", response_model=Project)
async def get_project(
    project_id: UUID,
    user_id: str = Depends(get_current_user_id),
    repository: Repository = Depends(get_repository)
) -> Project:
    project = await repository.get_project(project_id, user_id)
    if project is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project


@router.post(
    "/projects/{project_id}/summaries",
    response_model=ProjectSummary,
    status_code=status.HTTP_201_CREATED
)
async def add_project_summary(
    project_id: UUID,
    payload: ProjectSummaryCreate,
    user_id: str = Depends(get_current_user_id),
    repository: Repository = Depends(get_repository)
) -> ProjectSummary:
    """Stores a conversation summary that later turns use as project context"""
    project = await repository.get_project(project_id, user_id)
    if project is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")

    summary = ProjectSummary(
        project_id=project_id,
        summary=payload.summary,
        message_range=payload.message_range,
        summary_tokens=estimate_tokens(payload.summary)
    )
    return await repository.add_project_summary(summary)
