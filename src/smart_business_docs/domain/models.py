"""Domain models for the planning conversation service."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DomainModel(BaseModel):
    """Base for models that travel over the API in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ConversationStatus(str, Enum):
    """Lifecycle of a planning conversation.

    A conversation moves to READY_FOR_GENERATION when the readiness gate
    passes and back to ACTIVE whenever a later turn does not pass it.
    """

    ACTIVE = "active"
    READY_FOR_GENERATION = "ready_for_generation"


class PlanningSessionStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class Turn(DomainModel):
    """A single conversation turn as supplied by the client."""

    model_config = ConfigDict(frozen=True)

    role: MessageRole = MessageRole.USER
    content: str
    timestamp: datetime = Field(default_factory=utcnow)


class MessageMetadata(DomainModel):
    """Planning details attached to assistant messages."""

    document_types: List[str] = Field(default_factory=list)
    country_context: Optional[str] = None
    research_findings: List[Any] = Field(default_factory=list)
    planning_step: Optional[str] = None
    confidence: int = 0


class Message(Turn):
    """Stored message. Append-only, never edited after creation."""

    id: UUID = Field(default_factory=uuid4)
    conversation_id: UUID
    metadata: Optional[MessageMetadata] = None


class PlanningSession(DomainModel):
    """Snapshot of where the planning dialogue stands, rebuilt every turn."""

    id: str
    business_idea: str
    country: str
    industry: str
    current_step: str
    completed_steps: List[str] = Field(default_factory=list)
    required_documents: List[str] = Field(default_factory=list)
    collected_data: Dict[str, Any] = Field(default_factory=dict)
    research_findings: List[Any] = Field(default_factory=list)
    status: PlanningSessionStatus = PlanningSessionStatus.ACTIVE


class ConversationMetadata(DomainModel):
    mode: str = "advanced"
    country: str = "global"
    planning_session_id: Optional[str] = None
    last_activity: Optional[datetime] = None
    message_count: int = 0
    planning_session: Optional[PlanningSession] = None


class Conversation(DomainModel):
    """Conversation model."""

    id: UUID = Field(default_factory=uuid4)
    user_id: str
    project_id: Optional[UUID] = None
    status: ConversationStatus = ConversationStatus.ACTIVE
    metadata: ConversationMetadata = Field(default_factory=ConversationMetadata)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Project(DomainModel):
    """A user's business project that conversations can be attached to."""

    id: UUID = Field(default_factory=uuid4)
    user_id: str
    name: str
    description: Optional[str] = None
    industry: Optional[str] = None
    country: Optional[str] = None
    stage: str = "discovery"
    confidence: int = 0
    total_tokens: int = 0
    metadata: Dict[str, Any] = Field(default_factory=dict)
    last_activity: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ProjectSummary(DomainModel):
    id: UUID = Field(default_factory=uuid4)
    project_id: UUID
    summary: str
    message_range: Optional[str] = None
    summary_tokens: int = 0
    created_at: datetime = Field(default_factory=utcnow)


class ProjectSession(DomainModel):
    """Per-turn snapshot written by the project auto-save."""

    id: UUID = Field(default_factory=uuid4)
    project_id: UUID
    conversation_id: UUID
    stage: str
    confidence: int
    tokens_used: int = 0
    session_data: Dict[str, Any] = Field(default_factory=dict)
    started_at: datetime = Field(default_factory=utcnow)


class ProjectContext(DomainModel):
    """Read-only project details folded into the consultant prompt."""

    name: str
    description: Optional[str] = None
    industry: Optional[str] = None
    stage: str = "discovery"
    confidence: int = 0
    summaries: List[str] = Field(default_factory=list)
    latest_session_data: Optional[Dict[str, Any]] = None


class BusinessInformation(DomainModel):
    """Topic coverage flags extracted from conversation text."""

    model_config = ConfigDict(frozen=True)

    business_name: bool = False
    business_idea: bool = False
    target_market: bool = False
    industry: bool = False
    location: bool = False
    business_model: bool = False
    competitors: bool = False
    financial_projections: bool = False
    marketing_strategy: bool = False
    operational_plan: bool = False
    risk_assessment: bool = False
    legal_requirements: bool = False

    def has_any(self) -> bool:
        return any(self.model_dump().values())

    def covered(self) -> List[str]:
        return [name for name, flag in self.model_dump().items() if flag]


class ProcessingMetrics(DomainModel):
    total_time_ms: int
    ai_processing_time_ms: int
    gemini_api_time_ms: int
    response_length: int
    response_hash: str
    generated_at: str
    is_genuine_response: bool


class TurnResult(DomainModel):
    """Everything a single advanced-conversation turn produces."""

    message: str
    conversation_id: UUID
    can_generate_document: bool
    planning_session: Optional[PlanningSession] = None
    document_types: List[str] = Field(default_factory=list)
    country_context: str
    research_findings: List[Any] = Field(default_factory=list)
    planning_step: str
    confidence: int
    processing_metrics: ProcessingMetrics
