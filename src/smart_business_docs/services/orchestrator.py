"""Advanced planning conversation: one request in, one consultant reply out.

Per turn, in order:

1. find or create the conversation
2. load project context (best effort)
3. store the user message
4. extract topics, score confidence, build the prompt, call the model
5. store the assistant message
6. update conversation status and metadata
7. auto-save project progress (best effort)

Steps 3 to 7 are not wrapped in a transaction. Concurrent turns on one
conversation are not serialized; the last metadata write wins.
"""

import time
from dataclasses import dataclass
from typing import Optional, Sequence
from uuid import UUID

import structlog

from ..config import Settings
from ..domain.errors import LLMError
from ..domain.models import (
    Conversation,
    ConversationMetadata,
    ConversationStatus,
    Message,
    MessageMetadata,
    MessageRole,
    PlanningSession,
    ProcessingMetrics,
    Project,
    ProjectContext,
    ProjectSession,
    Turn,
    TurnResult,
    utcnow,
)
from ..domain.results import Outcome
from ..observability import DOCUMENTS_READY, LLM_FAILURES, LLM_LATENCY
from ..repositories.base import Repository
from .extractor import BusinessInformationExtractor, KeywordBusinessInformationExtractor
from .llm import LLMClient, is_api_key_error
from .planning import (
    ERROR_RECOVERY_STEP,
    ai_indicates_ready,
    build_planning_session,
    can_generate_document,
    project_stage,
)
from .prompts import DOCUMENT_TYPES, PromptBuilder, detect_language
from .scoring import ConfidenceScorer
from .tokens import estimate_messages_tokens, usage_status

logger = structlog.get_logger()

FALLBACK_MESSAGES = {
    "en": "I'm having trouble connecting to the advanced planning system right now. Can you please try again?",
    "ar": "أواجه مشكلة في الاتصال بنظام التخطيط المتقدم حالياً. هل يمكنك المحاولة مرة أخرى؟",
}

PROJECT_SUMMARY_LIMIT = 3
RESPONSE_HASH_LENGTH = 32


@dataclass
class ConsultantReply:
    message: str
    confidence: int
    can_generate_document: bool
    planning_session: Optional[PlanningSession]
    metadata: MessageMetadata
    llm_time_ms: int = 0
    failed: bool = False


class ConversationOrchestrator:
    """Runs a single advanced-conversation turn against injected collaborators."""

    def __init__(
        self,
        repository: Repository,
        llm_client: LLMClient,
        settings: Settings,
        extractor: Optional[BusinessInformationExtractor] = None,
        scorer: Optional[ConfidenceScorer] = None,
        prompt_builder: Optional[PromptBuilder] = None
    ):
        self.repository = repository
        self.llm_client = llm_client
        self.settings = settings
        self.extractor = extractor or KeywordBusinessInformationExtractor()
        self.scorer = scorer or ConfidenceScorer(self.extractor)
        self.prompt_builder = prompt_builder or PromptBuilder()

    async def handle(
        self,
        user_id: str,
        message: str,
        country: str = "global",
        message_history: Sequence[Turn] = (),
        conversation_id: Optional[UUID] = None,
        planning_session_id: Optional[str] = None,
        project_id: Optional[UUID] = None,
        mode: str = "advanced"
    ) -> TurnResult:
        started = time.perf_counter()
        history = list(message_history)

        conversation = await self._find_or_create_conversation(
            user_id, conversation_id, project_id, country, planning_session_id, mode
        )

        project_context = None
        if project_id is not None:
            context = await self.load_project_context(project_id, user_id)
            if context.ok:
                project_context = context.value

        user_message = Message(conversation_id=conversation.id, role=MessageRole.USER, content=message)
        await self.repository.add_message(user_message)

        ai_started = time.perf_counter()
        reply = await self._consult(history, message, country, project_context, planning_session_id)
        ai_time_ms = int((time.perf_counter() - ai_started) * 1000)

        assistant_message = Message(
            conversation_id=conversation.id,
            role=MessageRole.ASSISTANT,
            content=reply.message,
            metadata=reply.metadata
        )
        await self.repository.add_message(assistant_message)

        status = (
            ConversationStatus.READY_FOR_GENERATION
            if reply.can_generate_document
            else ConversationStatus.ACTIVE
        )
        metadata = conversation.metadata.model_copy(update={
            "last_activity": utcnow(),
            "message_count": len(history) + 2,
            "planning_session": reply.planning_session,
        })
        conversation = await self.repository.update_conversation(
            conversation.model_copy(update={"status": status, "metadata": metadata})
        )

        if project_id is not None and not reply.failed:
            await self.autosave_project(
                project_id,
                user_id,
                conversation.id,
                reply,
                estimate_messages_tokens([user_message, assistant_message])
            )

        total_time_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            "advanced_conversation_processed",
            conversation_id=str(conversation.id),
            confidence=reply.confidence,
            can_generate_document=reply.can_generate_document,
            total_time_ms=total_time_ms
        )

        return TurnResult(
            message=reply.message,
            conversation_id=conversation.id,
            can_generate_document=reply.can_generate_document,
            planning_session=reply.planning_session,
            document_types=reply.metadata.document_types,
            country_context=country,
            research_findings=reply.metadata.research_findings,
            planning_step=reply.metadata.planning_step,
            confidence=reply.confidence,
            processing_metrics=ProcessingMetrics(
                total_time_ms=total_time_ms,
                ai_processing_time_ms=ai_time_ms,
                gemini_api_time_ms=reply.llm_time_ms,
                response_length=len(reply.message),
                response_hash=reply.message[:RESPONSE_HASH_LENGTH],
                generated_at=utcnow().isoformat(),
                # Diagnostic only
                is_genuine_response=total_time_ms > 500 and reply.llm_time_ms > 300,
            ),
        )

    async def _find_or_create_conversation(
        self,
        user_id: str,
        conversation_id: Optional[UUID],
        project_id: Optional[UUID],
        country: str,
        planning_session_id: Optional[str],
        mode: str
    ) -> Conversation:
        if conversation_id is not None:
            conversation = await self.repository.get_conversation(conversation_id, user_id)
            if conversation is not None:
                return conversation

        conversation = Conversation(
            user_id=user_id,
            project_id=project_id,
            metadata=ConversationMetadata(
                mode=mode,
                country=country,
                planning_session_id=planning_session_id
            )
        )
        return await self.repository.create_conversation(conversation)

    async def _consult(
        self,
        history: Sequence[Turn],
        message: str,
        country: str,
        project_context: Optional[ProjectContext],
        planning_session_id: Optional[str]
    ) -> ConsultantReply:
        language = detect_language(message)
        info = self.extractor.analyze(history, message)
        confidence = self.scorer.score(info, history, message)
        prompt = self.prompt_builder.build(history, message, country, project_context, language)

        try:
            generation = await self.llm_client.generate(prompt)
        except Exception as e:
            api_key_problem = e.is_api_key_error if isinstance(e, LLMError) else is_api_key_error(str(e))
            if api_key_problem:
                logger.error("llm_api_key_invalid", error=str(e))
                LLM_FAILURES.labels(reason="api_key").inc()
            else:
                logger.error("llm_generation_failed", error=str(e))
                LLM_FAILURES.labels(reason="provider").inc()
            return self._fallback_reply(language, country)

        LLM_LATENCY.observe(generation.duration_ms / 1000)

        ready = can_generate_document(
            confidence,
            ai_indicates_ready(generation.text),
            self.settings.ready_confidence_threshold,
            self.settings.auto_ready_confidence_threshold
        )
        if ready:
            DOCUMENTS_READY.inc()

        planning_session = build_planning_session(
            history, message, country, info, confidence, planning_session_id
        )
        return ConsultantReply(
            message=generation.text,
            confidence=confidence,
            can_generate_document=ready,
            planning_session=planning_session,
            metadata=MessageMetadata(
                document_types=list(DOCUMENT_TYPES),
                country_context=country,
                planning_step=planning_session.current_step,
                confidence=confidence
            ),
            llm_time_ms=generation.duration_ms
        )

    @staticmethod
    def _fallback_reply(language: str, country: str) -> ConsultantReply:
        return ConsultantReply(
            message=FALLBACK_MESSAGES.get(language, FALLBACK_MESSAGES["en"]),
            confidence=0,
            can_generate_document=False,
            planning_session=None,
            metadata=MessageMetadata(
                country_context=country,
                planning_step=ERROR_RECOVERY_STEP,
                confidence=0
            ),
            failed=True
        )

    async def load_project_context(self, project_id: UUID, user_id: str) -> Outcome[ProjectContext]:
        """Project details for the prompt. Failure means "no context"."""
        try:
            project = await self.repository.get_project(project_id, user_id)
            if project is None:
                logger.warning("project_context_unavailable", project_id=str(project_id))
                return Outcome.failure(f"Project {project_id} not found")
            summaries = await self.repository.get_project_summaries(project_id, PROJECT_SUMMARY_LIMIT)
            session = await self.repository.get_latest_project_session(project_id)
        except Exception as e:
            logger.error("project_context_load_failed", project_id=str(project_id), error=str(e))
            return Outcome.failure(str(e))

        return Outcome.success(ProjectContext(
            name=project.name,
            description=project.description,
            industry=project.industry,
            stage=project.stage,
            confidence=project.confidence,
            summaries=[s.summary for s in summaries],
            latest_session_data=session.session_data if session else None,
        ))

    async def autosave_project(
        self,
        project_id: UUID,
        user_id: str,
        conversation_id: UUID,
        reply: ConsultantReply,
        tokens: int
    ) -> Outcome[Project]:
        """Write stage, confidence and token usage back to the project."""
        stage = project_stage(reply.confidence)
        try:
            project = await self.repository.get_project(project_id, user_id)
            if project is None:
                logger.warning("project_autosave_skipped", project_id=str(project_id))
                return Outcome.failure(f"Project {project_id} not found")

            now = utcnow()
            project = await self.repository.update_project(project.model_copy(update={
                "stage": stage,
                "confidence": reply.confidence,
                "total_tokens": project.total_tokens + tokens,
                "last_activity": now,
            }))
            await self.repository.add_project_session(ProjectSession(
                project_id=project_id,
                conversation_id=conversation_id,
                stage=stage,
                confidence=reply.confidence,
                tokens_used=tokens,
                session_data={
                    "planningStep": reply.metadata.planning_step,
                    "canGenerateDocument": reply.can_generate_document,
                    "lastSaved": now.isoformat(),
                },
            ))
        except Exception as e:
            logger.error("project_autosave_failed", project_id=str(project_id), error=str(e))
            return Outcome.failure(str(e))

        token_status = usage_status(project.total_tokens, project.metadata.get("tier", "FREE"))
        if token_status != "safe":
            logger.warning(
                "project_token_usage_high",
                project_id=str(project_id),
                total_tokens=project.total_tokens,
                status=token_status
            )
        logger.info("project_autosaved", project_id=str(project_id), stage=stage)
        return Outcome.success(project)
