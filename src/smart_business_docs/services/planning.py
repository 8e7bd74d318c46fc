"""Planning-session snapshot and document readiness rules."""

import re
import time
from typing import List, Optional, Sequence, Tuple

from ..domain.models import BusinessInformation, PlanningSession, Turn
from .prompts import DOCUMENT_TYPES

PLANNING_STEPS: List[str] = [
    "Understanding Business Concept",
    "Market Analysis",
    "Strategic Planning",
    "Financial Planning",
    "Marketing Strategy",
    "Risk Assessment",
    "Final Review",
]

ERROR_RECOVERY_STEP = "Error Recovery"

READY_PHRASES_EN = ("ready to generate", "complete document suite", "comprehensive planning")
READY_PHRASES_AR = ("مستعد لإنشاء", "مجموعة المستندات", "التخطيط الشامل")

# First match wins
INDUSTRY_KEYWORDS: List[Tuple[str, re.Pattern]] = [
    ("Food & Beverage", re.compile(r"coffee|cafe|restaurant|food|bakery|catering|قهوة|مطعم|مقهى|أغذية")),
    ("Technology", re.compile(r"\b(tech|software|app|saas|platform|ai)\b|تقنية|تطبيق|منصة|برمجيات")),
    ("Retail", re.compile(r"retail|\bstore\b|\bshop\b|e-?commerce|متجر|تجزئة")),
    ("Healthcare", re.compile(r"health|clinic|medical|pharma|صحة|عيادة|طبي")),
    ("Education", re.compile(r"education|school|training|course|تعليم|مدرسة|تدريب")),
    ("Finance", re.compile(r"fintech|finance|bank|payment|مالية|بنك")),
    ("Real Estate", re.compile(r"real estate|property|properties|عقار")),
    ("Tourism", re.compile(r"tourism|hotel|travel|سياحة|فندق|سفر")),
    ("Logistics", re.compile(r"logistics|delivery|shipping|توصيل|شحن")),
]

BUSINESS_IDEA_PREVIEW = 50


def planning_step_index(turns: int) -> int:
    return min(turns // 3, len(PLANNING_STEPS) - 1)


def detect_industry(text: str, info: Optional[BusinessInformation] = None) -> str:
    if info is not None and not info.industry:
        return "General"
    lowered = text.lower()
    for industry, pattern in INDUSTRY_KEYWORDS:
        if pattern.search(lowered):
            return industry
    return "General"


def build_planning_session(
    message_history: Sequence[Turn],
    user_message: str,
    country: str,
    info: BusinessInformation,
    confidence: int,
    planning_session_id: Optional[str] = None
) -> PlanningSession:
    """Derive the current planning snapshot from this turn's heuristics."""
    turns = len(message_history) + 1
    step_index = planning_step_index(turns)

    if len(user_message) > BUSINESS_IDEA_PREVIEW:
        business_idea = user_message[:BUSINESS_IDEA_PREVIEW] + "..."
    else:
        business_idea = user_message

    text = " ".join([t.content for t in message_history] + [user_message])
    return PlanningSession(
        id=planning_session_id or f"planning_{int(time.time() * 1000)}",
        business_idea=business_idea,
        country=country,
        industry=detect_industry(text, info),
        current_step=PLANNING_STEPS[step_index],
        completed_steps=PLANNING_STEPS[:step_index],
        required_documents=list(DOCUMENT_TYPES),
        collected_data={
            "messageCount": turns,
            "confidence": confidence,
            "coveredTopics": info.covered(),
        },
    )


def ai_indicates_ready(text: str) -> bool:
    """Whether the model's reply says it can produce the document suite."""
    lowered = text.lower()
    return any(p in lowered for p in READY_PHRASES_EN) or any(p in text for p in READY_PHRASES_AR)


def can_generate_document(
    confidence: int,
    ai_ready: bool,
    ready_threshold: int = 65,
    auto_ready_threshold: int = 80
) -> bool:
    """Heuristic score plus model self-report, or a high enough score alone."""
    return (confidence >= ready_threshold and ai_ready) or confidence >= auto_ready_threshold


def project_stage(confidence: int) -> str:
    if confidence < 30:
        return "discovery"
    if confidence < 65:
        return "planning"
    if confidence < 80:
        return "validation"
    return "ready"
