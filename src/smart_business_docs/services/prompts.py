"""Consultant prompt assembly in English and Arabic."""

import json
import re
from typing import List, Optional, Sequence

from ..domain.models import MessageRole, ProjectContext, Turn

ARABIC_PATTERN = re.compile(r"[\u0600-\u06FF\u0750-\u077F]")

SAUDI_ARABIA = "saudi-arabia"

DOCUMENT_TYPES: List[str] = ["BRD", "PRD", "Business Plan", "Feasibility Study", "Investor Pitch"]


def detect_language(text: str) -> str:
    """Return "ar" when the text contains Arabic script, otherwise "en"."""
    return "ar" if ARABIC_PATTERN.search(text) else "en"


_ENGLISH = {
    "market_saudi": "Saudi Arabian market and regulatory environment",
    "market_global": "global market context",
    "preamble": (
        "You are an advanced business consultant specializing in comprehensive business "
        "planning with focus on {market}.\n\n"
        "Your goal: Guide the user through a comprehensive planning process to create a "
        "complete suite of professional documents."
    ),
    "project_header": "Project context:",
    "project_name": "Name",
    "project_description": "Description",
    "project_industry": "Industry",
    "project_stage": "Stage",
    "project_confidence": "Confidence",
    "project_summaries": "Previous conversation summaries",
    "project_session": "Latest session data",
    "stages_header": "Advanced Planning Stages:",
    "stages": [
        "Understanding business idea and vision",
        "Market analysis and target audience",
        "Strategic planning and competitive advantage",
        "Financial modeling and projections",
        "Marketing and operations plan",
        "Risk analysis and mitigation",
        "Comprehensive review and suite generation",
    ],
    "history_header": "Previous conversation:",
    "user_label": "User",
    "assistant_label": "Assistant",
    "current_message": "Current user message:",
    "guidelines_header": "Guidelines:",
    "guidelines": [
        "Ask deep, specific questions about every aspect of the business",
        "Provide strategic insights based on the specified market",
        "Gather enough information to create: {documents}",
        "Indicate when you're ready to generate the complete document suite",
    ],
    "closing": "Please respond professionally and comprehensively.",
}

_ARABIC = {
    "market_saudi": "السوق السعودي والبيئة التنظيمية",
    "market_global": "السوق العالمي",
    "preamble": (
        "أنت مستشار أعمال متقدم متخصص في التخطيط الشامل للأعمال مع التركيز على {market}.\n\n"
        "هدفك: إرشاد المستخدم عبر عملية تخطيط شاملة لإنشاء مجموعة كاملة من الوثائق المهنية."
    ),
    "project_header": "سياق المشروع:",
    "project_name": "الاسم",
    "project_description": "الوصف",
    "project_industry": "القطاع",
    "project_stage": "المرحلة",
    "project_confidence": "الثقة",
    "project_summaries": "ملخصات المحادثات السابقة",
    "project_session": "بيانات الجلسة الأخيرة",
    "stages_header": "مراحل التخطيط المتقدم:",
    "stages": [
        "فهم الفكرة التجارية والرؤية",
        "تحليل السوق والجمهور المستهدف",
        "التخطيط الاستراتيجي والميزة التنافسية",
        "النمذجة المالية والتوقعات",
        "خطة التسويق والعمليات",
        "تحليل المخاطر والحلول",
        "مراجعة شاملة وإنشاء المجموعة",
    ],
    "history_header": "المحادثة السابقة:",
    "user_label": "المستخدم",
    "assistant_label": "المساعد",
    "current_message": "رسالة المستخدم الحالية:",
    "guidelines_header": "الإرشادات:",
    "guidelines": [
        "اسأل أسئلة عميقة ومحددة حول كل جانب من جوانب الأعمال",
        "قدم رؤى استراتيجية بناءً على السوق المحدد",
        "اجمع معلومات كافية لإنشاء: {documents}",
        "أشر عندما تكون مستعداً لإنشاء مجموعة المستندات الكاملة",
    ],
    "closing": "يرجى الرد بشكل مهني ومتقدم.",
}

_ARABIC_DOCUMENT_TYPES = ["BRD", "PRD", "خطة العمل", "دراسة الجدوى", "عرض المستثمرين"]


class PromptBuilder:
    """Builds the single text prompt sent to the consultant model."""

    def build(
        self,
        history: Sequence[Turn],
        user_message: str,
        country: str,
        project_context: Optional[ProjectContext] = None,
        language: Optional[str] = None
    ) -> str:
        language = language or detect_language(user_message)
        text = _ARABIC if language == "ar" else _ENGLISH
        market = text["market_saudi"] if country == SAUDI_ARABIA else text["market_global"]

        sections = [text["preamble"].format(market=market)]

        if project_context is not None:
            sections.append(self._project_block(project_context, text))

        stages = "\n".join(f"{i}. {stage}" for i, stage in enumerate(text["stages"], start=1))
        sections.append(f"{text['stages_header']}\n{stages}")

        transcript = self._transcript(history, text)
        if transcript:
            sections.append(f"{text['history_header']}\n{transcript}")

        sections.append(f"{text['current_message']} {user_message}")

        documents = ", ".join(_ARABIC_DOCUMENT_TYPES if language == "ar" else DOCUMENT_TYPES)
        guidelines = "\n".join(
            f"- {line.format(documents=documents)}" for line in text["guidelines"]
        )
        sections.append(f"{text['guidelines_header']}\n{guidelines}")
        sections.append(text["closing"])

        return "\n\n".join(sections)

    @staticmethod
    def _transcript(history: Sequence[Turn], text: dict) -> str:
        lines = []
        for turn in history:
            label = text["user_label"] if turn.role == MessageRole.USER else text["assistant_label"]
            lines.append(f"{label}: {turn.content}")
        return "\n".join(lines)

    @staticmethod
    def _project_block(context: ProjectContext, text: dict) -> str:
        lines = [text["project_header"], f"- {text['project_name']}: {context.name}"]
        if context.description:
            lines.append(f"- {text['project_description']}: {context.description}")
        if context.industry:
            lines.append(f"- {text['project_industry']}: {context.industry}")
        lines.append(f"- {text['project_stage']}: {context.stage}")
        lines.append(f"- {text['project_confidence']}: {context.confidence}%")
        if context.summaries:
            lines.append(f"{text['project_summaries']}:")
            lines.extend(f"  * {summary}" for summary in context.summaries)
        if context.latest_session_data:
            session = json.dumps(context.latest_session_data, ensure_ascii=False, default=str)
            lines.append(f"{text['project_session']}: {session}")
        return "\n".join(lines)
