"""Test suite for consultant prompt assembly."""

from smart_business_docs.domain.models import MessageRole, ProjectContext, Turn
from smart_business_docs.services.prompts import PromptBuilder, detect_language


def test_detect_language():
    assert detect_language("I want to open a bakery") == "en"
    assert detect_language("أريد فتح مخبز") == "ar"
    assert detect_language("My shop name is مقهى الصباح") == "ar"
    assert detect_language("") == "en"


def test_saudi_market_focus():
    prompt = PromptBuilder().build([], "I want to open a bakery", "saudi-arabia")

    assert "Saudi Arabian market and regulatory environment" in prompt
    assert "global market context" not in prompt


def test_global_market_focus():
    prompt = PromptBuilder().build([], "I want to open a bakery", "global")
    assert "global market context" in prompt


def test_prompt_sections_in_order():
    history = [
        Turn(role=MessageRole.USER, content="I sell handmade soap"),
        Turn(role=MessageRole.ASSISTANT, content="Who buys it today?"),
    ]
    prompt = PromptBuilder().build(history, "Mostly tourists", "global")

    stages = prompt.index("Advanced Planning Stages:")
    transcript = prompt.index("Previous conversation:")
    current = prompt.index("Current user message: Mostly tourists")
    guidelines = prompt.index("Guidelines:")

    assert stages < transcript < current < guidelines
    assert "User: I sell handmade soap" in prompt
    assert "Assistant: Who buys it today?" in prompt
    assert "BRD, PRD, Business Plan, Feasibility Study, Investor Pitch" in prompt


def test_empty_history_has_no_transcript():
    prompt = PromptBuilder().build([], "Hello", "global")
    assert "Previous conversation:" not in prompt


def test_project_context_block():
    context = ProjectContext(
        name="BeanBox",
        description="Coffee subscription",
        industry="Food & Beverage",
        stage="planning",
        confidence=42,
        summaries=["Discussed pricing tiers"],
        latest_session_data={"planningStep": "Market Analysis"}
    )
    prompt = PromptBuilder().build([], "What next?", "global", project_context=context)

    assert "Project context:" in prompt
    assert "- Name: BeanBox" in prompt
    assert "- Stage: planning" in prompt
    assert "- Confidence: 42%" in prompt
    assert "* Discussed pricing tiers" in prompt
    assert "Market Analysis" in prompt
    assert prompt.index("Project context:") < prompt.index("Advanced Planning Stages:")


def test_arabic_prompt():
    prompt = PromptBuilder().build([], "أريد فتح مقهى", "saudi-arabia")

    assert "السوق السعودي والبيئة التنظيمية" in prompt
    assert "مراحل التخطيط المتقدم:" in prompt
    assert "Advanced Planning Stages:" not in prompt


def test_explicit_language_overrides_detection():
    prompt = PromptBuilder().build([], "Hello", "global", language="ar")
    assert "رسالة المستخدم الحالية: Hello" in prompt
