"""Test suite for planning snapshots, readiness rules and token accounting."""

from itertools import product

from smart_business_docs.domain.models import BusinessInformation, Turn
from smart_business_docs.services.planning import (
    PLANNING_STEPS,
    ai_indicates_ready,
    build_planning_session,
    can_generate_document,
    detect_industry,
    project_stage,
)
from smart_business_docs.services.tokens import (
    estimate_messages_tokens,
    estimate_tokens,
    usage_percentage,
    usage_status,
)


def test_readiness_gate_rules():
    for confidence, ai_ready in product(range(0, 96), [False, True]):
        expected = (confidence >= 65 and ai_ready) or confidence >= 80
        assert can_generate_document(confidence, ai_ready) == expected

    assert not can_generate_document(64, True)
    assert can_generate_document(65, True)
    assert not can_generate_document(79, False)
    assert can_generate_document(80, False)


def test_readiness_thresholds_are_configurable():
    assert can_generate_document(50, True, ready_threshold=50, auto_ready_threshold=90)
    assert not can_generate_document(85, False, ready_threshold=50, auto_ready_threshold=90)


def test_ai_indicates_ready():
    assert ai_indicates_ready("I'm READY TO GENERATE your documents.")
    assert ai_indicates_ready("We can now build the complete document suite.")
    assert ai_indicates_ready("أنا مستعد لإنشاء المستندات")
    assert not ai_indicates_ready("Tell me more about your customers.")


def test_planning_steps_advance_every_three_turns():
    info = BusinessInformation(business_idea=True)

    first = build_planning_session([], "Idea", "global", info, 20)
    assert first.current_step == "Understanding Business Concept"
    assert first.completed_steps == []

    history = [Turn(content="a")] * 5
    third = build_planning_session(history, "More", "global", info, 20)
    assert third.current_step == "Strategic Planning"
    assert third.completed_steps == PLANNING_STEPS[:2]

    late = build_planning_session([Turn(content="a")] * 40, "More", "global", info, 20)
    assert late.current_step == "Final Review"


def test_planning_session_fields(coffee_shop_message):
    info = BusinessInformation(business_idea=True, industry=True, location=True)
    session = build_planning_session([], coffee_shop_message, "saudi-arabia", info, 90, "planning_42")

    assert session.id == "planning_42"
    assert session.business_idea == coffee_shop_message[:50] + "..."
    assert session.industry == "Food & Beverage"
    assert session.country == "saudi-arabia"
    assert session.required_documents == ["BRD", "PRD", "Business Plan", "Feasibility Study", "Investor Pitch"]
    assert session.collected_data == {
        "messageCount": 1,
        "confidence": 90,
        "coveredTopics": ["business_idea", "industry", "location"],
    }


def test_planning_session_generates_id():
    session = build_planning_session([], "short idea", "global", BusinessInformation(), 0)

    assert session.id.startswith("planning_")
    assert session.business_idea == "short idea"


def test_detect_industry():
    info = BusinessInformation(industry=True)

    assert detect_industry("we build a SaaS platform", info) == "Technology"
    assert detect_industry("a small clinic", info) == "Healthcare"
    assert detect_industry("a coffee shop", info) == "Food & Beverage"
    assert detect_industry("something else", info) == "General"
    assert detect_industry("a coffee shop", BusinessInformation()) == "General"


def test_project_stage():
    assert project_stage(0) == "discovery"
    assert project_stage(29) == "discovery"
    assert project_stage(30) == "planning"
    assert project_stage(64) == "planning"
    assert project_stage(65) == "validation"
    assert project_stage(80) == "ready"


def test_token_estimates():
    assert estimate_tokens("") == 0
    assert estimate_tokens("abcd") == 1
    assert estimate_tokens("abcde") == 2
    assert estimate_messages_tokens([Turn(content="abcd"), Turn(content="abcdefgh")]) == 11


def test_token_usage_status():
    assert usage_status(1000, "FREE") == "safe"
    assert usage_status(3000, "FREE") == "warning"
    assert usage_status(3600, "FREE") == "critical"
    assert usage_status(3600, "ENTERPRISE") == "safe"
    assert usage_percentage(10000, "FREE") == 100.0
    assert usage_percentage(2000, "UNKNOWN") == 50.0
