"""Test suite for the confidence scorer."""

from itertools import product

from smart_business_docs.domain.models import BusinessInformation, Turn
from smart_business_docs.services.extractor import KeywordBusinessInformationExtractor
from smart_business_docs.services.scoring import (
    CATEGORY_WEIGHTS,
    ConfidenceScorer,
    is_small_talk,
    quality_multiplier,
    weighted_sum,
)

FLAG_NAMES = list(CATEGORY_WEIGHTS)
MEDIUM_MESSAGE = "We need a plan for our new neighbourhood bakery idea"
LONG_MESSAGE = "x" * 120


def score_text(history, message):
    extractor = KeywordBusinessInformationExtractor()
    info = extractor.analyze(history, message)
    return ConfidenceScorer(extractor).score(info, history, message)


def test_greeting_without_history_scores_zero():
    assert score_text([], "hi") == 0
    assert score_text([], "Hello there!") == 0
    assert score_text([], "مرحبا") == 0


def test_greeting_after_business_details_is_capped():
    history = [Turn(content="I want to open a coffee shop in Riyadh")]
    assert score_text(history, "hello") == 2


def test_acknowledgement_after_detailed_pitch_drops(coffee_shop_message):
    """A bare "ok" must not keep the score of the detailed message before it."""
    history = [Turn(content=coffee_shop_message)]
    assert score_text(history, "ok") <= 2
    assert score_text(history, "Thanks!") <= 2


def test_combined_acknowledgements_after_detailed_pitch_drop(coffee_shop_message):
    history = [Turn(content=coffee_shop_message)]
    replies = [
        "ok thanks",
        "Ok, thank you!",
        "yes please",
        "thank you so much",
        "okay sure",
        "hi there, thanks",
        "Thanks, ok",
        "شكرا جزيلا",
    ]

    for reply in replies:
        assert is_small_talk(reply), reply
        assert score_text(history, reply) <= 2, reply


def test_acknowledgement_words_inside_real_answer_still_score():
    assert not is_small_talk("yes, we target students in Riyadh")
    assert not is_small_talk("ok so the budget is 50000 SAR")


def test_very_short_message_counts_as_small_talk():
    assert is_small_talk("shop")
    assert score_text([], "shop") == 0


def test_coffee_shop_scenario(coffee_shop_message):
    info = KeywordBusinessInformationExtractor().analyze([], coffee_shop_message)

    assert weighted_sum(info) == 80
    assert score_text([], coffee_shop_message) == 90


def test_weight_table_total():
    assert sum(CATEGORY_WEIGHTS.values()) == 120


def test_quality_multiplier_bands():
    assert quality_multiplier("short message") == 0.7
    assert quality_multiplier(MEDIUM_MESSAGE) == 1.0
    assert quality_multiplier(LONG_MESSAGE) == 1.2


def test_short_message_reduces_score():
    info = BusinessInformation(business_idea=True, industry=True)
    assert ConfidenceScorer().score(info, [], "need advice now!") == 21


def test_long_message_bonus_is_capped():
    scorer = ConfidenceScorer()
    assert scorer.score(BusinessInformation(business_idea=True), [], LONG_MESSAGE) == 24

    info = BusinessInformation(
        business_idea=True,
        target_market=True,
        financial_projections=True,
        business_model=True,
        industry=True,
        location=True
    )
    assert scorer.score(info, [], LONG_MESSAGE) == 90


def test_conversation_bonus_grows_then_caps():
    scorer = ConfidenceScorer()
    info = BusinessInformation(business_idea=True, target_market=True)

    assert scorer.score(info, [], MEDIUM_MESSAGE) == 35
    assert scorer.score(info, [Turn(content="a")] * 4, MEDIUM_MESSAGE) == 37
    assert scorer.score(info, [Turn(content="a")] * 20, MEDIUM_MESSAGE) == 40


def test_score_never_exceeds_ceiling():
    info = BusinessInformation(**{name: True for name in FLAG_NAMES})
    history = [Turn(content="a")] * 30
    assert ConfidenceScorer().score(info, history, LONG_MESSAGE) == 95


def test_score_always_within_bounds():
    scorer = ConfidenceScorer()
    messages = ["hi", "need advice now!", MEDIUM_MESSAGE, LONG_MESSAGE]
    histories = [[], [Turn(content="a")] * 30]

    for flags in product([False, True], repeat=len(FLAG_NAMES)):
        info = BusinessInformation(**dict(zip(FLAG_NAMES, flags)))
        for message in messages:
            for history in histories:
                assert 0 <= scorer.score(info, history, message) <= 95


def test_more_topics_never_lower_weighted_sum():
    for flags in product([False, True], repeat=len(FLAG_NAMES)):
        base = dict(zip(FLAG_NAMES, flags))
        before = weighted_sum(BusinessInformation(**base))
        for name in FLAG_NAMES:
            if not base[name]:
                after = weighted_sum(BusinessInformation(**{**base, name: True}))
                assert after >= before
