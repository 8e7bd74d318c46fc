"""Heuristic confidence score for how much business information has been gathered."""

import math
import re
from typing import Dict, Optional, Sequence

from ..domain.models import BusinessInformation, Turn
from .extractor import BusinessInformationExtractor, KeywordBusinessInformationExtractor

# Totals 120 rather than 100; the multiplier cap and the 95 ceiling were tuned
# against this total.
CATEGORY_WEIGHTS: Dict[str, int] = {
    "business_idea": 20,
    "target_market": 15,
    "financial_projections": 15,
    "business_model": 12,
    "industry": 10,
    "business_name": 8,
    "location": 8,
    "competitors": 8,
    "marketing_strategy": 8,
    "operational_plan": 8,
    "risk_assessment": 5,
    "legal_requirements": 3,
}

MAX_CONFIDENCE = 95
MAX_QUALITY_BONUS = 10
GREETING_CAP = 2
MAX_CONVERSATION_BONUS = 5

GREETING_WORDS = [
    "hi", "hello", "hey", "hiya", "howdy", "greetings", "salam", "salaam",
    "good morning", "good afternoon", "good evening", "good day",
    "there", "all", "everyone", "team",
    "مرحبا", "مرحباً", "السلام عليكم", "أهلا", "أهلاً", "اهلا", "صباح الخير", "مساء الخير",
]
ACKNOWLEDGEMENT_WORDS = [
    "thanks", "thank you", "thx", "ok", "okay", "yes", "no", "yep", "nope", "sure",
    "cool", "great", "got it", "fine", "please", "so much", "very much", "a lot",
    "شكرا", "شكراً", "جزيلا", "جزيلاً", "نعم", "لا", "حسنا", "حسناً", "تمام",
]

_SEPARATOR = r"[\s!.,?؟،]"
# Longest first so "okay" is not read as "ok" followed by junk
_SMALL_TALK_WORD = "|".join(
    re.escape(word) for word in sorted(GREETING_WORDS + ACKNOWLEDGEMENT_WORDS, key=len, reverse=True)
)

# One or more greeting or acknowledgement words and nothing else,
# e.g. "hi", "ok thanks", "Hello there, thank you so much!"
SMALL_TALK_PATTERN = re.compile(
    rf"^(?:{_SMALL_TALK_WORD})(?:{_SEPARATOR}+(?:{_SMALL_TALK_WORD}))*{_SEPARATOR}*$",
    re.IGNORECASE,
)


def weighted_sum(info: BusinessInformation) -> int:
    """Sum of the weights of every covered category."""
    flags = info.model_dump()
    return sum(weight for name, weight in CATEGORY_WEIGHTS.items() if flags.get(name))


def quality_multiplier(current_message: str) -> float:
    length = len(current_message)
    if length < 20:
        return 0.7
    if length > 100:
        return 1.2
    return 1.0


def is_small_talk(current_message: str) -> bool:
    """Greetings, bare acknowledgements and near-empty messages."""
    text = current_message.strip()
    return len(text) < 5 or bool(SMALL_TALK_PATTERN.match(text))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ConfidenceScorer:
    """Combines topic coverage, message quality and conversation length.

    The small-talk check runs before the conversation bonus is added, so a
    one-word "ok" after a detailed description cannot keep a high score.
    """

    def __init__(self, extractor: Optional[BusinessInformationExtractor] = None):
        self.extractor = extractor or KeywordBusinessInformationExtractor()

    def score(
        self,
        info: BusinessInformation,
        message_history: Sequence[Turn],
        current_message: str
    ) -> int:
        raw = weighted_sum(info)
        bonus = min(raw * quality_multiplier(current_message) - raw, MAX_QUALITY_BONUS)
        score = raw + bonus

        if is_small_talk(current_message):
            prior = self.extractor.analyze(message_history, "")
            if not prior.has_any():
                return 0
            return self._clamp(min(score, GREETING_CAP))

        score += min(len(message_history) * 0.5, MAX_CONVERSATION_BONUS)
        return self._clamp(score)

    @staticmethod
    def _clamp(score: float) -> int:
        return max(0, min(round_half_up(score), MAX_CONFIDENCE))
