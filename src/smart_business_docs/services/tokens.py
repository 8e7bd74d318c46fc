"""Rough token accounting for project usage."""

import math
from typing import Dict, Iterable

from ..domain.models import Turn

# Active-token budgets per subscription tier
TIER_LIMITS: Dict[str, int] = {
    "FREE": 4000,
    "HOBBY": 6000,
    "PROFESSIONAL": 8000,
    "BUSINESS": 12000,
    "ENTERPRISE": 16000,
}

ROLE_OVERHEAD_TOKENS = 4


def estimate_tokens(text: str) -> int:
    """About four characters per token."""
    return math.ceil(len(text) / 4)


def estimate_messages_tokens(messages: Iterable[Turn]) -> int:
    return sum(estimate_tokens(m.content) + ROLE_OVERHEAD_TOKENS for m in messages)


def usage_percentage(used_tokens: int, tier: str) -> float:
    limit = TIER_LIMITS.get(tier, TIER_LIMITS["FREE"])
    return min(100.0, used_tokens / limit * 100)


def usage_status(used_tokens: int, tier: str) -> str:
    percentage = usage_percentage(used_tokens, tier)
    if percentage >= 90:
        return "critical"
    if percentage >= 75:
        return "warning"
    return "safe"
