"""Keyword based detection of the business topics a conversation has covered."""

import re
from abc import ABC, abstractmethod
from typing import Dict, Pattern, Sequence

from ..domain.models import BusinessInformation, Turn

# One pattern per BusinessInformation flag. Matching is plain substring/regex
# over the lowercased conversation, so unrelated mentions (e.g. "cost") count.
BUSINESS_PATTERNS: Dict[str, Pattern[str]] = {
    "business_name": re.compile(
        r"\b(called|named|name is|brand name|company name|business name)\b"
        r"|اسم (الشركة|المشروع|العلامة)|يسمى|اسمه"
    ),
    "business_idea": re.compile(
        r"\b(business|idea|startup|start-up|start a|launch|open a|want to (start|build|create|open)"
        r"|company|venture|app|platform|service|product|shop|store|restaurant|cafe)\b"
        r"|مشروع|فكرة|شركة|تطبيق|منصة|متجر|مطعم"
    ),
    "target_market": re.compile(
        r"\b(target|targeting|customers?|clients?|audience|users?|market segment|demographics?"
        r"|professionals|students|families|young|youth|consumers?|smes?)\b"
        r"|العملاء|الجمهور|المستهدف|الفئة|الشباب|المستخدمين"
    ),
    "industry": re.compile(
        r"\b(industry|sector|tech|technology|retail|food|coffee|restaurant|healthcare|health"
        r"|education|fintech|finance|real estate|tourism|e-?commerce|logistics|manufacturing"
        r"|saas|hospitality)\b"
        r"|قطاع|صناعة|مجال|تقنية|تجزئة|أغذية|قهوة|صحة|تعليم|سياحة"
    ),
    "location": re.compile(
        r"\b(riyadh|jeddah|dammam|mecca|makkah|medina|khobar|saudi|ksa|dubai|uae|cairo"
        r"|city|location|located|area|mall|downtown|region|neighborhood)\b"
        r"|الرياض|جدة|الدمام|مكة|المدينة|السعودية|موقع|منطقة|مدينة"
    ),
    "business_model": re.compile(
        r"subscription|\bb2b\b|\bb2c\b|marketplace|freemium|revenue|pricing|\bmodel\b"
        r"|how\b.*\bmake\b.*\bmoney|profit"
        r"|اشتراك|إيرادات|تسعير|نموذج|ربح"
    ),
    "competitors": re.compile(
        r"competitor|competition|\bcompet(e|ing)\b|\brivals?\b|\balternatives?\b|similar to|market leader"
        r"|منافس|المنافسة"
    ),
    "financial_projections": re.compile(
        r"budget|cost|\bprice|investment|invest|funding|capital|\$|\bsar\b|riyal|dollar"
        r"|forecast|break-?even|\broi\b|\d+\s*k\b|\d{4,}"
        r"|ميزانية|تكلفة|استثمار|تمويل|رأس المال|ريال"
    ),
    "marketing_strategy": re.compile(
        r"marketing|advertis|promot|social media|instagram|tiktok|\bseo\b|campaign"
        r"|brand awareness|influencer"
        r"|تسويق|إعلان|ترويج|وسائل التواصل"
    ),
    "operational_plan": re.compile(
        r"\b(operations?|operational|staff|employees?|hire|hiring|team|supply|suppliers?"
        r"|logistics|inventory|workflow|process|equipment)\b"
        r"|تشغيل|موظفين|فريق|موردين|مخزون"
    ),
    "risk_assessment": re.compile(
        r"\brisks?\b|\bchallenges?\b|\bthreats?\b|mitigat|uncertain|contingency"
        r"|مخاطر|تحديات|تهديد"
    ),
    "legal_requirements": re.compile(
        r"legal|licen[cs]e|\bpermits?\b|regulat|compliance|\blaws?\b|contract|trademark"
        r"|commercial registration"
        r"|ترخيص|رخصة|قانون|تنظيم|سجل تجاري"
    ),
}


def conversation_text(message_history: Sequence[Turn], current_message: str) -> str:
    """Concatenate prior turns and the newest message into one lowercase string."""
    parts = [turn.content for turn in message_history]
    parts.append(current_message)
    return " ".join(parts).lower()


class BusinessInformationExtractor(ABC):
    """Maps conversation text to business topic coverage flags."""

    @abstractmethod
    def analyze(self, message_history: Sequence[Turn], current_message: str) -> BusinessInformation:
        pass


class KeywordBusinessInformationExtractor(BusinessInformationExtractor):
    """Regex rules over the whole conversation, one independent test per flag."""

    def __init__(self, patterns: Dict[str, Pattern[str]] = BUSINESS_PATTERNS):
        self.patterns = patterns

    def analyze(self, message_history: Sequence[Turn], current_message: str) -> BusinessInformation:
        text = conversation_text(message_history, current_message)
        flags = {name: bool(pattern.search(text)) for name, pattern in self.patterns.items()}
        return BusinessInformation(**flags)
