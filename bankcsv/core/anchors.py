"""
Bank hint matching against profile keywords, exact first then fuzzy.
"""
from typing import List, Optional
from rapidfuzz import fuzz
import logging

logger = logging.getLogger(__name__)

FUZZY_THRESHOLD = 85

# Short keywords such as FNB score too easily against unrelated text
MIN_FUZZY_KEYWORD_LENGTH = 5


class KeywordMatch:
    """Represents a hint matched to a profile keyword with its confidence."""
    def __init__(self, keyword: str, confidence: float, hint: str):
        self.keyword = keyword
        self.confidence = confidence
        self.hint = hint

    def __repr__(self):
        return f"KeywordMatch('{self.keyword}', confidence={self.confidence:.1f}, hint='{self.hint}')"

    @property
    def exact(self) -> bool:
        return self.confidence >= 100.0


def contains_keyword(hint: str, keywords: List[str]) -> Optional[KeywordMatch]:
    """
    Case-insensitive containment of any keyword in the hint.

    Args:
        hint: Free text supplied by the user, e.g. "ABSA savings"
        keywords: Profile hint keywords

    Returns:
        KeywordMatch with confidence 100, or None
    """
    upper = hint.upper()
    for keyword in keywords:
        if keyword.upper() in upper:
            return KeywordMatch(keyword, 100.0, hint)
    return None


def fuzzy_keyword(hint: str, keywords: List[str], fuzzy_threshold: float = FUZZY_THRESHOLD) -> Optional[KeywordMatch]:
    """
    Find the best keyword that approximately occurs in the hint.

    Catches misspellings such as "Standrd" for STANDARD. Keywords shorter than
    MIN_FUZZY_KEYWORD_LENGTH are only ever matched exactly.

    Args:
        hint: Free text supplied by the user
        keywords: Profile hint keywords
        fuzzy_threshold: Minimum confidence score (0-100)

    Returns:
        KeywordMatch if found, None otherwise
    """
    best_match = None
    best_confidence = 0

    for keyword in keywords:
        if len(keyword) < MIN_FUZZY_KEYWORD_LENGTH:
            continue

        confidence = fuzz.partial_ratio(hint.lower(), keyword.lower())

        if confidence > best_confidence and confidence >= fuzzy_threshold:
            best_confidence = confidence
            best_match = KeywordMatch(keyword, confidence, hint)

    return best_match

