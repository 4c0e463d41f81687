"""
Pairwise name similarity with tiered match types.

Compares a name stored in the tree with a name typed by the user and
classifies the relationship, first match wins:
1. exact      - identical strings (100)
2. normalized - identical after normalization (95)
3. variation  - known alternate spelling or nickname (85)
4. phonetic   - same consonant skeleton / Metaphone key (75)
5. fuzzy      - Levenshtein similarity on normalized forms (0-100)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any

from rapidfuzz.distance import Levenshtein

from ..utils.arabic_normalizer import (
    normalize_name,
    are_known_variations,
    phonetic_match,
)


class MatchType(Enum):
    """How two names were found to correspond."""
    EXACT = "exact"
    NORMALIZED = "normalized"
    VARIATION = "variation"
    PHONETIC = "phonetic"
    FUZZY = "fuzzy"
    NONE = "none"  # One of the names is empty


class Confidence(Enum):
    """Three-level confidence used for name pairs and for candidates."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Fixed similarity per tier; fuzzy is continuous
EXACT_SIMILARITY = 100
NORMALIZED_SIMILARITY = 95
VARIATION_SIMILARITY = 85
PHONETIC_SIMILARITY = 75

# Fuzzy matches below this are not counted as matches
FUZZY_MATCH_THRESHOLD = 60


@dataclass(frozen=True, slots=True)
class NameMatchResult:
    """Result of comparing two names."""
    is_match: bool
    similarity: float  # 0-100
    match_type: MatchType
    confidence: Confidence

    def __str__(self) -> str:
        status = "match" if self.is_match else "no match"
        return f"{self.match_type.value} ({self.similarity:.0f}%, {status})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'isMatch': self.is_match,
            'similarity': self.similarity,
            'matchType': self.match_type.value,
            'confidence': self.confidence.value,
        }


NO_MATCH = NameMatchResult(
    is_match=False,
    similarity=0,
    match_type=MatchType.NONE,
    confidence=Confidence.LOW,
)


def calculate_name_similarity(name1: str, name2: str) -> float:
    """
    Edit-distance similarity of two names after normalization.

    Returns:
        Score 0-100, rounded to a whole number
    """
    if not name1 or not name2:
        return 0

    norm1 = normalize_name(name1)
    norm2 = normalize_name(name2)

    if norm1 == norm2:
        return 100

    return round(Levenshtein.normalized_similarity(norm1, norm2) * 100)


def names_match(name1: str, name2: str, threshold: float = 80) -> bool:
    """Check if two names match with a configurable similarity threshold."""
    return calculate_name_similarity(name1, name2) >= threshold


def comprehensive_name_match(tree_name: str, input_name: str) -> NameMatchResult:
    """
    Compare a stored name against a user-entered name.

    Args:
        tree_name: First name of a member already in the tree
        input_name: Name supplied by the user

    Returns:
        NameMatchResult for the first tier that applies
    """
    if not tree_name or not input_name:
        return NO_MATCH

    if tree_name == input_name:
        return NameMatchResult(True, EXACT_SIMILARITY, MatchType.EXACT, Confidence.HIGH)

    if normalize_name(tree_name) == normalize_name(input_name):
        return NameMatchResult(True, NORMALIZED_SIMILARITY, MatchType.NORMALIZED, Confidence.HIGH)

    if are_known_variations(tree_name, input_name):
        return NameMatchResult(True, VARIATION_SIMILARITY, MatchType.VARIATION, Confidence.HIGH)

    if phonetic_match(tree_name, input_name):
        return NameMatchResult(True, PHONETIC_SIMILARITY, MatchType.PHONETIC, Confidence.MEDIUM)

    similarity = calculate_name_similarity(tree_name, input_name)
    return NameMatchResult(
        is_match=similarity >= FUZZY_MATCH_THRESHOLD,
        similarity=similarity,
        match_type=MatchType.FUZZY,
        confidence=Confidence.LOW,
    )
