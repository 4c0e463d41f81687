"""
Candidate scoring, confidence classification and ranking.

Combines per-level name similarity into one weighted score, assigns a match
level and a confidence, orders candidates and picks the suggested action.

Scoring weights (defaults, renormalized over evaluated levels):
- Father: 40
- Grandfather: 35
- Great-grandfather: 25
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, TYPE_CHECKING, Dict, Any

from .config import MatchConfig
from .name_scorer import Confidence, MatchType, NameMatchResult

if TYPE_CHECKING:
    from .matcher import MatchCandidate


class MatchLevel(Enum):
    """Score band of a candidate."""
    EXACT = "exact"    # >= 95
    HIGH = "high"      # 80 - 94
    MEDIUM = "medium"  # 60 - 79
    LOW = "low"        # < 60


class SuggestedAction(Enum):
    """What the caller should do with a match result."""
    CONFIRM = "confirm"
    SELECT = "select"
    MANUAL = "manual"
    NO_MATCH = "no_match"


EXACT_LEVEL_SCORE = 95
HIGH_LEVEL_SCORE = 80
MEDIUM_LEVEL_SCORE = 60

STRONG_FATHER_TYPES = frozenset({MatchType.EXACT, MatchType.NORMALIZED})
ALTERNATE_FATHER_TYPES = frozenset({MatchType.VARIATION, MatchType.PHONETIC})


def calculate_candidate_score(
    father_match: NameMatchResult,
    grandfather_match: Optional[NameMatchResult],
    great_grandfather_match: Optional[NameMatchResult],
    config: MatchConfig
) -> float:
    """
    Weighted average of the evaluated ancestor levels.

    A level passed as None was not evaluated and contributes neither score
    nor weight, so a father-only candidate is not penalized.

    Returns:
        Score 0-100, rounded to one decimal
    """
    total = father_match.similarity * config.father_weight
    weight = config.father_weight

    if grandfather_match is not None:
        total += grandfather_match.similarity * config.grandfather_weight
        weight += config.grandfather_weight

    if great_grandfather_match is not None:
        total += great_grandfather_match.similarity * config.great_grandfather_weight
        weight += config.great_grandfather_weight

    return round(total / weight, 1)


def get_match_level(score: float) -> MatchLevel:
    """Map a composite score to its level."""
    if score >= EXACT_LEVEL_SCORE:
        return MatchLevel.EXACT
    if score >= HIGH_LEVEL_SCORE:
        return MatchLevel.HIGH
    if score >= MEDIUM_LEVEL_SCORE:
        return MatchLevel.MEDIUM
    return MatchLevel.LOW


@dataclass(frozen=True, slots=True)
class ConfidenceContext:
    """Facts the confidence rules are evaluated against."""
    score: float
    father_match_type: MatchType
    grandfather_corroborated: bool = False
    great_grandfather_corroborated: bool = False

    @property
    def any_corroborated(self) -> bool:
        return self.grandfather_corroborated or self.great_grandfather_corroborated

    @property
    def all_corroborated(self) -> bool:
        return self.grandfather_corroborated and self.great_grandfather_corroborated


@dataclass(frozen=True, slots=True)
class ConfidenceRule:
    """One row of the confidence decision table."""
    name: str
    applies: Callable[[ConfidenceContext], bool]
    outcome: Confidence


# Evaluated top to bottom; first rule that applies wins
CONFIDENCE_RULES = (
    ConfidenceRule(
        'strong_father_corroborated',
        lambda c: c.father_match_type in STRONG_FATHER_TYPES and c.any_corroborated,
        Confidence.HIGH,
    ),
    ConfidenceRule(
        'strong_father_high_score',
        lambda c: c.father_match_type in STRONG_FATHER_TYPES and c.score >= 90,
        Confidence.HIGH,
    ),
    ConfidenceRule(
        'strong_father_uncorroborated',
        lambda c: c.father_match_type in STRONG_FATHER_TYPES,
        Confidence.MEDIUM,
    ),
    ConfidenceRule(
        'alternate_father_fully_corroborated',
        lambda c: c.father_match_type in ALTERNATE_FATHER_TYPES and c.all_corroborated,
        Confidence.HIGH,
    ),
    ConfidenceRule(
        'alternate_father',
        lambda c: c.father_match_type in ALTERNATE_FATHER_TYPES,
        Confidence.MEDIUM,
    ),
    ConfidenceRule(
        'fuzzy_father_adequate_score',
        lambda c: c.score >= 70,
        Confidence.MEDIUM,
    ),
    ConfidenceRule(
        'fuzzy_father',
        lambda c: True,
        Confidence.LOW,
    ),
)


def classify_confidence(context: ConfidenceContext) -> Confidence:
    """Apply the confidence decision table."""
    return match_confidence_rule(context).outcome


def match_confidence_rule(context: ConfidenceContext) -> ConfidenceRule:
    """Return the first confidence rule that applies to the context."""
    for rule in CONFIDENCE_RULES:
        if rule.applies(context):
            return rule
    # The last rule always applies
    return CONFIDENCE_RULES[-1]


def ranking_key(candidate: 'MatchCandidate'):
    """
    Sort key for candidates.

    Higher score first; ties go to the candidate with more corroborated
    ancestor levels, then to the lexicographically smallest father id.
    """
    return (-candidate.match_score, -candidate.corroborated_levels, candidate.father_id)


def rank_candidates(candidates: List['MatchCandidate']) -> List['MatchCandidate']:
    """Return candidates in ranking order (input is not modified)."""
    return sorted(candidates, key=ranking_key)


@dataclass
class MatchResult:
    """Outcome of one matching request."""
    exact_matches: List['MatchCandidate'] = field(default_factory=list)
    high_matches: List['MatchCandidate'] = field(default_factory=list)
    medium_matches: List['MatchCandidate'] = field(default_factory=list)
    low_matches: List['MatchCandidate'] = field(default_factory=list)
    all_matches: List['MatchCandidate'] = field(default_factory=list)

    suggested_action: SuggestedAction = SuggestedAction.NO_MATCH
    needs_verification: bool = False
    message: str = ''
    message_ar: str = ''

    @property
    def has_matches(self) -> bool:
        return bool(self.all_matches)

    @property
    def match_count(self) -> int:
        return len(self.all_matches)

    @property
    def best_match(self) -> Optional['MatchCandidate']:
        return self.all_matches[0] if self.all_matches else None

    def __str__(self) -> str:
        """Human-readable summary."""
        return (
            f"{self.match_count} candidate(s): "
            f"{len(self.exact_matches)} exact, {len(self.high_matches)} high, "
            f"{len(self.medium_matches)} medium, {len(self.low_matches)} low "
            f"-> {self.suggested_action.value}"
        )

    def to_dict(self) -> Dict[str, Any]:
        best = self.best_match
        return {
            'exactMatches': [c.to_dict() for c in self.exact_matches],
            'highMatches': [c.to_dict() for c in self.high_matches],
            'mediumMatches': [c.to_dict() for c in self.medium_matches],
            'lowMatches': [c.to_dict() for c in self.low_matches],
            'allMatches': [c.to_dict() for c in self.all_matches],
            'hasMatches': self.has_matches,
            'matchCount': self.match_count,
            'bestMatch': best.to_dict() if best else None,
            'suggestedAction': self.suggested_action.value,
            'needsVerification': self.needs_verification,
            'message': self.message,
            'messageAr': self.message_ar,
        }


def build_match_result(candidates: List['MatchCandidate']) -> MatchResult:
    """
    Rank candidates, bucket them by match level and choose an action.

    Args:
        candidates: Scored candidates that passed all thresholds

    Returns:
        MatchResult with buckets, action and bilingual message
    """
    ranked = rank_candidates(candidates)
    result = MatchResult(
        exact_matches=[c for c in ranked if c.match_level == MatchLevel.EXACT],
        high_matches=[c for c in ranked if c.match_level == MatchLevel.HIGH],
        medium_matches=[c for c in ranked if c.match_level == MatchLevel.MEDIUM],
        low_matches=[c for c in ranked if c.match_level == MatchLevel.LOW],
        all_matches=ranked,
    )
    _suggest_action(result)
    return result


def _suggest_action(result: MatchResult) -> None:
    exact = len(result.exact_matches)
    high = len(result.high_matches)
    medium = len(result.medium_matches)

    if exact == 1:
        result.suggested_action = SuggestedAction.CONFIRM
        result.message = 'Exact match found. Please confirm the placement.'
        result.message_ar = 'تم العثور على تطابق تام. الرجاء تأكيد الموقع.'
    elif exact > 1:
        result.suggested_action = SuggestedAction.SELECT
        result.message = f'Found {exact} possible matches. Please select the correct one.'
        result.message_ar = f'تم العثور على {exact} تطابقات محتملة. الرجاء اختيار الصحيح.'
    elif high == 1:
        result.suggested_action = SuggestedAction.CONFIRM
        result.message = 'High confidence match found. Please confirm the placement.'
        result.message_ar = 'تم العثور على تطابق بثقة عالية. الرجاء تأكيد الموقع.'
    elif high > 1 or medium > 0:
        count = high + medium
        result.suggested_action = SuggestedAction.SELECT
        result.message = f'Found {count} possible matches. Please select the correct one.'
        result.message_ar = f'تم العثور على {count} تطابقات محتملة. الرجاء اختيار الصحيح.'
    elif result.all_matches:
        result.suggested_action = SuggestedAction.SELECT
        result.needs_verification = True
        result.message = 'Low confidence matches found. Please verify carefully.'
        result.message_ar = 'تم العثور على تطابقات بثقة منخفضة. الرجاء التحقق بعناية.'
    else:
        result.suggested_action = SuggestedAction.NO_MATCH
        result.message = 'No matches found. Please navigate the family tree manually.'
        result.message_ar = 'لم يتم العثور على تطابقات. الرجاء التنقل في شجرة العائلة يدوياً.'
