"""
Ancestor matching engine.

This module places a new person in the family tree by matching the names of
their father, grandfather and great-grandfather against existing members,
using Arabic name normalization, known spelling variations, phonetic keys
and fuzzy string matching.
"""

from .config import MatchConfig, DEFAULT_CONFIG
from .name_scorer import (
    MatchType,
    Confidence,
    NameMatchResult,
    comprehensive_name_match,
    calculate_name_similarity,
    names_match,
)
from .ranker import (
    MatchLevel,
    SuggestedAction,
    MatchResult,
    ConfidenceContext,
    ConfidenceRule,
    CONFIDENCE_RULES,
    calculate_candidate_score,
    classify_confidence,
    get_match_level,
    rank_candidates,
)
from .matcher import NameInput, AncestorMatch, MatchCandidate, LineageMatcher, find_matches
from .explain import get_match_explanation, compare_candidates, validate_input

__all__ = [
    'MatchConfig',
    'DEFAULT_CONFIG',
    'MatchType',
    'Confidence',
    'NameMatchResult',
    'comprehensive_name_match',
    'calculate_name_similarity',
    'names_match',
    'MatchLevel',
    'SuggestedAction',
    'MatchResult',
    'ConfidenceContext',
    'ConfidenceRule',
    'CONFIDENCE_RULES',
    'calculate_candidate_score',
    'classify_confidence',
    'get_match_level',
    'rank_candidates',
    'NameInput',
    'AncestorMatch',
    'MatchCandidate',
    'LineageMatcher',
    'find_matches',
    'get_match_explanation',
    'compare_candidates',
    'validate_input',
]
