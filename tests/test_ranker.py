"""
Tests for candidate scoring, confidence rules, ranking and suggested actions.
"""

import pytest

from nasabmatch.core.member import FamilyMember
from nasabmatch.matching.config import MatchConfig, DEFAULT_CONFIG
from nasabmatch.matching.matcher import AncestorMatch, MatchCandidate
from nasabmatch.matching.name_scorer import (
    Confidence,
    MatchType,
    NameMatchResult,
    comprehensive_name_match,
)
from nasabmatch.matching.ranker import (
    ConfidenceContext,
    MatchLevel,
    SuggestedAction,
    build_match_result,
    calculate_candidate_score,
    classify_confidence,
    get_match_level,
    match_confidence_rule,
    rank_candidates,
)


def name_result(similarity, match_type=MatchType.FUZZY, is_match=True):
    return NameMatchResult(is_match, similarity, match_type, Confidence.LOW)


def make_candidate(father_id, score, grandfather_matched=None):
    """Minimal candidate; grandfather_matched None means not evaluated."""
    father = FamilyMember(id=father_id, first_name='ابراهيم', generation=2)
    father_match = AncestorMatch(
        input_name='ابراهيم',
        matched_name='ابراهيم',
        matched_member=father,
        match_result=comprehensive_name_match('ابراهيم', 'ابراهيم'),
        generation=2,
    )
    grandfather_match = None
    if grandfather_matched is not None:
        grandfather = FamilyMember(id=f'{father_id}-GF', first_name='حمد')
        grandfather_match = AncestorMatch(
            input_name='حمد' if grandfather_matched else 'زكريا',
            matched_name='حمد',
            matched_member=grandfather,
            match_result=comprehensive_name_match('حمد', 'حمد' if grandfather_matched else 'زكريا'),
            generation=1,
        )
    return MatchCandidate(
        father_id=father_id,
        father=father,
        match_score=score,
        match_level=get_match_level(score),
        confidence=Confidence.HIGH,
        father_match=father_match,
        grandfather_match=grandfather_match,
    )


class TestCalculateCandidateScore:
    """Tests for the weighted score."""

    def test_father_only_is_not_penalized(self):
        assert calculate_candidate_score(name_result(85), None, None, DEFAULT_CONFIG) == 85

    def test_all_levels(self):
        score = calculate_candidate_score(
            name_result(100), name_result(100), name_result(100), DEFAULT_CONFIG
        )
        assert score == 100

    def test_weighted_average_over_evaluated_levels(self):
        # (100 * 40 + 0 * 35) / 75
        score = calculate_candidate_score(name_result(100), name_result(0), None, DEFAULT_CONFIG)
        assert score == pytest.approx(53.3)

    def test_great_grandfather_without_grandfather(self):
        # (80 * 40 + 60 * 25) / 65 = 72.3
        score = calculate_candidate_score(name_result(80), None, name_result(60), DEFAULT_CONFIG)
        assert score == pytest.approx(72.3)

    def test_custom_weights(self):
        config = MatchConfig(father_weight=1, grandfather_weight=1)
        score = calculate_candidate_score(name_result(90), name_result(70), None, config)
        assert score == 80

    def test_score_within_bounds(self):
        score = calculate_candidate_score(name_result(0), name_result(0), name_result(0), DEFAULT_CONFIG)
        assert score == 0


class TestMatchLevel:
    """Tests for score bands."""

    @pytest.mark.parametrize('score, level', [
        (100, MatchLevel.EXACT),
        (95, MatchLevel.EXACT),
        (94.9, MatchLevel.HIGH),
        (80, MatchLevel.HIGH),
        (79.9, MatchLevel.MEDIUM),
        (60, MatchLevel.MEDIUM),
        (59.9, MatchLevel.LOW),
        (0, MatchLevel.LOW),
    ])
    def test_boundaries(self, score, level):
        assert get_match_level(score) == level


class TestConfidenceRules:
    """Tests for the confidence decision table, one rule at a time."""

    def test_strong_father_corroborated(self):
        context = ConfidenceContext(60, MatchType.EXACT, grandfather_corroborated=True)
        assert match_confidence_rule(context).name == 'strong_father_corroborated'
        assert classify_confidence(context) == Confidence.HIGH

    def test_strong_father_high_score(self):
        context = ConfidenceContext(95, MatchType.NORMALIZED)
        assert match_confidence_rule(context).name == 'strong_father_high_score'
        assert classify_confidence(context) == Confidence.HIGH

    def test_strong_father_uncorroborated(self):
        context = ConfidenceContext(53.3, MatchType.EXACT)
        assert match_confidence_rule(context).name == 'strong_father_uncorroborated'
        assert classify_confidence(context) == Confidence.MEDIUM

    def test_alternate_father_fully_corroborated(self):
        context = ConfidenceContext(
            90, MatchType.VARIATION,
            grandfather_corroborated=True, great_grandfather_corroborated=True
        )
        assert match_confidence_rule(context).name == 'alternate_father_fully_corroborated'
        assert classify_confidence(context) == Confidence.HIGH

    def test_alternate_father_partially_corroborated(self):
        context = ConfidenceContext(85, MatchType.PHONETIC, grandfather_corroborated=True)
        assert match_confidence_rule(context).name == 'alternate_father'
        assert classify_confidence(context) == Confidence.MEDIUM

    def test_fuzzy_father_adequate_score(self):
        context = ConfidenceContext(70, MatchType.FUZZY)
        assert match_confidence_rule(context).name == 'fuzzy_father_adequate_score'
        assert classify_confidence(context) == Confidence.MEDIUM

    def test_fuzzy_father(self):
        context = ConfidenceContext(69.9, MatchType.FUZZY, grandfather_corroborated=True)
        assert match_confidence_rule(context).name == 'fuzzy_father'
        assert classify_confidence(context) == Confidence.LOW


class TestRanking:
    """Tests for candidate ordering."""

    def test_higher_score_first(self):
        ranked = rank_candidates([make_candidate('A', 70), make_candidate('B', 90)])
        assert [c.father_id for c in ranked] == ['B', 'A']

    def test_tie_broken_by_corroborated_levels(self):
        ranked = rank_candidates([
            make_candidate('A', 80, grandfather_matched=False),
            make_candidate('B', 80, grandfather_matched=True),
        ])
        assert [c.father_id for c in ranked] == ['B', 'A']

    def test_tie_broken_by_father_id(self):
        ranked = rank_candidates([make_candidate('P010', 100), make_candidate('P002', 100)])
        assert [c.father_id for c in ranked] == ['P002', 'P010']

    def test_input_not_modified(self):
        candidates = [make_candidate('A', 70), make_candidate('B', 90)]
        rank_candidates(candidates)
        assert [c.father_id for c in candidates] == ['A', 'B']


class TestBuildMatchResult:
    """Tests for buckets and suggested actions."""

    def test_no_candidates(self):
        result = build_match_result([])
        assert result.suggested_action == SuggestedAction.NO_MATCH
        assert not result.has_matches
        assert result.best_match is None
        assert not result.needs_verification

    def test_single_exact_confirms(self):
        result = build_match_result([make_candidate('A', 100), make_candidate('B', 50)])
        assert result.suggested_action == SuggestedAction.CONFIRM
        assert result.best_match.father_id == 'A'
        assert [c.father_id for c in result.low_matches] == ['B']

    def test_multiple_exact_selects(self):
        result = build_match_result([make_candidate('A', 100), make_candidate('B', 96)])
        assert result.suggested_action == SuggestedAction.SELECT
        assert len(result.exact_matches) == 2

    def test_single_high_confirms(self):
        result = build_match_result([make_candidate('A', 85), make_candidate('B', 65)])
        assert result.suggested_action == SuggestedAction.CONFIRM

    def test_multiple_high_selects(self):
        result = build_match_result([make_candidate('A', 85), make_candidate('B', 82)])
        assert result.suggested_action == SuggestedAction.SELECT

    def test_medium_selects(self):
        result = build_match_result([make_candidate('A', 65)])
        assert result.suggested_action == SuggestedAction.SELECT
        assert not result.needs_verification

    def test_low_only_needs_verification(self):
        result = build_match_result([make_candidate('A', 45)])
        assert result.suggested_action == SuggestedAction.SELECT
        assert result.needs_verification

    def test_buckets_partition_all_matches(self):
        candidates = [make_candidate(str(i), score) for i, score in enumerate([100, 85, 65, 45])]
        result = build_match_result(candidates)
        buckets = (result.exact_matches + result.high_matches +
                   result.medium_matches + result.low_matches)
        assert sorted(c.father_id for c in buckets) == sorted(c.father_id for c in result.all_matches)
        assert result.match_count == 4

    def test_to_dict(self):
        data = build_match_result([make_candidate('A', 100)]).to_dict()
        assert data['suggestedAction'] == 'confirm'
        assert data['matchCount'] == 1
        assert data['bestMatch']['fatherId'] == 'A'
        assert data['messageAr']
