"""
Tests for the ancestor matching engine.
"""

import logging

import pytest

from nasabmatch.core.member import FamilyMember, FEMALE
from nasabmatch.errors import InvalidConfiguration, MissingRequiredField
from nasabmatch.matching import (
    Confidence,
    LineageMatcher,
    MatchConfig,
    MatchLevel,
    MatchType,
    NameInput,
    SuggestedAction,
    find_matches,
)


class TestNameInput:
    """Tests for the name input record."""

    def test_require_fields(self):
        NameInput(first_name='محمد', father_name='ابراهيم').require_fields()

    @pytest.mark.parametrize('first_name, father_name, field', [
        ('', 'ابراهيم', 'first_name'),
        ('   ', 'ابراهيم', 'first_name'),
        ('محمد', '', 'father_name'),
    ])
    def test_missing_fields(self, first_name, father_name, field):
        with pytest.raises(MissingRequiredField) as exc_info:
            NameInput(first_name=first_name, father_name=father_name).require_fields()
        assert exc_info.value.field == field

    def test_from_dict_camel_case(self):
        name_input = NameInput.from_dict({
            'firstName': 'محمد',
            'fatherName': 'ابراهيم',
            'grandfatherName': 'حمد',
            'greatGrandfatherName': '',
        })
        assert name_input.first_name == 'محمد'
        assert name_input.grandfather_name == 'حمد'
        assert name_input.great_grandfather_name is None

    def test_from_dict_strips_blank_ancestors(self):
        name_input = NameInput.from_dict({
            'firstName': ' محمد ',
            'fatherName': 'ابراهيم',
            'grandfatherName': '   ',
        })
        assert name_input.first_name == 'محمد'
        assert name_input.grandfather_name is None


class TestFindMatchesBasic:
    """Small hand-built trees."""

    def test_two_generation_tree(self):
        """The canonical example: grandfather and father both match exactly."""
        members = [
            FamilyMember(id='P001', first_name='حمد', generation=1),
            FamilyMember(id='P002', first_name='ابراهيم', father_id='P001', generation=2),
        ]
        name_input = NameInput(first_name='محمد', father_name='ابراهيم', grandfather_name='حمد')

        result = find_matches(name_input, members)

        assert result.match_count == 1
        candidate = result.best_match
        assert candidate.father_id == 'P002'
        assert candidate.match_score == 100
        assert candidate.match_level == MatchLevel.EXACT
        assert candidate.confidence == Confidence.HIGH
        assert candidate.generation == 3
        assert candidate.lineage_path == ['P001', 'P002']
        assert candidate.full_name_preview == 'محمد بن ابراهيم بن حمد آل شايع'
        assert result.suggested_action == SuggestedAction.CONFIRM

    def test_no_match(self, family_tree):
        name_input = NameInput(first_name='محمد', father_name='زكريا')
        result = find_matches(name_input, family_tree)
        assert result.match_count == 0
        assert result.suggested_action == SuggestedAction.NO_MATCH
        assert result.best_match is None

    def test_phonetic_tier_keeps_leading_semivowel(self):
        """A father named يوسف is not proposed for a tree holding only سيف."""
        members = [FamilyMember(id='P1', first_name='سيف', generation=1)]
        result = find_matches(NameInput(first_name='محمد', father_name='يوسف'), members)
        assert result.match_count == 0
        assert result.suggested_action == SuggestedAction.NO_MATCH

    def test_empty_population(self):
        result = find_matches(NameInput(first_name='محمد', father_name='ابراهيم'), [])
        assert result.suggested_action == SuggestedAction.NO_MATCH

    def test_identical_fathers_require_selection(self, family_tree):
        """Two members named ابراهيم with no disambiguating grandfather."""
        result = find_matches(NameInput(first_name='محمد', father_name='ابراهيم'), family_tree)

        assert [c.father_id for c in result.all_matches] == ['P004', 'P006']
        assert len(result.exact_matches) == 2
        assert result.suggested_action == SuggestedAction.SELECT

    def test_grandfather_disambiguates(self, family_tree):
        name_input = NameInput(first_name='محمد', father_name='ابراهيم', grandfather_name='عبدالله')
        result = find_matches(name_input, family_tree)

        assert result.suggested_action == SuggestedAction.CONFIRM
        assert result.best_match.father_id == 'P004'
        assert result.best_match.confidence == Confidence.HIGH

        other = result.low_matches[0]
        assert other.father_id == 'P006'
        assert other.match_score == pytest.approx(53.3)
        assert other.confidence == Confidence.MEDIUM
        assert not other.grandfather_match.match_result.is_match


class TestFindMatchesTiers:
    """Father names matched through each tier."""

    def test_normalized_father(self, family_tree):
        result = find_matches(NameInput(first_name='محمد', father_name='إبراهيم'), family_tree)
        assert len(result.exact_matches) == 2
        assert result.best_match.father_match.match_result.match_type == MatchType.NORMALIZED
        assert result.best_match.match_score == 95

    def test_variation_father(self, family_tree):
        result = find_matches(NameInput(first_name='فهد', father_name='حمود'), family_tree)

        assert result.match_count == 1
        candidate = result.best_match
        assert candidate.father_id == 'P003'
        assert candidate.match_score == 85
        assert candidate.match_level == MatchLevel.HIGH
        assert candidate.confidence == Confidence.MEDIUM
        assert result.suggested_action == SuggestedAction.CONFIRM

    def test_phonetic_father(self, family_tree):
        result = find_matches(NameInput(first_name='فهد', father_name='صلطان'), family_tree)

        assert result.match_count == 1
        candidate = result.best_match
        assert candidate.father_id == 'P008'
        assert candidate.match_level == MatchLevel.MEDIUM
        assert candidate.confidence == Confidence.MEDIUM
        assert result.suggested_action == SuggestedAction.SELECT


class TestFamilyContext:
    """Placement details attached to a candidate."""

    def get_candidate(self, family_tree, father_id, **kwargs):
        name_input = NameInput(first_name='محمد', father_name='ابراهيم', **kwargs)
        result = find_matches(name_input, family_tree)
        return next(c for c in result.all_matches if c.father_id == father_id)

    def test_relatives(self, family_tree):
        candidate = self.get_candidate(family_tree, 'P004')
        assert [m.id for m in candidate.siblings] == ['P007', 'P009']
        assert [m.id for m in candidate.uncles_aunts] == ['P005']
        assert [m.id for m in candidate.cousins] == ['P010']
        assert candidate.grandfather.id == 'P002'
        assert candidate.great_grandfather.id == 'P001'

    def test_lineage_and_generation(self, family_tree):
        candidate = self.get_candidate(family_tree, 'P004')
        assert [m.id for m in candidate.full_lineage] == ['P001', 'P002', 'P004']
        assert candidate.lineage_path == ['P001', 'P002', 'P004']
        assert candidate.generation == 4

    def test_branch_inherited_from_founder(self, family_tree):
        assert self.get_candidate(family_tree, 'P004').branch == 'عبدالله'

    def test_branch_taken_from_father(self, family_tree):
        assert self.get_candidate(family_tree, 'P006').branch == 'محمد'

    def test_full_name_previews(self, family_tree):
        candidate = self.get_candidate(family_tree, 'P004')
        assert candidate.full_name_preview == 'محمد بن ابراهيم بن عبدالله بن شايع آل شايع'
        assert candidate.full_name_preview_en == 'محمد bin ابراهيم bin Abdullah bin Shaye Al-Shaye'

    def test_female_preview(self, family_tree):
        name_input = NameInput(first_name='سارة', father_name='ابراهيم', gender=FEMALE)
        candidate = find_matches(name_input, family_tree).best_match
        assert candidate.full_name_preview.startswith('سارة بنت ابراهيم بنت')

    def test_unevaluated_levels_are_absent(self, family_tree):
        candidate = self.get_candidate(family_tree, 'P004')
        assert candidate.grandfather_match is None
        assert candidate.great_grandfather_match is None
        assert candidate.corroborated_levels == 0

    def test_to_dict(self, family_tree):
        data = self.get_candidate(family_tree, 'P004', grandfather_name='عبدالله').to_dict()
        assert data['fatherId'] == 'P004'
        assert data['siblings'] == ['P007', 'P009']
        assert data['ancestorMatches']['grandfather']['matchedMemberId'] == 'P002'
        assert data['ancestorMatches']['greatGrandfather'] is None


class TestMatchingProperties:
    """Invariants that hold for any population."""

    def test_score_renormalized_over_supplied_levels(self):
        """A better father match outranks a candidate with missing ancestors."""
        members = [
            FamilyMember(id='A', first_name='ابراهيم', generation=1),
            FamilyMember(id='R', first_name='صالح', generation=1),
            FamilyMember(id='B', first_name='ابرهيم', father_id='R', generation=2),
        ]
        name_input = NameInput(first_name='محمد', father_name='ابراهيم', grandfather_name='صالح')
        result = find_matches(name_input, members)

        scores = {c.father_id: c.match_score for c in result.all_matches}
        assert scores['A'] == 100
        assert scores['A'] >= scores['B']
        assert result.all_matches[0].father_id == 'A'

    def test_idempotent(self, family_tree):
        name_input = NameInput(first_name='محمد', father_name='ابراهيم', grandfather_name='عبدالله')
        first = find_matches(name_input, family_tree)
        second = find_matches(name_input, family_tree)
        assert first.to_dict() == second.to_dict()

    def test_population_not_modified(self, family_tree):
        before = [m.to_dict() for m in family_tree]
        find_matches(NameInput(first_name='محمد', father_name='ابراهيم'), family_tree)
        assert [m.to_dict() for m in family_tree] == before

    def test_scores_and_levels_consistent(self, family_tree):
        name_input = NameInput(first_name='محمد', father_name='ابراهيم', grandfather_name='عبدالله')
        result = find_matches(name_input, family_tree)
        for candidate in result.all_matches:
            assert 0 <= candidate.match_score <= 100
            assert candidate.match_score >= 40
        scores = [c.match_score for c in result.all_matches]
        assert scores == sorted(scores, reverse=True)

    def test_exclude_low_confidence(self):
        members = [
            FamilyMember(id='G', first_name='فهد', generation=1),
            FamilyMember(id='F', first_name='عبدالرحمن', father_id='G', generation=2),
        ]
        name_input = NameInput(first_name='محمد', father_name='عبدالرحيم', grandfather_name='زكريا')

        included = find_matches(name_input, members)
        assert included.match_count == 1
        assert included.best_match.match_score == pytest.approx(41.6)
        assert included.best_match.confidence == Confidence.LOW
        assert included.needs_verification

        excluded = find_matches(name_input, members, {'includeLowConfidence': False})
        assert excluded.match_count == 0

    def test_minimum_total_score(self, family_tree):
        name_input = NameInput(first_name='محمد', father_name='ابراهيم', grandfather_name='عبدالله')
        result = find_matches(name_input, family_tree, MatchConfig(minimum_total_score=60))
        assert [c.father_id for c in result.all_matches] == ['P004']


class TestFindMatchesErrors:
    """Invalid input and damaged trees."""

    def test_missing_first_name(self, family_tree):
        with pytest.raises(MissingRequiredField):
            find_matches(NameInput(first_name='', father_name='ابراهيم'), family_tree)

    def test_missing_father_name(self, family_tree):
        with pytest.raises(MissingRequiredField):
            find_matches(NameInput(first_name='محمد', father_name=' '), family_tree)

    def test_invalid_config(self, family_tree):
        with pytest.raises(InvalidConfiguration):
            find_matches(
                NameInput(first_name='محمد', father_name='ابراهيم'),
                family_tree,
                {'fatherWeight': 0}
            )

    def test_cyclic_candidate_skipped(self, caplog):
        members = [
            FamilyMember(id='C1', first_name='ابراهيم', father_id='C2', generation=3),
            FamilyMember(id='C2', first_name='خالد', father_id='C1', generation=2),
            FamilyMember(id='P001', first_name='حمد', generation=1),
            FamilyMember(id='P002', first_name='ابراهيم', father_id='P001', generation=2),
        ]
        with caplog.at_level(logging.WARNING):
            result = find_matches(NameInput(first_name='محمد', father_name='ابراهيم'), members)

        assert [c.father_id for c in result.all_matches] == ['P002']
        assert 'C1' in caplog.text

    def test_dangling_parent(self, caplog):
        members = [FamilyMember(id='A', first_name='ابراهيم', father_id='MISSING', generation=3)]
        name_input = NameInput(first_name='محمد', father_name='ابراهيم', grandfather_name='حمد')

        with caplog.at_level(logging.WARNING):
            result = find_matches(name_input, members)

        candidate = result.best_match
        assert candidate.grandfather is None
        assert candidate.grandfather_match is None
        assert candidate.match_score == 100
        assert candidate.lineage_path == ['A']
        assert 'MISSING' in caplog.text


    @pytest.mark.parametrize('blank', ['', '   ', '\t'])
    def test_blank_grandfather_not_evaluated(self, blank):
        members = [
            FamilyMember(id='P001', first_name='حمد', generation=1),
            FamilyMember(id='P002', first_name='ابراهيم', father_id='P001', generation=2),
        ]
        name_input = NameInput(first_name='محمد', father_name='ابراهيم', grandfather_name=blank)
        result = find_matches(name_input, members)

        candidate = result.best_match
        assert candidate.grandfather_match is None
        assert candidate.match_score == 100
        assert result.suggested_action == SuggestedAction.CONFIRM
        assert not result.needs_verification


class TestLineageMatcher:
    """Tests for the matcher class."""

    def test_find_potential_fathers_sorted(self, family_tree):
        matcher = LineageMatcher()
        fathers = matcher.find_potential_fathers('ابراهيم', family_tree)
        assert [m.id for m, _ in fathers] == ['P004', 'P006']

    def test_minimum_father_score_filters(self):
        members = [FamilyMember(id='F', first_name='عبدالرحمن', generation=1)]
        strict = LineageMatcher(MatchConfig(minimum_father_score=80))
        assert strict.find_potential_fathers('عبدالرحيم', members) == []
        assert LineageMatcher().find_potential_fathers('عبدالرحيم', members)

    def test_female_member_returned_and_logged(self, family_tree, caplog):
        """Gender is not filtered; a female name match is logged for the caller."""
        with caplog.at_level(logging.DEBUG, logger='nasabmatch.matching.matcher'):
            fathers = LineageMatcher().find_potential_fathers('نور', family_tree)

        assert [m.id for m, _ in fathers] == ['P009']
        assert 'P009 is recorded as Female' in caplog.text
