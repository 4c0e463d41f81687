"""
Ancestor chain matching engine.

Finds where a new person belongs in the tree from the names of their father
and, optionally, grandfather and great-grandfather.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..core.member import FamilyMember, MALE, FEMALE, DEFAULT_FAMILY_NAME_EN, build_member_map
from ..errors import CyclicLineageError, MissingRequiredField
from ..lineage.full_name import generate_full_name, generate_full_name_en
from ..lineage.resolver import walk_ancestors, BRANCH_GENERATION
from .config import MatchConfig, DEFAULT_CONFIG
from .name_scorer import Confidence, NameMatchResult, comprehensive_name_match
from .ranker import (
    ConfidenceContext,
    MatchLevel,
    MatchResult,
    build_match_result,
    calculate_candidate_score,
    classify_confidence,
    get_match_level,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NameInput:
    """Names supplied for the person being placed.

    Attributes:
        first_name: Given name of the new person (required)
        father_name: Father's first name (required)
        grandfather_name: Grandfather's first name, if known
        great_grandfather_name: Great-grandfather's first name, if known
        gender: Gender of the new person; only affects name previews
    """
    first_name: str
    father_name: str
    grandfather_name: Optional[str] = None
    great_grandfather_name: Optional[str] = None
    gender: str = MALE

    def require_fields(self) -> None:
        """Raise MissingRequiredField if first or father name is blank."""
        if not self.first_name or not self.first_name.strip():
            raise MissingRequiredField('first_name', 'First name is required')
        if not self.father_name or not self.father_name.strip():
            raise MissingRequiredField('father_name', 'Father name is required')

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NameInput':
        """Create from snake_case or camelCase keys."""
        def pick(snake: str, camel: str) -> Optional[str]:
            value = data.get(snake, data.get(camel))
            if isinstance(value, str):
                value = value.strip()
            return value or None

        return cls(
            first_name=pick('first_name', 'firstName') or '',
            father_name=pick('father_name', 'fatherName') or '',
            grandfather_name=pick('grandfather_name', 'grandfatherName'),
            great_grandfather_name=pick('great_grandfather_name', 'greatGrandfatherName'),
            gender=data.get('gender') or MALE,
        )


@dataclass(slots=True)
class AncestorMatch:
    """How one ancestor level of a candidate compared to the input."""
    input_name: str
    matched_name: str
    matched_member: FamilyMember
    match_result: NameMatchResult
    generation: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'inputName': self.input_name,
            'matchedName': self.matched_name,
            'matchedMemberId': self.matched_member.id,
            'matchResult': self.match_result.to_dict(),
            'generation': self.generation,
        }


@dataclass(slots=True)
class MatchCandidate:
    """A hypothesis that an existing member is the new person's father."""
    father_id: str
    father: FamilyMember

    match_score: float
    match_level: MatchLevel
    confidence: Confidence

    father_match: AncestorMatch
    grandfather_match: Optional[AncestorMatch] = None
    great_grandfather_match: Optional[AncestorMatch] = None

    # Family context for confirmation
    siblings: List[FamilyMember] = field(default_factory=list)
    uncles_aunts: List[FamilyMember] = field(default_factory=list)
    cousins: List[FamilyMember] = field(default_factory=list)

    grandfather: Optional[FamilyMember] = None
    great_grandfather: Optional[FamilyMember] = None
    full_lineage: List[FamilyMember] = field(default_factory=list)  # root .. father

    # Placement of the new member
    generation: int = 1
    branch: Optional[str] = None
    lineage_path: List[str] = field(default_factory=list)

    full_name_preview: str = ''
    full_name_preview_en: str = ''

    @property
    def ancestor_matches(self) -> Dict[str, Optional[AncestorMatch]]:
        return {
            'father': self.father_match,
            'grandfather': self.grandfather_match,
            'great_grandfather': self.great_grandfather_match,
        }

    @property
    def corroborated_levels(self) -> int:
        """Number of higher ancestor levels that matched the input."""
        return sum(
            1 for level in (self.grandfather_match, self.great_grandfather_match)
            if level is not None and level.match_result.is_match
        )

    def __str__(self) -> str:
        return (
            f"{self.father.first_name} [{self.father_id}] "
            f"score={self.match_score:.1f} level={self.match_level.value} "
            f"confidence={self.confidence.value}"
        )

    def to_dict(self) -> Dict[str, Any]:
        def level(match: Optional[AncestorMatch]) -> Optional[Dict[str, Any]]:
            return match.to_dict() if match else None

        return {
            'fatherId': self.father_id,
            'father': self.father.to_dict(),
            'matchScore': self.match_score,
            'matchLevel': self.match_level.value,
            'confidence': self.confidence.value,
            'ancestorMatches': {
                'father': level(self.father_match),
                'grandfather': level(self.grandfather_match),
                'greatGrandfather': level(self.great_grandfather_match),
            },
            'siblings': [m.id for m in self.siblings],
            'unclesAunts': [m.id for m in self.uncles_aunts],
            'cousins': [m.id for m in self.cousins],
            'grandfatherId': self.grandfather.id if self.grandfather else None,
            'greatGrandfatherId': self.great_grandfather.id if self.great_grandfather else None,
            'generation': self.generation,
            'branch': self.branch,
            'lineagePath': self.lineage_path,
            'fullNamePreview': self.full_name_preview,
            'fullNamePreviewEn': self.full_name_preview_en,
        }


class LineageMatcher:
    """
    Matches a name input against a member snapshot.

    Matching Strategy:
    1. Score every member's first name against the father name
    2. Walk one and two parent hops to the candidate's father and grandfather
    3. Score those against the grandfather / great-grandfather names, when
       the caller supplied them and the ancestor exists
    4. Combine, classify and rank

    The matcher keeps only its configuration; each call works on the
    population it is given.
    """

    def __init__(self, config: Optional[MatchConfig] = None):
        """
        Initialize the matcher.

        Args:
            config: Weights and thresholds (validated on construction)
        """
        self.config = config or DEFAULT_CONFIG

    def find_matches(self, name_input: NameInput, members: Sequence[FamilyMember]) -> MatchResult:
        """
        Find candidate fathers for the new person.

        Args:
            name_input: Names supplied for the new person
            members: Snapshot of the current tree

        Returns:
            MatchResult with ranked, bucketed candidates

        Raises:
            MissingRequiredField: If first name or father name is blank
        """
        name_input.require_fields()

        member_map = build_member_map(members)
        children = _children_by_father(members)
        candidates = []

        for father, father_result in self.find_potential_fathers(name_input.father_name, members):
            try:
                candidate = self._build_candidate(name_input, father, father_result, member_map, children)
            except CyclicLineageError as e:
                logger.warning(f"Skipping candidate {father.id}: {e}")
                continue
            if candidate is not None:
                candidates.append(candidate)

        result = build_match_result(candidates)
        logger.info(
            f"Matched '{name_input.first_name}' (father '{name_input.father_name}') "
            f"against {len(members)} members: {result}"
        )
        return result

    def find_potential_fathers(
        self,
        father_name: str,
        members: Sequence[FamilyMember]
    ) -> List[Tuple[FamilyMember, NameMatchResult]]:
        """
        Members whose first name plausibly matches the father name.

        Candidates are not filtered by gender: the tree's gender field is
        trusted as recorded, so a female member whose name matches is still
        returned (and logged at debug level) for the caller to reject.

        Returns:
            List of (member, NameMatchResult), highest similarity first
        """
        results = []
        for member in members:
            name_match = comprehensive_name_match(member.first_name, father_name)
            if (name_match.similarity >= self.config.minimum_father_score or
                    (name_match.is_match and name_match.confidence != Confidence.LOW)):
                if member.gender == FEMALE:
                    logger.debug(f"Candidate father {member.id} is recorded as {FEMALE}")
                results.append((member, name_match))

        results.sort(key=lambda pair: pair[1].similarity, reverse=True)
        return results

    def _build_candidate(
        self,
        name_input: NameInput,
        father: FamilyMember,
        father_result: NameMatchResult,
        member_map: Dict[str, FamilyMember],
        children: Dict[str, List[FamilyMember]],
    ) -> Optional[MatchCandidate]:
        cfg = self.config

        grandfather = _parent_of(father, member_map)
        great_grandfather = _parent_of(grandfather, member_map) if grandfather else None

        grandfather_match = _ancestor_match(name_input.grandfather_name, grandfather)
        great_grandfather_match = _ancestor_match(name_input.great_grandfather_name, great_grandfather)

        score = calculate_candidate_score(
            father_result,
            grandfather_match.match_result if grandfather_match else None,
            great_grandfather_match.match_result if great_grandfather_match else None,
            cfg,
        )

        if score < cfg.minimum_total_score:
            logger.debug(f"Dropping {father.id}: score {score} below {cfg.minimum_total_score}")
            return None

        confidence = classify_confidence(ConfidenceContext(
            score=score,
            father_match_type=father_result.match_type,
            grandfather_corroborated=bool(grandfather_match and grandfather_match.match_result.is_match),
            great_grandfather_corroborated=bool(
                great_grandfather_match and great_grandfather_match.match_result.is_match
            ),
        ))

        if not cfg.include_low_confidence and confidence == Confidence.LOW:
            logger.debug(f"Dropping {father.id}: low confidence")
            return None

        full_lineage = list(reversed(walk_ancestors(father.id, member_map))) + [father]

        siblings = list(children.get(father.id, []))
        uncles_aunts = []
        if grandfather:
            uncles_aunts = [m for m in children.get(grandfather.id, []) if m.id != father.id]
        cousins = [c for ua in uncles_aunts for c in children.get(ua.id, [])]

        logger.debug(
            f"Candidate {father.id}: father={father_result}, "
            f"grandfather={grandfather_match.match_result if grandfather_match else 'n/a'}, "
            f"great-grandfather={great_grandfather_match.match_result if great_grandfather_match else 'n/a'}, "
            f"score={score}, confidence={confidence.value}"
        )

        return MatchCandidate(
            father_id=father.id,
            father=father,
            match_score=score,
            match_level=get_match_level(score),
            confidence=confidence,
            father_match=AncestorMatch(
                input_name=name_input.father_name,
                matched_name=father.first_name,
                matched_member=father,
                match_result=father_result,
                generation=father.generation,
            ),
            grandfather_match=grandfather_match,
            great_grandfather_match=great_grandfather_match,
            siblings=siblings,
            uncles_aunts=uncles_aunts,
            cousins=cousins,
            grandfather=grandfather,
            great_grandfather=great_grandfather,
            full_lineage=full_lineage,
            generation=father.generation + 1,
            branch=_inherited_branch(father, full_lineage),
            lineage_path=[m.id for m in full_lineage],
            full_name_preview=generate_full_name(
                name_input.first_name, name_input.gender, full_lineage, father.family_name
            ),
            full_name_preview_en=generate_full_name_en(
                name_input.first_name, name_input.gender, full_lineage, DEFAULT_FAMILY_NAME_EN
            ),
        )


def find_matches(
    name_input: NameInput,
    members: Sequence[FamilyMember],
    config: Union[MatchConfig, Dict[str, Any], None] = None
) -> MatchResult:
    """
    Find candidate fathers for a new person.

    Args:
        name_input: Names supplied for the new person
        members: Snapshot of the current tree
        config: MatchConfig or a dict of overrides (validated before matching)

    Returns:
        MatchResult
    """
    if not isinstance(config, MatchConfig):
        config = MatchConfig.from_dict(config)
    return LineageMatcher(config).find_matches(name_input, members)


def _parent_of(member: FamilyMember, member_map: Dict[str, FamilyMember]) -> Optional[FamilyMember]:
    if not member.father_id:
        return None
    parent = member_map.get(member.father_id)
    if parent is None:
        logger.warning(f"Member {member.id} references missing parent {member.father_id}")
    return parent


def _ancestor_match(input_name: Optional[str], ancestor: Optional[FamilyMember]) -> Optional[AncestorMatch]:
    # Unsupplied (blank) name or missing ancestor: level not evaluated
    if not input_name or not input_name.strip() or ancestor is None:
        return None
    return AncestorMatch(
        input_name=input_name,
        matched_name=ancestor.first_name,
        matched_member=ancestor,
        match_result=comprehensive_name_match(ancestor.first_name, input_name),
        generation=ancestor.generation,
    )


def _children_by_father(members: Sequence[FamilyMember]) -> Dict[str, List[FamilyMember]]:
    children = defaultdict(list)
    for member in members:
        if member.father_id:
            children[member.father_id].append(member)
    return children


def _inherited_branch(father: FamilyMember, full_lineage: List[FamilyMember]) -> Optional[str]:
    if father.branch:
        return father.branch
    for ancestor in full_lineage:
        if ancestor.generation == BRANCH_GENERATION:
            return ancestor.first_name
    return None
