"""
Lineage path resolution for the family tree.

Walks parent references to the root and derives the named-branch founders:
generation 2 members head the main branches (فرع) and generation 3 members
head the sub-branches (ذرية).

All functions take the member population as a value and never mutate it.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..core.member import FamilyMember, build_member_map
from ..errors import CyclicLineageError

logger = logging.getLogger(__name__)

BRANCH_GENERATION = 2
SUB_BRANCH_GENERATION = 3


@dataclass(slots=True)
class LineageInfo:
    """Branch placement of a single member."""
    lineage_branch_id: Optional[str] = None
    lineage_branch_name: Optional[str] = None
    sub_branch_id: Optional[str] = None
    sub_branch_name: Optional[str] = None
    lineage_path: List[str] = field(default_factory=list)


@dataclass(slots=True)
class BranchStats:
    """Population counts for one main branch."""
    name: str
    count: int
    living_count: int


def walk_ancestors(member_id: str, member_map: Dict[str, FamilyMember]) -> List[FamilyMember]:
    """
    Ancestors of a member, nearest first.

    A parent reference pointing at an unknown id ends the walk.

    Args:
        member_id: Member whose ancestors are wanted
        member_map: Members indexed by id

    Returns:
        List of ancestors from parent up to the root

    Raises:
        CyclicLineageError: If the parent chain revisits a member
    """
    current = member_map.get(member_id)
    if current is None:
        return []

    ancestors = []
    visited = [current.id]

    while current.father_id:
        if current.father_id in visited:
            raise CyclicLineageError(member_id, visited + [current.father_id])

        parent = member_map.get(current.father_id)
        if parent is None:
            logger.warning(
                f"Member {current.id} references missing parent {current.father_id}"
            )
            break

        ancestors.append(parent)
        visited.append(parent.id)
        current = parent

    return ancestors


def get_lineage_path(member_id: str, members: Sequence[FamilyMember]) -> List[str]:
    """
    Get the ancestor ids from the root down to the member's parent.

    Returns an empty list for roots and unknown members.
    """
    return _lineage_path(member_id, build_member_map(members))


def get_full_lineage(member_id: str, members: Sequence[FamilyMember]) -> List[FamilyMember]:
    """
    Get every member from the root down to and including the member.

    Returns an empty list for unknown members.
    """
    return _full_lineage(member_id, build_member_map(members))


def get_gen2_ancestor(member_id: str, members: Sequence[FamilyMember]) -> Optional[FamilyMember]:
    """
    Get the main-branch founder (generation 2 ancestor) of a member.

    Generation 1 members have none; generation 2 members are their own
    founder.
    """
    return _founder(member_id, build_member_map(members), BRANCH_GENERATION)


def get_gen3_ancestor(member_id: str, members: Sequence[FamilyMember]) -> Optional[FamilyMember]:
    """
    Get the sub-branch founder (generation 3 ancestor) of a member.

    Generation 1 and 2 members have none; generation 3 members are their
    own founder.
    """
    return _founder(member_id, build_member_map(members), SUB_BRANCH_GENERATION)


def get_all_gen2_branches(members: Sequence[FamilyMember]) -> List[FamilyMember]:
    """All main-branch founders, in population order."""
    return [m for m in members if m.generation == BRANCH_GENERATION]


def get_all_gen3_sub_branches(members: Sequence[FamilyMember]) -> List[FamilyMember]:
    """All sub-branch founders, in population order."""
    return [m for m in members if m.generation == SUB_BRANCH_GENERATION]


def get_members_by_gen2_branch(
    gen2_ancestor_id: str,
    members: Sequence[FamilyMember]
) -> List[FamilyMember]:
    """Get the founder and every descendant in a main branch."""
    return _members_of_branch(gen2_ancestor_id, members, BRANCH_GENERATION)


def get_members_by_gen3_sub_branch(
    gen3_ancestor_id: str,
    members: Sequence[FamilyMember]
) -> List[FamilyMember]:
    """Get the founder and every descendant in a sub-branch."""
    return _members_of_branch(gen3_ancestor_id, members, SUB_BRANCH_GENERATION)


def calculate_lineage_info(member_id: str, members: Sequence[FamilyMember]) -> LineageInfo:
    """Calculate branch, sub-branch and lineage path for a single member."""
    return _lineage_info(member_id, build_member_map(members))


def populate_lineage_info(members: Sequence[FamilyMember]) -> Dict[str, LineageInfo]:
    """
    Calculate lineage information for every member.

    Returns:
        Dictionary of member id -> LineageInfo, in population order
    """
    member_map = build_member_map(members)
    return {m.id: _lineage_info(m.id, member_map) for m in members}


def get_lineage_branch_stats(members: Sequence[FamilyMember]) -> Dict[str, BranchStats]:
    """
    Count members and living members per main branch.

    Returns:
        Dictionary of founder id -> BranchStats, in founder order
    """
    member_map = build_member_map(members)
    stats: Dict[str, BranchStats] = {}

    for branch in get_all_gen2_branches(members):
        stats[branch.id] = BranchStats(name=branch.first_name, count=0, living_count=0)

    for member in members:
        founder = _founder(member.id, member_map, BRANCH_GENERATION)
        if founder is None or founder.id not in stats:
            continue
        entry = stats[founder.id]
        entry.count += 1
        if member.is_living:
            entry.living_count += 1

    return stats


def format_lineage_display(
    member: FamilyMember,
    info: LineageInfo,
    include_sub_branch: bool = True
) -> str:
    """
    Format a member's branch for display, e.g. "فرع عبدالله - ذرية محمد".

    Args:
        member: The member being described
        info: Lineage information from calculate_lineage_info
        include_sub_branch: Append the sub-branch for generation 4 and below
    """
    if not info.lineage_branch_name:
        if member.generation == 1:
            return 'الجذر الأصلي'  # Original root
        return 'غير محدد'  # Not specified

    display = f"فرع {info.lineage_branch_name}"

    if include_sub_branch and info.sub_branch_name and member.generation > SUB_BRANCH_GENERATION:
        display += f" - ذرية {info.sub_branch_name}"

    return display


def _lineage_path(member_id: str, member_map: Dict[str, FamilyMember]) -> List[str]:
    return [a.id for a in reversed(walk_ancestors(member_id, member_map))]


def _full_lineage(member_id: str, member_map: Dict[str, FamilyMember]) -> List[FamilyMember]:
    member = member_map.get(member_id)
    if member is None:
        return []
    return list(reversed(walk_ancestors(member_id, member_map))) + [member]


def _founder(
    member_id: str,
    member_map: Dict[str, FamilyMember],
    generation: int
) -> Optional[FamilyMember]:
    member = member_map.get(member_id)
    if member is None or member.generation < generation:
        return None

    if member.generation == generation:
        return member

    for ancestor in walk_ancestors(member_id, member_map):
        if ancestor.generation == generation:
            return ancestor

    return None


def _members_of_branch(
    founder_id: str,
    members: Sequence[FamilyMember],
    generation: int
) -> List[FamilyMember]:
    member_map = build_member_map(members)
    result = []
    for member in members:
        if member.id == founder_id:
            result.append(member)
            continue
        founder = _founder(member.id, member_map, generation)
        if founder is not None and founder.id == founder_id:
            result.append(member)
    return result


def _lineage_info(member_id: str, member_map: Dict[str, FamilyMember]) -> LineageInfo:
    branch = _founder(member_id, member_map, BRANCH_GENERATION)
    sub_branch = _founder(member_id, member_map, SUB_BRANCH_GENERATION)

    return LineageInfo(
        lineage_branch_id=branch.id if branch else None,
        lineage_branch_name=branch.first_name if branch else None,
        sub_branch_id=sub_branch.id if sub_branch else None,
        sub_branch_name=sub_branch.first_name if sub_branch else None,
        lineage_path=_lineage_path(member_id, member_map),
    )
