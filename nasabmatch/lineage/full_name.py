"""Patronymic full-name rendering (first بن father بن grandfather ... family)."""

from typing import Sequence

from ..core.member import FamilyMember, MALE, FEMALE, DEFAULT_FAMILY_NAME, DEFAULT_FAMILY_NAME_EN

CONNECTORS = {MALE: 'بن', FEMALE: 'بنت'}
CONNECTORS_EN = {MALE: 'bin', FEMALE: 'bint'}


def generate_full_name(
    first_name: str,
    gender: str,
    lineage: Sequence[FamilyMember],
    family_name: str = DEFAULT_FAMILY_NAME
) -> str:
    """
    Build the Arabic patronymic name.

    Args:
        first_name: Given name of the person being named
        gender: 'Male' or 'Female'; selects بن or بنت
        lineage: Ancestors ordered root to parent
        family_name: Appended last

    Returns:
        e.g. "محمد بن ابراهيم بن حمد آل شايع"
    """
    connector = CONNECTORS.get(gender, CONNECTORS[MALE])
    parts = [first_name]

    # Nearest ancestor is named first
    for ancestor in reversed(lineage):
        parts.append(connector)
        parts.append(ancestor.first_name)

    parts.append(family_name)
    return ' '.join(parts)


def generate_full_name_en(
    first_name: str,
    gender: str,
    lineage: Sequence[FamilyMember],
    family_name: str = DEFAULT_FAMILY_NAME_EN
) -> str:
    """
    Build the transliterated patronymic name.

    Each ancestor contributes the first token of its stored English name,
    falling back to the original-script first name.
    """
    connector = CONNECTORS_EN.get(gender, CONNECTORS_EN[MALE])
    parts = [first_name]

    for ancestor in reversed(lineage):
        parts.append(connector)
        parts.append(_english_token(ancestor))

    parts.append(family_name)
    return ' '.join(parts)


def _english_token(member: FamilyMember) -> str:
    if member.full_name_en:
        tokens = member.full_name_en.split()
        if tokens:
            return tokens[0]
    return member.first_name
