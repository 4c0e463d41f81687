"""FamilyMember class for representing people in the family tree snapshot."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, List, Dict, Any, Self, Union

MALE = 'Male'
FEMALE = 'Female'
GENDERS = (MALE, FEMALE)

LIVING = 'Living'
DECEASED = 'Deceased'

DEFAULT_FAMILY_NAME = 'آل شايع'
DEFAULT_FAMILY_NAME_EN = 'Al-Shaye'

# Host wire format (camelCase) -> attribute name
_CAMEL_KEYS = {
    'firstName': 'first_name',
    'fatherId': 'father_id',
    'familyName': 'family_name',
    'fullNameEn': 'full_name_en',
    'birthYear': 'birth_year',
}


@dataclass(frozen=True, slots=True)
class FamilyMember:
    """A person already present in the family tree.

    Members are owned by the host's persistence layer; this package only
    reads them.

    Attributes:
        id: Unique identifier (e.g., 'P001')
        first_name: Given name, usually in Arabic script
        gender: 'Male' or 'Female'
        father_id: Identifier of the parent, or None for a tree root
        generation: 1 for the founder, parent's generation + 1 otherwise
        branch: Optional named-branch label
        family_name: Family name used when rendering the full name
        full_name_en: Stored Latin-script full name, if any
        status: 'Living' or 'Deceased'
        birth_year: Year of birth if known
    """

    id: str
    first_name: str
    gender: str = MALE
    father_id: Optional[str] = None
    generation: int = 1
    branch: Optional[str] = None
    family_name: str = DEFAULT_FAMILY_NAME
    full_name_en: Optional[str] = None
    status: str = LIVING
    birth_year: Optional[int] = None

    def __str__(self) -> str:
        """Return a human-readable string representation."""
        return f"{self.first_name} [{self.id}] (gen {self.generation})"

    @property
    def is_root(self) -> bool:
        """True if the member has no parent."""
        return not self.father_id

    @property
    def is_living(self) -> bool:
        return self.status == LIVING

    def to_dict(self) -> Dict[str, Any]:
        """Convert member to the host's camelCase dictionary format."""
        return {
            'id': self.id,
            'firstName': self.first_name,
            'gender': self.gender,
            'fatherId': self.father_id,
            'generation': self.generation,
            'branch': self.branch,
            'familyName': self.family_name,
            'fullNameEn': self.full_name_en,
            'status': self.status,
            'birthYear': self.birth_year,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Self:
        """Create a FamilyMember from a dictionary.

        Accepts either the host's camelCase keys or snake_case keys.
        Unrecognised keys are ignored.

        Args:
            data: Dictionary containing member data

        Returns:
            FamilyMember instance
        """
        values = {}
        for key, value in data.items():
            name = _CAMEL_KEYS.get(key, key)
            if name in cls.__dataclass_fields__:
                values[name] = value

        if 'id' not in values or 'first_name' not in values:
            raise ValueError(f"Member record needs 'id' and 'firstName': {data!r}")

        values['id'] = str(values['id'])
        if values.get('father_id') is not None:
            values['father_id'] = str(values['father_id'])
        # Missing values fall back to the field defaults
        for name in ('family_name', 'gender', 'status', 'generation'):
            if values.get(name) is None:
                values.pop(name, None)
        if 'generation' in values:
            values['generation'] = int(values['generation'])

        return cls(**values)


def load_members(source: Union[str, Path]) -> List[FamilyMember]:
    """Load a member snapshot from a JSON file.

    The file holds either a list of member records or an object with a
    ``members`` list.

    Args:
        source: Path to the JSON file

    Returns:
        List of FamilyMember objects, in file order
    """
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Members file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get('members', [])

    return [FamilyMember.from_dict(record) for record in data]


def build_member_map(members: List[FamilyMember]) -> Dict[str, FamilyMember]:
    """Index members by id for O(1) lookup."""
    return {member.id: member for member in members}
