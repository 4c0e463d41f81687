"""Shared fixtures: a small four-generation family tree."""

import json

import pytest

from nasabmatch.core.member import FamilyMember, FEMALE, DECEASED


def build_tree():
    """
    شايع (P001)
    ├── عبدالله (P002)
    │   ├── ابراهيم (P004)
    │   │   ├── فهد (P007)
    │   │   └── نورة (P009, female)
    │   └── صالح (P005)
    │       └── خالد (P010, deceased)
    └── محمد (P003, branch "محمد")
        └── ابراهيم (P006, branch "محمد")
            └── سلطان (P008)
    """
    return [
        FamilyMember(id='P001', first_name='شايع', generation=1, full_name_en='Shaye'),
        FamilyMember(id='P002', first_name='عبدالله', father_id='P001', generation=2,
                     full_name_en='Abdullah bin Shaye'),
        FamilyMember(id='P003', first_name='محمد', father_id='P001', generation=2, branch='محمد'),
        FamilyMember(id='P004', first_name='ابراهيم', father_id='P002', generation=3),
        FamilyMember(id='P005', first_name='صالح', father_id='P002', generation=3),
        FamilyMember(id='P006', first_name='ابراهيم', father_id='P003', generation=3, branch='محمد'),
        FamilyMember(id='P007', first_name='فهد', father_id='P004', generation=4),
        FamilyMember(id='P008', first_name='سلطان', father_id='P006', generation=4, branch='محمد'),
        FamilyMember(id='P009', first_name='نورة', gender=FEMALE, father_id='P004', generation=4),
        FamilyMember(id='P010', first_name='خالد', father_id='P005', generation=4, status=DECEASED),
    ]


@pytest.fixture
def family_tree():
    """Ten-member tree with two main branches."""
    return build_tree()


@pytest.fixture
def members_file(tmp_path, family_tree):
    """The family tree written as a camelCase JSON snapshot."""
    path = tmp_path / 'members.json'
    path.write_text(
        json.dumps([m.to_dict() for m in family_tree], ensure_ascii=False),
        encoding='utf-8'
    )
    return path
