"""Core data model for the family tree snapshot."""

from .member import (
    FamilyMember,
    load_members,
    build_member_map,
    MALE,
    FEMALE,
    LIVING,
    DECEASED,
    DEFAULT_FAMILY_NAME,
    DEFAULT_FAMILY_NAME_EN,
)

__all__ = [
    'FamilyMember',
    'load_members',
    'build_member_map',
    'MALE',
    'FEMALE',
    'LIVING',
    'DECEASED',
    'DEFAULT_FAMILY_NAME',
    'DEFAULT_FAMILY_NAME_EN',
]
