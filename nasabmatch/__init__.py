"""nasabmatch - Place new people in an Arabic patronymic family tree from partial ancestor names."""

__version__ = "0.1.0"

from .core.member import FamilyMember, load_members
from .errors import NasabMatchError, MissingRequiredField, InvalidConfiguration, CyclicLineageError
from .matching import MatchConfig, NameInput, MatchCandidate, MatchResult, find_matches

__all__ = [
    'FamilyMember',
    'load_members',
    'NasabMatchError',
    'MissingRequiredField',
    'InvalidConfiguration',
    'CyclicLineageError',
    'MatchConfig',
    'NameInput',
    'MatchCandidate',
    'MatchResult',
    'find_matches',
]
