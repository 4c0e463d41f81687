"""Exceptions raised by the placement engine."""

from typing import List, Optional


class NasabMatchError(Exception):
    """Base class for all nasabmatch errors."""


class MissingRequiredField(NasabMatchError, ValueError):
    """A required name input field is missing or blank."""

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Required field is missing: {field}")


class InvalidConfiguration(NasabMatchError, ValueError):
    """Match configuration has out-of-range weights or thresholds."""


class CyclicLineageError(NasabMatchError):
    """A parent chain loops back on itself."""

    def __init__(self, member_id: str, cycle: List[str]):
        self.member_id = member_id
        self.cycle = cycle
        super().__init__(
            f"Cyclic lineage detected while walking ancestors of {member_id}: "
            f"{' -> '.join(cycle)}"
        )
