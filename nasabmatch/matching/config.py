"""Configuration for the ancestor matching algorithm."""

import math
from dataclasses import dataclass, asdict, fields
from typing import Dict, Any, Optional

from ..errors import InvalidConfiguration

_CAMEL_KEYS = {
    'fatherWeight': 'father_weight',
    'grandfatherWeight': 'grandfather_weight',
    'greatGrandfatherWeight': 'great_grandfather_weight',
    'minimumTotalScore': 'minimum_total_score',
    'minimumFatherScore': 'minimum_father_score',
    'includeLowConfidence': 'include_low_confidence',
}


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


@dataclass(frozen=True)
class MatchConfig:
    """Weights and thresholds for ancestor matching.

    Weights need not sum to 100; scores are renormalized over the ancestor
    levels that were actually evaluated.
    """

    # Weight for each ancestor level
    father_weight: float = 40
    grandfather_weight: float = 35
    great_grandfather_weight: float = 25

    # Minimum scores (0-100) to keep a candidate
    minimum_total_score: float = 40
    minimum_father_score: float = 70

    include_low_confidence: bool = True

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise InvalidConfiguration if any weight or threshold is out of range."""
        for name in ('father_weight', 'grandfather_weight', 'great_grandfather_weight'):
            value = getattr(self, name)
            if not _is_number(value) or value <= 0:
                raise InvalidConfiguration(f"{name} must be a positive number, got {value!r}")

        for name in ('minimum_total_score', 'minimum_father_score'):
            value = getattr(self, name)
            if not _is_number(value) or not 0 <= value <= 100:
                raise InvalidConfiguration(f"{name} must be between 0 and 100, got {value!r}")

        if not isinstance(self.include_low_confidence, bool):
            raise InvalidConfiguration(
                f"include_low_confidence must be a boolean, got {self.include_low_confidence!r}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, overrides: Optional[Dict[str, Any]] = None) -> 'MatchConfig':
        """
        Build a config from defaults plus overrides.

        Keys may be snake_case or the host's camelCase names. None values
        keep the default.
        """
        if not overrides:
            return cls()

        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in overrides.items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in known:
                raise InvalidConfiguration(f"Unknown configuration option: {key}")
            if value is not None:
                values[name] = value

        return cls(**values)


DEFAULT_CONFIG = MatchConfig()
