"""Name normalization utilities."""

from .arabic_normalizer import (
    normalize_name,
    are_known_variations,
    get_all_normalized_forms,
    phonetic_key,
    phonetic_match,
    split_compound_name,
    normalize_compound_name,
    name_contains,
    get_core_name,
    is_arabic,
)

__all__ = [
    'normalize_name',
    'are_known_variations',
    'get_all_normalized_forms',
    'phonetic_key',
    'phonetic_match',
    'split_compound_name',
    'normalize_compound_name',
    'name_contains',
    'get_core_name',
    'is_arabic',
]
