"""Arabic name normalization for matching.

Canonicalizes Arabic (and Latin-script) given names so that spellings which
differ only by diacritics, hamza carriers, taa marbuta, alef maksura or
spacing compare equal. Also provides:
- A curated table of known alternate spellings and nicknames
- A phonetic key (consonant skeleton) for sound-alike comparison
- Compound name helpers (عبد الله / عبدالله)

Every function here is pure; the tables are module constants.
"""

import re
import unicodedata
from typing import Dict, FrozenSet, List, Optional, Tuple

import phonetics

ARABIC_TATWEEL = '\u0640'

# Single-character folds applied before diacritic stripping
CHARACTER_FOLDS: Dict[str, str] = {
    # Alef variants
    'أ': 'ا',  # أ -> ا (hamza above)
    'إ': 'ا',  # إ -> ا (hamza below)
    'آ': 'ا',  # آ -> ا (madda)
    'ٱ': 'ا',  # ٱ -> ا (wasla)
    'ٲ': 'ا',  # ٲ -> ا (wavy hamza above)
    'ٳ': 'ا',  # ٳ -> ا (wavy hamza below)
    # Hamza carriers
    'ؤ': 'و',  # ؤ -> و
    'ئ': 'ي',  # ئ -> ي
    'ء': '',        # standalone ء
    # Yeh variants
    'ى': 'ي',  # ى -> ي (alef maksura)
    'ی': 'ي',  # ی -> ي (Farsi yeh)
    'ے': 'ي',  # ے -> ي (yeh barree)
    # Taa marbuta
    'ة': 'ه',  # ة -> ه
    # Kaf variants
    'ک': 'ك',  # ک -> ك (Farsi kaf)
}

_FOLD_TABLE = str.maketrans(CHARACTER_FOLDS)
_WHITESPACE = re.compile(r'\s+')
_ARABIC_LETTER = re.compile(r'[\u0600-\u06FF\u0750-\u077F\uFB50-\uFDFF\uFE70-\uFEFF]')

# Known equivalent given-name spellings and nicknames.
# Each group is a set of names that refer to the same given name.
NAME_VARIATIONS: Dict[str, List[str]] = {
    'محمد': ['محمد', 'حمد', 'حمود', 'حمدان', 'محمود', 'حميد', 'حامد', 'أحمد'],
    'أحمد': ['أحمد', 'احمد', 'حمد'],
    'عبدالله': ['عبدالله', 'عبد الله', 'عبداللة', 'عبد اللة'],
    'عبدالرحمن': ['عبدالرحمن', 'عبد الرحمن', 'عبدالرحمان', 'عبد الرحمان'],
    'عبدالعزيز': ['عبدالعزيز', 'عبد العزيز'],
    'عبدالكريم': ['عبدالكريم', 'عبد الكريم'],
    'عبدالملك': ['عبدالملك', 'عبد الملك'],
    'عبدالمجيد': ['عبدالمجيد', 'عبد المجيد'],
    'صالح': ['صالح', 'صلاح'],
    'فهد': ['فهد', 'فهاد'],
    'خالد': ['خالد', 'خلدون', 'مخلد'],
    'سعود': ['سعود', 'سعد', 'سعيد', 'مسعود'],
    'ناصر': ['ناصر', 'نصر', 'منصور', 'نصار'],
    'فيصل': ['فيصل', 'فصل'],
    'تركي': ['تركي', 'ترك'],
    'بندر': ['بندر', 'بدر'],
    'نورة': ['نورة', 'نوره', 'نور', 'نورا', 'نورى'],
    'فاطمة': ['فاطمة', 'فاطمه', 'فطوم', 'فطيمة'],
    'سارة': ['سارة', 'ساره', 'سارا'],
    'لطيفة': ['لطيفة', 'لطيفه'],
    'منيرة': ['منيرة', 'منيره', 'منير'],
}

# Articulation classes for the Arabic consonant skeleton
PHONETIC_GROUPS: Dict[str, str] = {
    # Gutturals
    'ء': '1', 'ه': '1', 'ع': '1', 'ح': '1', 'غ': '1', 'خ': '1',
    # Labials
    'ب': '2', 'ف': '2', 'م': '2',
    # Dentals
    'ت': '3', 'ث': '3', 'د': '3', 'ذ': '3', 'ط': '3', 'ظ': '3',
    # Sibilants
    'س': '4', 'ز': '4', 'ص': '4', 'ض': '4', 'ش': '4', 'ج': '4',
    # Liquids
    'ل': '5', 'ر': '5', 'ن': '5',
    # Velars
    'ك': '6', 'ق': '6',
}

# و and ي are consonants at the start of a word, after a vowel or before
# alef; after a consonant they are long vowels and carry no value.
SEMIVOWEL_CODES: Dict[str, str] = {'و': '2', 'ي': '7'}

# Already in normalized form (أبو -> ابو, آل -> ال)
COMPOUND_PREFIXES = ('عبد', 'ابو', 'ام', 'ابن', 'بن')
CORE_NAME_PREFIXES = ('ابو', 'ام', 'ابن', 'بن', 'ال')


def normalize_name(name: Optional[str]) -> str:
    """
    Canonicalize a name for comparison.

    Folds hamza-bearing alef forms to bare alef, taa marbuta to haa and
    alef maksura to yaa; strips diacritics, tatweel and Latin accents;
    case-folds Latin letters; collapses whitespace.

    Args:
        name: Raw name as typed or stored

    Returns:
        Normalized name ('' for empty input)
    """
    if not name:
        return ""

    normalized = name.strip().translate(_FOLD_TABLE)

    # NFKD splits presentation forms and accented Latin letters; the
    # combining marks (including Arabic harakat) are then dropped.
    decomposed = unicodedata.normalize('NFKD', normalized)
    normalized = ''.join(
        c for c in decomposed
        if unicodedata.category(c) != 'Mn' and c != ARABIC_TATWEEL
    )

    # Decomposition can reintroduce unfolded letters (e.g. from ligatures)
    normalized = normalized.translate(_FOLD_TABLE).casefold()

    return _WHITESPACE.sub(' ', normalized).strip()


def _build_variation_groups() -> Tuple[FrozenSet[str], ...]:
    return tuple(
        frozenset(normalize_name(v) for v in variants)
        for variants in NAME_VARIATIONS.values()
    )


VARIATION_GROUPS = _build_variation_groups()


def get_variation_groups(name: str) -> List[FrozenSet[str]]:
    """Return every curated variation group containing the name."""
    normalized = normalize_name(name)
    if not normalized:
        return []
    return [group for group in VARIATION_GROUPS if normalized in group]


def are_known_variations(name1: str, name2: str) -> bool:
    """True if both names appear together in one curated variation group."""
    norm2 = normalize_name(name2)
    if not norm2:
        return False
    return any(norm2 in group for group in get_variation_groups(name1))


def get_all_normalized_forms(name: str) -> List[str]:
    """
    Get every normalized spelling considered equivalent to a name.

    Useful for building search filters over a member list.
    """
    normalized = normalize_name(name)
    if not normalized:
        return []

    forms = {normalized}
    for group in get_variation_groups(name):
        forms.update(group)

    return sorted(forms)


def is_arabic(text: Optional[str]) -> bool:
    """True if the text contains any Arabic-script letter."""
    return bool(text) and _ARABIC_LETTER.search(text) is not None


def arabic_phonetic_key(name: str) -> str:
    """
    Consonant skeleton of an Arabic name.

    Letters are mapped to articulation classes, alef and long vowels are
    dropped and adjacent repeats of a class are collapsed, so سلطان and
    صلطان share the key '4535' while يوسف ('7242') stays apart from
    سيف ('42').
    """
    normalized = normalize_name(name)
    encoded = []
    last_code = ''
    for i, char in enumerate(normalized):
        if char in SEMIVOWEL_CODES:
            previous = normalized[i - 1] if i else ' '
            following = normalized[i + 1] if i + 1 < len(normalized) else ''
            if previous in PHONETIC_GROUPS and following != 'ا':
                continue
            code = SEMIVOWEL_CODES[char]
        else:
            code = PHONETIC_GROUPS.get(char)
        if code and code != last_code:
            encoded.append(code)
            last_code = code
    return ''.join(encoded)


def phonetic_key(name: str) -> str:
    """
    Phonetic key for a name in either script.

    Arabic names use the consonant skeleton; Latin names use Metaphone.
    """
    if not name:
        return ""
    if is_arabic(name):
        return arabic_phonetic_key(name)

    letters = ''.join(c for c in normalize_name(name) if c.isalpha())
    if not letters:
        return ""
    return phonetics.metaphone(letters)


def phonetic_match(name1: str, name2: str) -> bool:
    """True if both names have the same non-empty phonetic key."""
    key1 = phonetic_key(name1)
    return bool(key1) and key1 == phonetic_key(name2)


def split_compound_name(name: str) -> List[str]:
    """
    Split compound names like "عبدربه" or "عبد الله" into prefix and remainder.

    Returns a single-element list when the name is not a compound.
    """
    if not name:
        return []

    normalized = normalize_name(name)

    parts = normalized.split(' ')
    if len(parts) == 2 and parts[0] in COMPOUND_PREFIXES:
        return parts

    for prefix in COMPOUND_PREFIXES:
        if normalized.startswith(prefix) and len(normalized) > len(prefix):
            remainder = normalized[len(prefix):].strip()
            # A remainder carrying the article (عبدالله) stays whole
            if remainder and not remainder.startswith('ال'):
                return [prefix, remainder]

    return [normalized]


def normalize_compound_name(name: str) -> str:
    """Join compound names to one canonical form ("عبد الله" -> "عبدالله")."""
    parts = split_compound_name(name)
    if len(parts) == 2:
        return ''.join(parts)
    return normalize_name(name)


def name_contains(full_name: str, partial_name: str) -> bool:
    """True if the normalized partial name occurs in the normalized full name."""
    partial = normalize_name(partial_name)
    return bool(partial) and partial in normalize_name(full_name)


def get_core_name(name: str) -> str:
    """Strip kunya/nasab prefixes (ابو, ام, بن, آل ...) from a name."""
    normalized = normalize_name(name)

    for prefix in CORE_NAME_PREFIXES:
        if normalized.startswith(prefix + ' '):
            normalized = normalized[len(prefix) + 1:]

    return normalized.strip()
