"""
Human-readable explanations for match candidates.

Produces bilingual (English / Arabic) text for the confirmation screen:
per-level match details, side-by-side comparison of two candidates, and
advisory validation of the name input.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .matcher import AncestorMatch, MatchCandidate, NameInput
from .name_scorer import Confidence, MatchType

# A candidate is recommended over another only with this score margin
RECOMMENDATION_MARGIN = 10

CONFIDENCE_AR = {
    Confidence.HIGH: 'عالي',
    Confidence.MEDIUM: 'متوسط',
    Confidence.LOW: 'منخفض',
}


@dataclass(slots=True)
class MatchExplanation:
    summary: str
    summary_ar: str
    details: List[str] = field(default_factory=list)
    details_ar: List[str] = field(default_factory=list)


@dataclass(slots=True)
class CandidateComparison:
    differences: List[str] = field(default_factory=list)
    differences_ar: List[str] = field(default_factory=list)
    recommendation: Optional[int] = None  # 1, 2 or None


@dataclass(slots=True)
class InputValidation:
    """Advisory validation result; matching may still run when valid."""
    valid: bool
    errors: List[str] = field(default_factory=list)
    errors_ar: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    warnings_ar: List[str] = field(default_factory=list)


def get_match_explanation(candidate: MatchCandidate) -> MatchExplanation:
    """Explain why a candidate was proposed."""
    explanation = MatchExplanation(
        summary=(
            f"{candidate.match_score:g}% match confidence - "
            f"{candidate.confidence.value} confidence level"
        ),
        summary_ar=(
            f"{candidate.match_score:g}% نسبة التطابق - "
            f"مستوى ثقة {CONFIDENCE_AR[candidate.confidence]}"
        ),
    )

    _explain_father(candidate.father_match, explanation)
    _explain_ancestor(candidate.grandfather_match, 'Grandfather', 'الجد', explanation)
    _explain_ancestor(candidate.great_grandfather_match, 'Great-grandfather', 'جد الأب', explanation)

    return explanation


def compare_candidates(candidate1: MatchCandidate, candidate2: MatchCandidate) -> CandidateComparison:
    """
    Summarize how two candidates differ.

    Recommends one candidate only when its score leads by more than
    RECOMMENDATION_MARGIN points.
    """
    comparison = CandidateComparison()
    diffs, diffs_ar = comparison.differences, comparison.differences_ar

    if candidate1.generation != candidate2.generation:
        diffs.append(f"Generation: {candidate1.generation} vs {candidate2.generation}")
        diffs_ar.append(f"الجيل: {candidate1.generation} مقابل {candidate2.generation}")

    if candidate1.branch != candidate2.branch:
        diffs.append(
            f"Branch: {candidate1.branch or 'Unknown'} vs {candidate2.branch or 'Unknown'}"
        )
        diffs_ar.append(
            f"الفرع: {candidate1.branch or 'غير معروف'} مقابل {candidate2.branch or 'غير معروف'}"
        )

    diffs.append(f"Siblings: {len(candidate1.siblings)} vs {len(candidate2.siblings)}")
    diffs_ar.append(f"الإخوة: {len(candidate1.siblings)} مقابل {len(candidate2.siblings)}")

    diffs.append(f"Uncles/Aunts: {len(candidate1.uncles_aunts)} vs {len(candidate2.uncles_aunts)}")
    diffs_ar.append(
        f"الأعمام/العمات: {len(candidate1.uncles_aunts)} مقابل {len(candidate2.uncles_aunts)}"
    )

    if candidate1.match_score > candidate2.match_score + RECOMMENDATION_MARGIN:
        comparison.recommendation = 1
    elif candidate2.match_score > candidate1.match_score + RECOMMENDATION_MARGIN:
        comparison.recommendation = 2

    return comparison


def validate_input(name_input: NameInput) -> InputValidation:
    """
    Check a name input before matching without raising.

    Missing first or father name makes the input invalid. Missing
    grandfather and great-grandfather names only produce a warning, since
    many real inputs only know the father's name.
    """
    result = InputValidation(valid=True)

    if not name_input.first_name or not name_input.first_name.strip():
        result.errors.append('First name is required')
        result.errors_ar.append('الاسم الأول مطلوب')

    if not name_input.father_name or not name_input.father_name.strip():
        result.errors.append('Father name is required')
        result.errors_ar.append('اسم الأب مطلوب')

    if not _supplied(name_input.grandfather_name) and not _supplied(name_input.great_grandfather_name):
        result.warnings.append('Please provide grandfather name for better matching')
        result.warnings_ar.append('الرجاء إدخال اسم الجد للحصول على تطابق أفضل')

    result.valid = not result.errors
    return result


def _supplied(name: Optional[str]) -> bool:
    return bool(name and name.strip())


def _explain_father(match: AncestorMatch, explanation: MatchExplanation) -> None:
    entered, stored = match.input_name, match.matched_name
    match_type = match.match_result.match_type

    if match_type == MatchType.EXACT:
        explanation.details.append(f'Father name "{entered}" matches exactly with "{stored}"')
        explanation.details_ar.append(f'اسم الأب "{entered}" يتطابق تماماً مع "{stored}"')
    elif match_type == MatchType.NORMALIZED:
        explanation.details.append(f'Father name "{entered}" matches "{stored}" after normalization')
        explanation.details_ar.append(f'اسم الأب "{entered}" يتطابق مع "{stored}" بعد التطبيع')
    elif match_type == MatchType.VARIATION:
        explanation.details.append(f'Father name "{entered}" is a known variation of "{stored}"')
        explanation.details_ar.append(f'اسم الأب "{entered}" هو شكل آخر معروف لـ "{stored}"')
    elif match_type == MatchType.PHONETIC:
        explanation.details.append(f'Father name "{entered}" sounds like "{stored}"')
        explanation.details_ar.append(f'اسم الأب "{entered}" يشبه في النطق "{stored}"')
    else:
        similarity = match.match_result.similarity
        explanation.details.append(
            f'Father name "{entered}" is similar to "{stored}" ({similarity:g}% match)'
        )
        explanation.details_ar.append(
            f'اسم الأب "{entered}" مشابه لـ "{stored}" ({similarity:g}% تطابق)'
        )


def _explain_ancestor(
    match: Optional[AncestorMatch],
    label: str,
    label_ar: str,
    explanation: MatchExplanation
) -> None:
    if match is None:
        return

    entered, stored = match.input_name, match.matched_name
    if match.match_result.is_match:
        explanation.details.append(f'{label} name "{entered}" confirmed as "{stored}"')
        explanation.details_ar.append(f'اسم {label_ar} "{entered}" مؤكد كـ "{stored}"')
    else:
        explanation.details.append(f'{label} name "{entered}" does not match "{stored}"')
        explanation.details_ar.append(f'اسم {label_ar} "{entered}" لا يتطابق مع "{stored}"')
