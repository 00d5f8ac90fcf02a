"""
Confidence scoring for a parsed resume.

The score estimates extraction completeness, not statistical accuracy:

    confidence = satisfied factors / expected factors, clamped to [0.0, 1.0]

Factor table:
  email, full name, phone   1 each, always expected (denominator 3)
  experience                +entry count satisfied, +3 expected (only when entries exist)
  education                 +1 / +1 (only when entries exist)
  skills                    +1 / +1 (only when skills exist)

Format wrappers attach advisory warnings below LOW_CONFIDENCE_THRESHOLD; the
scorer itself never fails a parse.
"""

from typing import List, Optional, Tuple

from resume_import.core.schemas import PersonalInfo, ResumeSections


LOW_CONFIDENCE_THRESHOLD = 0.6

# Typical number of positions on a resume
EXPECTED_EXPERIENCE_ENTRIES = 3

LOW_CONFIDENCE_WARNINGS = [
    "Parsing confidence is below optimal levels",
    "Some information may need manual review",
]

FORMAT_HINTS = {
    "pdf": "Consider reformatting the source document for better extraction",
    "docx": "Consider using simpler formatting for better extraction",
    "txt": "Consider adding clear section headers",
}

# (factor name, satisfied, expected)
Factor = Tuple[str, float, float]


class ConfidenceCalculator:
    """Central place for all extraction confidence logic."""

    @staticmethod
    def personal_factors(personal_info: PersonalInfo) -> List[Factor]:
        return [
            ("email", 1.0 if personal_info.email else 0.0, 1.0),
            ("full_name", 1.0 if personal_info.full_name else 0.0, 1.0),
            ("phone", 1.0 if personal_info.phone else 0.0, 1.0),
        ]

    @staticmethod
    def section_factors(sections: ResumeSections) -> List[Factor]:
        factors: List[Factor] = []
        if sections.experience:
            factors.append(("experience", float(len(sections.experience)), float(EXPECTED_EXPERIENCE_ENTRIES)))
        if sections.education:
            factors.append(("education", 1.0, 1.0))
        if sections.skills:
            factors.append(("skills", 1.0, 1.0))
        return factors

    @classmethod
    def breakdown(cls, personal_info: PersonalInfo, sections: ResumeSections) -> List[Factor]:
        return cls.personal_factors(personal_info) + cls.section_factors(sections)

    @classmethod
    def overall(cls, personal_info: PersonalInfo, sections: ResumeSections) -> float:
        """
        Examples:
            email + name + phone, nothing else -> 3/3 = 1.0
            email only, 1 experience entry -> (1 + 1) / (3 + 3) = 0.33
            nothing -> 0.0
        """
        factors = cls.breakdown(personal_info, sections)
        satisfied = sum(f[1] for f in factors)
        expected = sum(f[2] for f in factors)
        if expected <= 0:
            return 0.0
        return max(0.0, min(1.0, satisfied / expected))

    @staticmethod
    def is_low(confidence: float, threshold: float = LOW_CONFIDENCE_THRESHOLD) -> bool:
        return confidence < threshold

    @classmethod
    def low_confidence_warnings(
        cls,
        source: str,
        confidence: float,
        threshold: Optional[float] = None,
    ) -> List[str]:
        """Advisory warnings for a successful but weak parse; empty when confidence is fine."""
        threshold = LOW_CONFIDENCE_THRESHOLD if threshold is None else threshold
        if not cls.is_low(confidence, threshold):
            return []
        warnings = list(LOW_CONFIDENCE_WARNINGS)
        hint = FORMAT_HINTS.get(source)
        if hint:
            warnings.append(hint)
        return warnings
