"""
Scoring Types and Enumerations

Rating bands, legal compliance verdicts and recommendation priorities for
the accessibility score.
"""

from enum import Enum


class Rating(Enum):
    """
    Rating band for a 0-100 accessibility score

    Bands follow the CQC inspection vocabulary.
    """

    OUTSTANDING = "OUTSTANDING"  # 90-100
    GOOD = "GOOD"  # 75-89
    REQUIRES_IMPROVEMENT = "REQUIRES IMPROVEMENT"  # 60-74
    INADEQUATE = "INADEQUATE"  # 40-59
    CRITICAL = "CRITICAL"  # < 40

    @classmethod
    def from_score(cls, score: int) -> "Rating":
        if score >= 90:
            return cls.OUTSTANDING
        if score >= 75:
            return cls.GOOD
        if score >= 60:
            return cls.REQUIRES_IMPROVEMENT
        if score >= 40:
            return cls.INADEQUATE
        return cls.CRITICAL

    @property
    def description(self) -> str:
        descriptions = {
            Rating.OUTSTANDING: "Accessible to virtually everyone.",
            Rating.GOOD: "Minor improvements needed. Most users can access content.",
            Rating.REQUIRES_IMPROVEMENT: "Significant barriers exist. Some disabled users cannot use site.",
            Rating.INADEQUATE: "Major accessibility failures. Many disabled users excluded.",
            Rating.CRITICAL: "Immediate action required. Legal risk, user safety concerns.",
        }
        return descriptions[self]


class ComplianceStatus(Enum):
    COMPLIANT = "COMPLIANT"
    PARTIAL_COMPLIANCE = "PARTIAL_COMPLIANCE"
    NON_COMPLIANT = "NON_COMPLIANT"


class RiskLevel(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Priority(Enum):
    """Recommendation priority; P0 is most urgent"""

    P0 = "P0"
    P1 = "P1"
    P2 = "P2"

    @property
    def priority_order(self) -> int:
        return int(self.value[1:])
