"""
Scoring Models

The score record derived from one audit record, with its breakdown, legal
compliance verdicts and recommendations. Every model is a plain dataclass
with a JSON-compatible to_dict().
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .types import ComplianceStatus, Priority, Rating, RiskLevel


@dataclass(frozen=True)
class ScoreBreakdown:
    """Base score, bonuses and the points deducted per severity"""

    base_score: float
    aaa_bonus: int
    sector_bonus: int
    deductions: Dict[str, float]

    @property
    def bonuses(self) -> int:
        return self.aaa_bonus + self.sector_bonus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_score": self.base_score,
            "bonuses": self.bonuses,
            "bonus_detail": {"aaa_practices": self.aaa_bonus, "care_sector_practices": self.sector_bonus},
            "deductions": dict(self.deductions),
        }


@dataclass(frozen=True)
class WCAGVerdict:
    level: Optional[str]
    compliant: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"level": self.level or "None", "compliant": self.compliant}


@dataclass(frozen=True)
class LegalCompliance:
    uk_public_sector_regulations_2018: bool
    equality_act_2010: bool
    cqc_digital_standards: bool
    overall_status: ComplianceStatus
    risk_level: RiskLevel

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uk_public_sector_regulations_2018": self.uk_public_sector_regulations_2018,
            "equality_act_2010": self.equality_act_2010,
            "cqc_digital_standards": self.cqc_digital_standards,
            "overall_status": self.overall_status.value,
            "risk_level": self.risk_level.value,
        }


@dataclass(frozen=True)
class Recommendation:
    priority: Priority
    action: str
    reason: str
    estimated_days: int
    expected_score_gain: Optional[int] = None
    current_score: Optional[int] = None
    target_score: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "priority": self.priority.value,
            "action": self.action,
            "reason": self.reason,
            "estimated_days": self.estimated_days,
        }
        if self.expected_score_gain is not None:
            data["expected_score_gain"] = self.expected_score_gain
        if self.current_score is not None:
            data["current_score"] = self.current_score
            data["target_score"] = self.target_score
        return data


@dataclass(frozen=True)
class ScoreRecord:
    """Score for one audit; a pure function of the audit's issue counts"""

    audit_id: str
    score: int
    rating: Rating
    breakdown: ScoreBreakdown
    issues: Dict[str, int]
    wcag_level: WCAGVerdict
    legal_compliance: LegalCompliance
    recommendations: List[Recommendation] = field(default_factory=list)
    url: Optional[str] = None

    @property
    def rating_description(self) -> str:
        return self.rating.description

    def to_dict(self) -> Dict[str, Any]:
        return {
            "audit_id": self.audit_id,
            "url": self.url,
            "score": self.score,
            "rating": self.rating.value,
            "rating_description": self.rating_description,
            "breakdown": self.breakdown.to_dict(),
            "issues": dict(self.issues),
            "wcag_level": self.wcag_level.to_dict(),
            "legal_compliance": self.legal_compliance.to_dict(),
            "recommendations": [r.to_dict() for r in self.recommendations],
        }
