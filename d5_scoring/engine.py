"""
Accessibility Scoring Engine

Derives a 0-100 score from an audit record's per-severity issue counts,
rates it, checks it against UK legal thresholds and proposes next steps.

Scoring is a pure function of the summary: scoring the same record twice
gives the same result, and more issues never raise the score.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Optional

from core.config import get_settings
from core.logging import get_logger
from core.metrics import MetricsCollector, get_metrics_collector
from core.store import KeyedStore
from d3_assessment.models import AuditRecord

from .constants import (
    AAA_PRACTICES_BONUS,
    AAA_PRACTICES_MAX_MODERATE,
    CARE_SECTOR_BONUS,
    COMPLIANT_MIN_SCORE,
    CQC_MIN_SCORE,
    EQUALITY_ACT_MIN_SCORE,
    MAX_SCORE,
    PARTIAL_COMPLIANCE_MIN_SCORE,
    PUBLIC_SECTOR_MIN_SCORE,
    SEVERITY_DEDUCTIONS,
)
from .models import LegalCompliance, ScoreBreakdown, ScoreRecord, WCAGVerdict
from .recommendations import generate_recommendations
from .types import ComplianceStatus, Rating, RiskLevel

logger = get_logger(__name__, domain="d5")


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_deductions(counts: Dict[str, int]) -> Dict[str, float]:
    return {severity: counts.get(severity, 0) * points for severity, points in SEVERITY_DEDUCTIONS.items()}


def has_aaa_practices(counts: Dict[str, int]) -> bool:
    return (
        counts.get("critical", 0) == 0
        and counts.get("serious", 0) == 0
        and counts.get("moderate", 0) < AAA_PRACTICES_MAX_MODERATE
    )


def has_care_sector_practices(counts: Dict[str, int]) -> bool:
    # No care-sector best-practice criteria are defined yet
    return False


def determine_wcag_level(counts: Dict[str, int]) -> WCAGVerdict:
    if counts.get("critical", 0) == 0 and counts.get("serious", 0) == 0:
        return WCAGVerdict(level="AA", compliant=True)
    if counts.get("critical", 0) == 0:
        return WCAGVerdict(level="A", compliant=True)
    return WCAGVerdict(level=None, compliant=False)


def check_legal_compliance(score: int, counts: Dict[str, int]) -> LegalCompliance:
    no_critical = counts.get("critical", 0) == 0

    if score >= COMPLIANT_MIN_SCORE and no_critical:
        status, risk = ComplianceStatus.COMPLIANT, RiskLevel.LOW
    elif score >= PARTIAL_COMPLIANCE_MIN_SCORE:
        status, risk = ComplianceStatus.PARTIAL_COMPLIANCE, RiskLevel.MEDIUM
    else:
        status, risk = ComplianceStatus.NON_COMPLIANT, RiskLevel.HIGH

    return LegalCompliance(
        uk_public_sector_regulations_2018=score >= PUBLIC_SECTOR_MIN_SCORE and no_critical,
        equality_act_2010=score >= EQUALITY_ACT_MIN_SCORE,
        cqc_digital_standards=score >= CQC_MIN_SCORE,
        overall_status=status,
        risk_level=risk,
    )


def score_counts(audit_id: str, counts: Dict[str, int], url: Optional[str] = None) -> ScoreRecord:
    """
    Score a set of per-severity issue counts

    Args:
        audit_id: Audit the counts belong to
        counts: critical/serious/moderate/minor (and total) counts
        url: Audited URL, carried through for display

    Returns:
        ScoreRecord with breakdown, verdicts and recommendations
    """
    deductions = calculate_deductions(counts)
    base_score = max(0.0, MAX_SCORE - sum(deductions.values()))

    aaa_bonus = AAA_PRACTICES_BONUS if has_aaa_practices(counts) else 0
    sector_bonus = CARE_SECTOR_BONUS if has_care_sector_practices(counts) else 0
    score = round_half_up(min(MAX_SCORE, base_score + aaa_bonus + sector_bonus))
    rating = Rating.from_score(score)

    return ScoreRecord(
        audit_id=audit_id,
        url=url,
        score=score,
        rating=rating,
        breakdown=ScoreBreakdown(
            base_score=base_score,
            aaa_bonus=aaa_bonus,
            sector_bonus=sector_bonus,
            deductions=deductions,
        ),
        issues=dict(counts),
        wcag_level=determine_wcag_level(counts),
        legal_compliance=check_legal_compliance(score, counts),
        recommendations=generate_recommendations(score, counts),
    )


class ScoringEngine:
    """Scores audit records and keeps the results by audit id"""

    def __init__(
        self,
        store: Optional[KeyedStore[ScoreRecord]] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        if store is None:
            store = KeyedStore("Score", get_settings().store_max_entries)
        self.scores: KeyedStore[ScoreRecord] = store
        self.metrics = metrics_collector or get_metrics_collector()

    def score(self, record: AuditRecord) -> ScoreRecord:
        """Score a completed audit record and store the result"""
        result = score_counts(record.id, record.summary, url=record.url)
        self.scores.put(record.id, result)
        self.metrics.track_score(result.rating.value)

        logger.info(f"Audit {record.id} scored {result.score}/100 ({result.rating.value})")
        return result

    def get_score(self, audit_id: str) -> ScoreRecord:
        """Look up a stored score; raises NotFoundError for unknown ids"""
        return self.scores.require(audit_id)
