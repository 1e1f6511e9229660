"""
Recommendation generator

Turns a score and its issue counts into prioritised next steps, most
urgent first.
"""
import math
from typing import Dict, List

from .constants import (
    COMPLIANCE_TARGET_SCORE,
    DAYS_PER_CRITICAL,
    DAYS_PER_MODERATE,
    DAYS_PER_SERIOUS,
    MODERATE_RECOMMENDATION_THRESHOLD,
    POINTS_PER_COMPLIANCE_DAY,
    SEVERITY_DEDUCTIONS,
)
from .models import Recommendation
from .types import Priority


def generate_recommendations(score: int, counts: Dict[str, int]) -> List[Recommendation]:
    critical = counts.get("critical", 0)
    serious = counts.get("serious", 0)
    moderate = counts.get("moderate", 0)
    recommendations = []

    if critical > 0:
        recommendations.append(
            Recommendation(
                priority=Priority.P0,
                action=f"Fix {critical} critical issue(s) immediately",
                reason="Legal risk and user safety concerns",
                estimated_days=math.ceil(critical * DAYS_PER_CRITICAL),
                expected_score_gain=int(critical * SEVERITY_DEDUCTIONS["critical"]),
            )
        )

    if serious > 0:
        recommendations.append(
            Recommendation(
                priority=Priority.P1,
                action=f"Address {serious} serious issue(s)",
                reason="Major barriers preventing disabled users from accessing content",
                estimated_days=math.ceil(serious * DAYS_PER_SERIOUS),
                expected_score_gain=int(serious * SEVERITY_DEDUCTIONS["serious"]),
            )
        )

    if score < COMPLIANCE_TARGET_SCORE:
        recommendations.append(
            Recommendation(
                priority=Priority.P1,
                action=f"Achieve legal compliance ({COMPLIANCE_TARGET_SCORE}+ score)",
                reason="Meet UK Public Sector Regulations 2018 and CQC standards",
                estimated_days=math.ceil((COMPLIANCE_TARGET_SCORE - score) / POINTS_PER_COMPLIANCE_DAY),
                current_score=score,
                target_score=COMPLIANCE_TARGET_SCORE,
            )
        )

    if moderate > MODERATE_RECOMMENDATION_THRESHOLD:
        recommendations.append(
            Recommendation(
                priority=Priority.P2,
                action=f"Improve usability by fixing {moderate} moderate issue(s)",
                reason="Enhance user experience for all users",
                estimated_days=math.ceil(moderate * DAYS_PER_MODERATE),
                expected_score_gain=int(moderate * SEVERITY_DEDUCTIONS["moderate"]),
            )
        )

    return recommendations
