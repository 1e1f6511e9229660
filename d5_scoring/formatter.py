"""
Score card formatter

Renders a ScoreRecord as the plain-text score card used by the CLI and
the tool dispatcher.
"""
from typing import List

from .models import ScoreRecord

SEVERITY_LINES = [
    ("critical", "Critical (Must Fix)"),
    ("serious", "Serious (Should Fix)"),
    ("moderate", "Moderate (Nice to Fix)"),
    ("minor", "Minor (Polish)"),
]


def _points(value: float) -> str:
    # 0.25-point deductions are the only fractional ones
    return f"{value:g}"


def _verdict(passed: bool) -> str:
    return "PASS" if passed else "FAIL"


def format_score_summary(score: ScoreRecord) -> str:
    """Plain-text score card: score, deductions, legal status, next steps"""
    legal = score.legal_compliance
    lines: List[str] = [
        "ACCESSIBILITY SCORE",
        "",
        f"SCORE: {score.score}/100 - {score.rating.value}",
        score.rating_description,
    ]
    if score.url:
        lines.append(f"URL: {score.url}")

    lines += ["", "ISSUE BREAKDOWN:"]
    for severity, label in SEVERITY_LINES:
        count = score.issues.get(severity, 0)
        deduction = score.breakdown.deductions.get(severity, 0)
        lines.append(f"- {label + ':':<24} {count} issues  [-{_points(deduction)} points]")
    if score.breakdown.bonuses:
        lines.append(f"- Bonuses: +{score.breakdown.bonuses} points")

    lines += [
        "",
        "UK LEGAL COMPLIANCE:",
        f"- Public Sector Regulations 2018: {_verdict(legal.uk_public_sector_regulations_2018)}",
        f"- Equality Act 2010: {_verdict(legal.equality_act_2010)}",
        f"- CQC Digital Standards: {_verdict(legal.cqc_digital_standards)}",
        f"- Overall Status: {legal.overall_status.value}",
        f"- Overall Risk Level: {legal.risk_level.value}",
        "",
        "NEXT STEPS:",
    ]
    if score.recommendations:
        for i, rec in enumerate(score.recommendations, 1):
            lines.append(f"{i}. [{rec.priority.value}] {rec.action} ({rec.estimated_days} days)")
    else:
        lines.append("No action required.")

    wcag = score.wcag_level
    lines += ["", f"WCAG Compliance Level: {wcag.level or 'None'} ({'compliant' if wcag.compliant else 'not compliant'})"]
    return "\n".join(lines)
