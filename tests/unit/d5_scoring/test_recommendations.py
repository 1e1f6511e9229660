"""
Tests for recommendation generation
"""
import pytest

from d5_scoring.recommendations import generate_recommendations
from d5_scoring.types import Priority

pytestmark = pytest.mark.unit


class TestGenerateRecommendations:
    def test_no_issues_no_recommendations(self):
        assert generate_recommendations(100, {"critical": 0, "serious": 0, "moderate": 0, "minor": 0}) == []

    def test_full_ordering(self):
        """P0 critical, P1 serious, P1 compliance, then P2 moderate"""
        recs = generate_recommendations(40, {"critical": 3, "serious": 4, "moderate": 6, "minor": 0})

        assert [r.action for r in recs] == [
            "Fix 3 critical issue(s) immediately",
            "Address 4 serious issue(s)",
            "Achieve legal compliance (85+ score)",
            "Improve usability by fixing 6 moderate issue(s)",
        ]
        assert [r.priority for r in recs] == [Priority.P0, Priority.P1, Priority.P1, Priority.P2]
        assert [r.priority.priority_order for r in recs] == sorted(r.priority.priority_order for r in recs)

    def test_effort_estimates(self):
        recs = generate_recommendations(40, {"critical": 3, "serious": 4, "moderate": 6})
        critical, serious, compliance, moderate = recs

        assert critical.estimated_days == 2
        assert critical.expected_score_gain == 30
        assert serious.estimated_days == 1
        assert serious.expected_score_gain == 12
        assert compliance.estimated_days == 9
        assert compliance.current_score == 40
        assert compliance.target_score == 85
        assert moderate.estimated_days == 1
        assert moderate.expected_score_gain == 6

    def test_five_moderate_not_recommended(self):
        recs = generate_recommendations(95, {"moderate": 5})
        assert recs == []

    def test_compliant_score_skips_compliance_step(self):
        recs = generate_recommendations(85, {"serious": 5})
        assert [r.action for r in recs] == ["Address 5 serious issue(s)"]

    def test_to_dict_omits_unset_fields(self):
        serious, compliance = generate_recommendations(80, {"serious": 1})

        assert "current_score" not in serious.to_dict()
        assert compliance.to_dict() == {
            "priority": "P1",
            "action": "Achieve legal compliance (85+ score)",
            "reason": "Meet UK Public Sector Regulations 2018 and CQC standards",
            "estimated_days": 1,
            "current_score": 80,
            "target_score": 85,
        }
