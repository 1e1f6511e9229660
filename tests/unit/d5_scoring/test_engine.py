"""
Tests for the accessibility scoring engine
"""
import json

import pytest

from core.exceptions import NotFoundError
from core.store import KeyedStore
from d5_scoring.engine import (
    ScoringEngine,
    check_legal_compliance,
    determine_wcag_level,
    has_aaa_practices,
    round_half_up,
    score_counts,
)
from d5_scoring.types import ComplianceStatus, Priority, Rating, RiskLevel
from tests.conftest import make_record

pytestmark = pytest.mark.unit


def counts(critical=0, serious=0, moderate=0, minor=0):
    return {
        "critical": critical,
        "serious": serious,
        "moderate": moderate,
        "minor": minor,
        "total": critical + serious + moderate + minor,
    }


class TestScoreCounts:
    def test_mixed_issues(self):
        """1 critical, 2 serious, 3 moderate, 4 minor deducts 20 points"""
        result = score_counts("a1", counts(1, 2, 3, 4))

        assert result.breakdown.base_score == 80
        assert result.breakdown.deductions == {"critical": 10, "serious": 6, "moderate": 3, "minor": 1.0}
        assert result.breakdown.bonuses == 0
        assert result.score == 80
        assert result.rating is Rating.GOOD

        legal = result.legal_compliance
        assert legal.overall_status is ComplianceStatus.PARTIAL_COMPLIANCE
        assert legal.risk_level is RiskLevel.MEDIUM
        assert legal.uk_public_sector_regulations_2018 is False
        assert legal.equality_act_2010 is True
        assert legal.cqc_digital_standards is True

        assert result.wcag_level.level is None
        assert result.wcag_level.compliant is False

        assert [r.priority for r in result.recommendations] == [Priority.P0, Priority.P1, Priority.P1]

    def test_clean_page(self):
        """No issues earns the capped AAA bonus"""
        result = score_counts("a2", counts())

        assert result.score == 100
        assert result.breakdown.aaa_bonus == 5
        assert result.rating is Rating.OUTSTANDING
        assert result.legal_compliance.overall_status is ComplianceStatus.COMPLIANT
        assert result.legal_compliance.risk_level is RiskLevel.LOW
        assert result.wcag_level.level == "AA"
        assert result.recommendations == []

    def test_rounds_half_up(self):
        """96.5 rounds to 97, not banker's 96"""
        result = score_counts("a3", counts(serious=1, minor=2))

        assert result.breakdown.base_score == 96.5
        assert result.breakdown.aaa_bonus == 0
        assert result.score == 97

    def test_serious_only_is_compliant_at_85(self):
        result = score_counts("a4", counts(serious=5))

        assert result.score == 85
        assert result.legal_compliance.overall_status is ComplianceStatus.COMPLIANT
        assert result.legal_compliance.uk_public_sector_regulations_2018 is True
        assert result.wcag_level.level == "A"

    def test_score_floors_at_zero(self):
        result = score_counts("a5", counts(critical=20))

        assert result.score == 0
        assert result.breakdown.base_score == 0
        assert result.rating is Rating.CRITICAL
        assert result.legal_compliance.overall_status is ComplianceStatus.NON_COMPLIANT
        assert result.legal_compliance.risk_level is RiskLevel.HIGH

    def test_bonus_capped_at_max(self):
        result = score_counts("a6", counts(moderate=4, minor=1))
        assert result.breakdown.aaa_bonus == 5
        assert result.score == 100

    def test_five_moderate_loses_bonus(self):
        result = score_counts("a7", counts(moderate=5))
        assert result.breakdown.aaa_bonus == 0
        assert result.score == 95

    @pytest.mark.parametrize("severity", ["critical", "serious", "moderate", "minor"])
    @pytest.mark.parametrize("base", [{}, {"critical": 1, "serious": 1, "moderate": 2, "minor": 3}])
    def test_more_issues_never_raise_score(self, severity, base):
        """Adding issues of one severity, others held fixed, never raises the score"""
        previous = score_counts("m", counts(**base)).score
        for extra in range(1, 30):
            bucket = dict(base)
            bucket[severity] = bucket.get(severity, 0) + extra
            current = score_counts("m", counts(**bucket)).score
            assert current <= previous
            previous = current

    def test_to_dict_is_json_compatible(self):
        data = score_counts("a8", counts(1, 0, 0, 0), url="https://example.com").to_dict()

        assert json.loads(json.dumps(data)) == data
        assert data["score"] == 90
        assert data["rating"] == "OUTSTANDING"
        assert data["wcag_level"] == {"level": "None", "compliant": False}
        assert data["url"] == "https://example.com"


class TestRules:
    @pytest.mark.parametrize(
        "score,rating",
        [
            (100, Rating.OUTSTANDING),
            (90, Rating.OUTSTANDING),
            (89, Rating.GOOD),
            (75, Rating.GOOD),
            (74, Rating.REQUIRES_IMPROVEMENT),
            (60, Rating.REQUIRES_IMPROVEMENT),
            (59, Rating.INADEQUATE),
            (40, Rating.INADEQUATE),
            (39, Rating.CRITICAL),
            (0, Rating.CRITICAL),
        ],
    )
    def test_rating_bands(self, score, rating):
        assert Rating.from_score(score) is rating

    def test_round_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(84.49) == 84

    def test_aaa_practices(self):
        assert has_aaa_practices(counts(moderate=4)) is True
        assert has_aaa_practices(counts(serious=1)) is False
        assert has_aaa_practices(counts(moderate=5)) is False

    def test_wcag_level(self):
        assert determine_wcag_level(counts(minor=10)).level == "AA"
        assert determine_wcag_level(counts(serious=1)).level == "A"
        assert determine_wcag_level(counts(critical=1)).compliant is False

    def test_critical_blocks_compliance_above_threshold(self):
        """A single critical issue at 90 is partial, and fails the public sector check"""
        legal = check_legal_compliance(90, counts(critical=1))
        assert legal.overall_status is ComplianceStatus.PARTIAL_COMPLIANCE
        assert legal.uk_public_sector_regulations_2018 is False
        assert legal.equality_act_2010 is True

    def test_thresholds(self):
        assert check_legal_compliance(69, counts()).equality_act_2010 is False
        assert check_legal_compliance(70, counts()).equality_act_2010 is True
        assert check_legal_compliance(74, counts()).cqc_digital_standards is False
        assert check_legal_compliance(75, counts()).uk_public_sector_regulations_2018 is True


class TestScoringEngine:
    @pytest.fixture
    def engine(self, mock_metrics):
        return ScoringEngine(store=KeyedStore("Score"), metrics_collector=mock_metrics)

    def test_score_record_is_stored(self, engine, mock_metrics):
        record = make_record({"critical": 1, "serious": 2, "moderate": 3, "minor": 4})

        result = engine.score(record)

        assert result.audit_id == record.id
        assert result.url == record.url
        assert result.score == 80
        assert result.issues["total"] == 10
        assert engine.get_score(record.id) is result
        mock_metrics.track_score.assert_called_once_with("GOOD")

    def test_scoring_is_idempotent(self, engine):
        record = make_record({"serious": 3, "minor": 7})
        assert engine.score(record) == engine.score(record)

    def test_unknown_score(self, engine):
        with pytest.raises(NotFoundError) as exc_info:
            engine.get_score("abc")
        assert exc_info.value.message == "Score not found: abc"
