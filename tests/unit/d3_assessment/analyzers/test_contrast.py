"""
Tests for the color contrast analyzer
"""
import pytest

from d3_assessment.analyzers.contrast import (
    TEXT_STYLES_SCRIPT,
    ContrastAnalyzer,
    contrast_ratio,
    is_large_text,
    parse_color,
    required_ratio,
    suggest_fix,
)
from d3_assessment.models import AnalysisContext
from d3_assessment.types import Severity, WCAGLevel

pytestmark = pytest.mark.unit

WHITE = "rgb(255, 255, 255)"


def text(color, background=WHITE, font_size=16, weight="400", sample="Book a visit"):
    return {
        "color": color,
        "backgroundColor": background,
        "fontSize": font_size,
        "fontWeight": weight,
        "text": sample,
        "tagName": "p",
    }


class TestColorMath:
    def test_parse_color_formats(self):
        assert parse_color("rgb(255, 0, 10)") == (255, 0, 10)
        assert parse_color("rgba(1, 2, 3, 0.5)") == (1, 2, 3)
        assert parse_color("#fff") == (255, 255, 255)
        assert parse_color("#1F2937") == (31, 41, 55)
        assert parse_color("hsl(0, 0%, 0%)") is None
        assert parse_color(None) is None

    def test_black_on_white_is_21(self):
        assert contrast_ratio((0, 0, 0), (255, 255, 255)) == pytest.approx(21.0)

    def test_ratio_is_symmetric(self):
        a, b = (119, 119, 119), (250, 240, 230)
        assert contrast_ratio(a, b) == pytest.approx(contrast_ratio(b, a))
        assert contrast_ratio(a, a) == pytest.approx(1.0)

    @pytest.mark.parametrize(
        "size,weight,expected",
        [
            (24, "400", True),
            (18.67, "700", True),
            (18.67, "bold", True),
            (18, "700", False),
            (16, "400", False),
            (None, "700", False),
        ],
    )
    def test_large_text(self, size, weight, expected):
        assert is_large_text(size, weight) is expected

    def test_required_ratios(self):
        assert required_ratio(WCAGLevel.AA, False) == 4.5
        assert required_ratio(WCAGLevel.AA, True) == 3.0
        assert required_ratio(WCAGLevel.AAA, False) == 7.0
        assert required_ratio(WCAGLevel.AAA, True) == 4.5


class TestSuggestFix:
    def test_darkens_text_first(self):
        fix = suggest_fix((119, 119, 119), (255, 255, 255), 4.5)

        assert fix["method"] == "Darken text color"
        assert fix["new_text_color"] == "rgb(69, 69, 69)"
        assert fix["new_ratio"] >= 4.5

    def test_lightens_background_when_text_cannot_darken(self):
        fix = suggest_fix((0, 0, 0), (60, 60, 60), 7.0)

        assert fix["method"] == "Lighten background color"
        assert fix["new_ratio"] >= 7.0

    def test_falls_back_to_high_contrast_pair(self):
        fix = suggest_fix((119, 119, 119), (255, 255, 255), 25)

        assert fix["method"] == "Use high contrast colors"
        assert fix["new_text_color"] == "#1F2937"
        assert fix["new_background_color"] == "#FFFFFF"


class TestContrastAnalyzer:
    @pytest.fixture
    def analyzer(self):
        return ContrastAnalyzer()

    def test_grey_text_is_serious(self, analyzer):
        issues, checked = analyzer.evaluate_pairs([text("rgb(119, 119, 119)")], WCAGLevel.AA)

        assert checked == 1
        assert len(issues) == 1
        issue = issues[0]
        assert issue.type == "insufficient-contrast"
        assert issue.severity is Severity.SERIOUS
        assert issue.wcag_tags == ("1.4.3",)
        assert issue.evidence["actual_ratio"] == 4.48
        assert issue.evidence["required_ratio"] == 4.5
        assert issue.evidence["fix"]["new_text_color"] == "rgb(69, 69, 69)"

    def test_very_low_contrast_is_critical(self, analyzer):
        issues, _ = analyzer.evaluate_pairs([text("rgb(200, 200, 200)")], WCAGLevel.AA)

        assert issues[0].severity is Severity.CRITICAL
        assert issues[0].evidence["actual_ratio"] == 1.67

    def test_large_text_passes_at_lower_ratio(self, analyzer):
        issues, _ = analyzer.evaluate_pairs([text("rgb(119, 119, 119)", font_size=24)], WCAGLevel.AA)
        assert issues == []

    def test_aaa_level_tags(self, analyzer):
        issues, _ = analyzer.evaluate_pairs([text("rgb(89, 89, 89)")], WCAGLevel.AAA)

        assert issues[0].wcag_tags == ("1.4.3", "1.4.6")
        assert issues[0].evidence["level"] == "AAA"

    def test_duplicate_pairs_checked_once(self, analyzer):
        elements = [text("rgb(119, 119, 119)", sample=f"line {i}") for i in range(5)]
        issues, checked = analyzer.evaluate_pairs(elements, WCAGLevel.AA)

        assert checked == 1
        assert len(issues) == 1
        assert issues[0].evidence["sample"] == "line 0"

    def test_unparseable_and_missing_colors_skipped(self, analyzer):
        elements = [text("color(display-p3 1 0 0)"), {"color": "rgb(0, 0, 0)"}]
        issues, checked = analyzer.evaluate_pairs(elements, WCAGLevel.AA)

        assert issues == []
        assert checked == 1

    async def test_analyze_reads_page_styles(self, analyzer, fake_page):
        page = fake_page({TEXT_STYLES_SCRIPT: [text("rgb(0, 0, 0)"), text("rgb(200, 200, 200)")]})
        context = AnalysisContext(url=page.url, wcag_level=WCAGLevel.A, options={"selector": "main"})

        result = await analyzer.analyze(page, context)

        assert page.evaluations == [(TEXT_STYLES_SCRIPT, "main")]
        assert result.tool == "contrast-checker"
        assert result.summary == {"total_checked": 2, "failed": 1}
        assert result.issues[0].evidence["level"] == "AA"

    async def test_analyze_empty_page(self, analyzer, fake_page, context):
        result = await analyzer.analyze(fake_page({TEXT_STYLES_SCRIPT: None}), context)
        assert result.issues == []
        assert result.summary == {"total_checked": 0, "failed": 0}
