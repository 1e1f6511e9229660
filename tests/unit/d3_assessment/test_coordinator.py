"""
Tests for the audit coordinator
"""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from core.exceptions import AnalyzerError, NavigationError, NotFoundError, ValidationError
from core.store import KeyedStore
from d0_browser.manager import BrowserManager
from d0_browser.types import BrowserTarget, NavigationResult
from d3_assessment.analyzers import FULL_AUDIT_ORDER, BaseAnalyzer
from d3_assessment.coordinator import AuditCoordinator, parse_browser, parse_mode, parse_wcag_level
from d3_assessment.models import AnalyzerResult
from d3_assessment.types import AuditMode, Severity, WCAGLevel
from tests.conftest import make_issue
from tests.fixtures.fake_page import FakePage

pytestmark = pytest.mark.unit


class StubAnalyzer(BaseAnalyzer):
    """Analyzer returning canned issues, or raising"""

    def __init__(self, tool, severities=(), error=None, available=True):
        self.tool = tool
        self.severities = severities
        self.error = error
        self.available = available
        self.calls = []

    @property
    def name(self):
        return self.tool

    def is_available(self):
        return self.available

    async def analyze(self, page, context):
        self.calls.append((page, context))
        if self.error:
            raise self.error
        return AnalyzerResult(
            tool=self.tool,
            issues=[make_issue(severity, tool=self.tool) for severity in self.severities],
        )


@pytest.fixture
def page():
    return FakePage()


@pytest.fixture
def browser_manager(page):
    manager = MagicMock()
    manager.navigate_to = AsyncMock(return_value=NavigationResult(page=page, success=True))
    manager.close_all = AsyncMock()
    return manager


@pytest.fixture
def analyzers():
    stubs = {name: StubAnalyzer(name, severities=(Severity.MINOR,)) for name in FULL_AUDIT_ORDER}
    stubs["axe-core"] = StubAnalyzer("axe-core", severities=(Severity.CRITICAL, Severity.SERIOUS))
    stubs["aria-validator"] = StubAnalyzer("aria-validator", severities=(Severity.SERIOUS,))
    stubs["form-auditor"] = StubAnalyzer("form-auditor")
    return stubs


@pytest.fixture
def coordinator(browser_manager, analyzers, mock_metrics):
    return AuditCoordinator(
        browser_manager=browser_manager,
        analyzers=analyzers,
        store=KeyedStore("Audit"),
        metrics_collector=mock_metrics,
    )


class TestParsing:
    def test_parse_values(self):
        assert parse_mode("FULL") is AuditMode.FULL
        assert parse_wcag_level("aaa") is WCAGLevel.AAA
        assert parse_browser("webkit") is BrowserTarget.WEBKIT
        assert parse_mode(AuditMode.SUMMARY) is AuditMode.SUMMARY

    @pytest.mark.parametrize(
        "parser,value,field",
        [(parse_mode, "quick", "mode"), (parse_wcag_level, "B", "wcag_level"), (parse_browser, "edge", "browser")],
    )
    def test_invalid_values(self, parser, value, field):
        with pytest.raises(ValidationError) as exc_info:
            parser(value)
        assert exc_info.value.details["field"] == field


class TestRunAudit:
    async def test_full_audit_runs_in_order(self, coordinator, analyzers, page, mock_metrics):
        record = await coordinator.run_audit("https://example.com", mode="full", browser="chromium", wcag_level="AA")

        assert record.completed is True
        assert list(record.tools_run) == FULL_AUDIT_ORDER
        assert record.tools_failed == {}
        assert [i.tool for i in record.issues][:2] == ["axe-core", "axe-core"]
        assert record.summary == {"critical": 1, "serious": 1, "moderate": 0, "minor": 5, "total": 7}
        assert analyzers["aria-validator"].calls == []
        assert page.closed is True
        assert coordinator.get_audit(record.id) is record
        mock_metrics.track_audit.assert_called_once()
        assert mock_metrics.track_issue.call_count == 7

    async def test_context_carries_options(self, coordinator, analyzers):
        await coordinator.run_audit(
            "https://example.com", mode="full", wcag_level="AAA", options={"start_selector": "#nav"}
        )

        _, context = analyzers["keyboard-tester"].calls[0]
        assert context.wcag_level is WCAGLevel.AAA
        assert context.option("start_selector") == "#nav"

    async def test_summary_mode_runs_axe_only(self, coordinator, analyzers):
        record = await coordinator.run_audit("https://example.com", mode="summary")

        assert record.mode is AuditMode.SUMMARY
        assert list(record.tools_run) == ["axe-core"]
        assert analyzers["contrast-checker"].calls == []

    async def test_analyzer_failure_is_recorded_and_skipped(self, coordinator, analyzers, mock_metrics):
        analyzers["contrast-checker"].error = RuntimeError("Execution context was destroyed")

        record = await coordinator.run_audit("https://example.com", mode="full")

        assert "contrast-checker" not in record.tools_run
        assert record.tools_failed == {"contrast-checker": "contrast-checker failed: Execution context was destroyed"}
        assert len(record.tools_run) == len(FULL_AUDIT_ORDER) - 1
        mock_metrics.track_analyzer.assert_any_call("contrast-checker", status="error")

    async def test_unavailable_analyzer_is_recorded(self, coordinator, analyzers):
        analyzers["pa11y"].available = False

        record = await coordinator.run_audit("https://example.com", mode="full")

        assert record.tools_failed == {"pa11y": "pa11y failed: not available in this environment"}
        assert analyzers["pa11y"].calls == []

    async def test_navigation_failure_aborts(self, coordinator, browser_manager, analyzers, mock_metrics):
        half_open = FakePage()
        browser_manager.navigate_to.return_value = NavigationResult(
            page=half_open, success=False, error="net::ERR_NAME_NOT_RESOLVED"
        )

        with pytest.raises(NavigationError) as exc_info:
            await coordinator.run_audit("https://nowhere.invalid", mode="full")

        assert exc_info.value.message == "Failed to load page: net::ERR_NAME_NOT_RESOLVED"
        assert half_open.closed is True
        assert coordinator.list_audits() == []
        assert all(stub.calls == [] for stub in analyzers.values())
        assert mock_metrics.track_audit.call_args.kwargs["status"] == "navigation_failed"

    async def test_closed_browser_becomes_navigation_error(self, tmp_path, analyzers, mock_metrics):
        config = tmp_path / "browsers.yaml"
        config.write_text("chromium:\n  enabled: true\n", encoding="utf-8")
        manager = BrowserManager(config_path=str(config))

        context = MagicMock()
        context.new_page = AsyncMock(side_effect=Exception("Target page, context or browser has been closed"))
        context.close = AsyncMock()
        browser = MagicMock()
        browser.new_context = AsyncMock(return_value=context)
        driver = MagicMock()
        driver.chromium.launch = AsyncMock(return_value=browser)
        starter = MagicMock()
        starter.start = AsyncMock(return_value=driver)

        coordinator = AuditCoordinator(
            browser_manager=manager, analyzers=analyzers, store=KeyedStore("Audit"), metrics_collector=mock_metrics
        )
        with patch("d0_browser.manager.async_playwright", return_value=starter):
            with pytest.raises(NavigationError) as exc_info:
                await coordinator.run_audit("https://example.com", mode="summary", browser="chromium")

        assert exc_info.value.message == "Failed to load page: Target page, context or browser has been closed"
        context.close.assert_awaited_once()
        assert coordinator.list_audits() == []
        assert analyzers["axe-core"].calls == []

    async def test_invalid_mode(self, coordinator, browser_manager):
        with pytest.raises(ValidationError):
            await coordinator.run_audit("https://example.com", mode="everything")
        browser_manager.navigate_to.assert_not_awaited()

    async def test_records_are_independent(self, coordinator):
        first = await coordinator.run_audit("https://example.com/a", mode="summary")
        second = await coordinator.run_audit("https://example.com/b", mode="summary")

        assert first.id != second.id
        assert coordinator.list_audits() == [first.id, second.id]

    def test_unknown_audit(self, coordinator):
        with pytest.raises(NotFoundError, match="Audit not found: missing"):
            coordinator.get_audit("missing")


class TestStandaloneOperations:
    async def test_check_color_contrast(self, coordinator, analyzers, page):
        result = await coordinator.check_color_contrast("https://example.com", wcag_level="AAA", selector="main")

        _, context = analyzers["contrast-checker"].calls[0]
        assert context.wcag_level is WCAGLevel.AAA
        assert context.options == {"selector": "main"}
        assert result.tool == "contrast-checker"
        assert page.closed is True

    async def test_validate_aria_labels(self, coordinator, analyzers):
        result = await coordinator.validate_aria_labels("https://example.com", check_interactive_only=False)

        _, context = analyzers["aria-validator"].calls[0]
        assert context.options == {"check_interactive_only": False}
        assert [i.severity for i in result.issues] == [Severity.SERIOUS]

    async def test_audit_form_accessibility(self, coordinator, analyzers):
        await coordinator.audit_form_accessibility("https://example.com", form_selector="#signup")
        _, context = analyzers["form-auditor"].calls[0]
        assert context.options == {"form_selector": "#signup"}

    async def test_keyboard_readability_and_care(self, coordinator, analyzers):
        await coordinator.test_keyboard_navigation("https://example.com", start_selector="#skip")
        await coordinator.check_readability("https://example.com")
        await coordinator.check_domain_standards("https://example.com")

        assert analyzers["keyboard-tester"].calls[0][1].options == {"start_selector": "#skip"}
        assert len(analyzers["cognitive-checker"].calls) == 1
        assert len(analyzers["care-sector-checker"].calls) == 1

    async def test_standalone_failure_propagates(self, coordinator, analyzers, page):
        analyzers["cognitive-checker"].error = AnalyzerError("cognitive-checker", "boom")

        with pytest.raises(AnalyzerError):
            await coordinator.check_readability("https://example.com")
        assert page.closed is True

    async def test_unknown_analyzer(self, coordinator):
        with pytest.raises(AnalyzerError, match="not registered"):
            await coordinator.run_analyzer("lighthouse", "https://example.com")


class TestCompareBrowsers:
    async def test_failed_target_does_not_block_others(self, tmp_path, analyzers, mock_metrics):
        config = tmp_path / "browsers.yaml"
        config.write_text("chromium:\n  enabled: true\nfirefox:\n  enabled: true\nwebkit:\n  enabled: false\n")
        manager = BrowserManager(config_path=str(config))

        async def navigate(url, target):
            if target is BrowserTarget.FIREFOX:
                return NavigationResult(page=None, success=False, error="Browser closed unexpectedly")
            return NavigationResult(page=FakePage(browser=target.value), success=True)

        manager.navigate_to = AsyncMock(side_effect=navigate)
        coordinator = AuditCoordinator(
            browser_manager=manager, analyzers=analyzers, store=KeyedStore("Audit"), metrics_collector=mock_metrics
        )

        results = await coordinator.compare_browsers("https://example.com")

        assert set(results) == {"chromium", "firefox"}
        assert results["chromium"]["mode"] == "summary"
        assert results["chromium"]["browser"] == "chromium"
        assert results["chromium"]["tools_run"] == ["axe-core"]
        assert results["firefox"] == {"error": "Failed to load page: Browser closed unexpectedly", "success": False}

    async def test_close_releases_browsers(self, coordinator, browser_manager):
        await coordinator.close()
        browser_manager.close_all.assert_awaited_once()
