"""
Audit Coordinator

Loads a page once, runs the analyzer stack against it strictly in order,
merges every analyzer's issues into one AuditRecord and keeps the sealed
record in a keyed store.

An analyzer failure is logged, counted and recorded on the audit; it never
aborts the run. A navigation failure aborts the run before any analyzer.
"""
import time
from typing import Any, Dict, List, Optional

from core.config import get_settings
from core.exceptions import AnalyzerError, NavigationError, ValidationError
from core.logging import get_logger
from core.metrics import MetricsCollector, get_metrics_collector
from core.store import KeyedStore
from d0_browser.manager import BrowserManager
from d0_browser.page import PageHandle
from d0_browser.types import BrowserTarget
from d3_assessment.analyzers import ANALYZER_REGISTRY, FULL_AUDIT_ORDER, BaseAnalyzer
from d3_assessment.models import AnalysisContext, AnalyzerResult, AuditRecord
from d3_assessment.types import AuditMode, WCAGLevel

logger = get_logger(__name__, domain="d3")


def parse_mode(value: Any) -> AuditMode:
    if isinstance(value, AuditMode):
        return value
    try:
        return AuditMode(str(value).lower())
    except ValueError:
        raise ValidationError(f"Invalid audit mode: {value}", field="mode")


def parse_wcag_level(value: Any) -> WCAGLevel:
    if isinstance(value, WCAGLevel):
        return value
    try:
        return WCAGLevel(str(value).upper())
    except ValueError:
        raise ValidationError(f"Invalid WCAG level: {value}", field="wcag_level")


def parse_browser(value: Any) -> BrowserTarget:
    if isinstance(value, BrowserTarget):
        return value
    try:
        return BrowserTarget.from_value(str(value))
    except ValueError as e:
        raise ValidationError(str(e), field="browser")


class AuditCoordinator:
    """
    Runs audits and the standalone analyzer operations

    Owns the audit store; records are retrievable by id with get_audit().
    """

    def __init__(
        self,
        browser_manager: Optional[BrowserManager] = None,
        analyzers: Optional[Dict[str, BaseAnalyzer]] = None,
        store: Optional[KeyedStore[AuditRecord]] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        settings = get_settings()
        self.browser_manager = browser_manager or BrowserManager()
        self.analyzers = analyzers or {name: cls() for name, cls in ANALYZER_REGISTRY.items()}
        if store is None:
            store = KeyedStore("Audit", settings.store_max_entries)
        self.audits: KeyedStore[AuditRecord] = store
        self.metrics = metrics_collector or get_metrics_collector()
        self.default_browser = settings.default_browser
        self.default_mode = settings.default_audit_mode
        self.default_wcag_level = settings.default_wcag_level

    def _analyzer(self, name: str) -> BaseAnalyzer:
        analyzer = self.analyzers.get(name)
        if analyzer is None:
            raise AnalyzerError(name, "analyzer is not registered")
        return analyzer

    async def _open_page(self, url: str, target: BrowserTarget) -> PageHandle:
        """Load the URL or raise NavigationError, releasing any half-open page"""
        result = await self.browser_manager.navigate_to(url, target)
        if not result.success:
            if result.page is not None:
                await result.page.close()
            raise NavigationError(url, result.error, browser=target.value)
        return result.page

    async def _run_analyzer(self, analyzer: BaseAnalyzer, page: PageHandle, context: AnalysisContext) -> AnalyzerResult:
        if not analyzer.is_available():
            raise AnalyzerError(analyzer.name, "not available in this environment", url=context.url)
        try:
            return await analyzer.analyze(page, context)
        except AnalyzerError:
            raise
        except Exception as e:
            raise AnalyzerError(analyzer.name, str(e), url=context.url)

    async def run_audit(
        self,
        url: str,
        mode: Any = None,
        browser: Any = None,
        wcag_level: Any = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> AuditRecord:
        """
        Run an audit and store the sealed record

        Args:
            url: Page to audit
            mode: "summary" (axe-core only) or "full"
            browser: Browser target name
            wcag_level: "A", "AA" or "AAA"
            options: Per-analyzer options (selector, start_selector, ...)

        Returns:
            The completed AuditRecord

        Raises:
            ValidationError: bad mode, browser or level
            NavigationError: the page could not be loaded
        """
        audit_mode = parse_mode(mode or self.default_mode)
        target = parse_browser(browser or self.default_browser)
        level = parse_wcag_level(wcag_level or self.default_wcag_level)
        started = time.monotonic()

        try:
            page = await self._open_page(url, target)
        except NavigationError:
            self.metrics.track_audit(audit_mode.value, time.monotonic() - started, status="navigation_failed")
            raise

        record = AuditRecord(url=url, mode=audit_mode, browser=target.value, wcag_level=level)
        context = AnalysisContext(url=url, wcag_level=level, browser=target.value, options=options or {})
        names = FULL_AUDIT_ORDER if audit_mode is AuditMode.FULL else FULL_AUDIT_ORDER[:1]

        audit_logger = logger.with_context(audit_id=record.id)
        audit_logger.info(f"{audit_mode.value} audit of {url} on {target.value} ({level.value})")
        try:
            for name in names:
                try:
                    result = await self._run_analyzer(self._analyzer(name), page, context)
                except AnalyzerError as e:
                    audit_logger.error(f"Analyzer {name} failed for {url}: {e.message}", extra={"analyzer": name})
                    self.metrics.track_analyzer(name, status="error")
                    record.record_failure(name, e.message)
                    continue

                record.merge(result)
                self.metrics.track_analyzer(name)
                for issue in result.issues:
                    self.metrics.track_issue(issue.tool, issue.severity.value)
        finally:
            await page.close()

        duration = time.monotonic() - started
        record.complete(duration)
        self.audits.put(record.id, record)
        self.metrics.track_audit(audit_mode.value, duration)

        audit_logger.info(f"Audit complete in {record.duration_seconds}s: {record.summary}")
        return record

    async def run_analyzer(
        self,
        name: str,
        url: str,
        browser: Any = None,
        wcag_level: Any = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> AnalyzerResult:
        """Run one analyzer on its own page; failures propagate as AnalyzerError"""
        analyzer = self._analyzer(name)
        target = parse_browser(browser or self.default_browser)
        level = parse_wcag_level(wcag_level or self.default_wcag_level)

        page = await self._open_page(url, target)
        context = AnalysisContext(url=url, wcag_level=level, browser=target.value, options=options or {})
        try:
            result = await self._run_analyzer(analyzer, page, context)
        except AnalyzerError:
            self.metrics.track_analyzer(name, status="error")
            raise
        finally:
            await page.close()

        self.metrics.track_analyzer(name)
        return result

    async def check_color_contrast(
        self, url: str, browser: Any = None, wcag_level: Any = "AA", selector: Optional[str] = None
    ) -> AnalyzerResult:
        return await self.run_analyzer(
            "contrast-checker", url, browser, wcag_level, options={"selector": selector} if selector else None
        )

    async def test_keyboard_navigation(
        self, url: str, browser: Any = None, start_selector: Optional[str] = None
    ) -> AnalyzerResult:
        return await self.run_analyzer(
            "keyboard-tester", url, browser, options={"start_selector": start_selector} if start_selector else None
        )

    async def check_readability(self, url: str, browser: Any = None) -> AnalyzerResult:
        return await self.run_analyzer("cognitive-checker", url, browser)

    async def check_domain_standards(self, url: str, browser: Any = None) -> AnalyzerResult:
        return await self.run_analyzer("care-sector-checker", url, browser)

    async def validate_aria_labels(
        self, url: str, browser: Any = None, check_interactive_only: bool = True
    ) -> AnalyzerResult:
        return await self.run_analyzer(
            "aria-validator", url, browser, options={"check_interactive_only": check_interactive_only}
        )

    async def audit_form_accessibility(
        self, url: str, browser: Any = None, form_selector: Optional[str] = None
    ) -> AnalyzerResult:
        return await self.run_analyzer(
            "form-auditor", url, browser, options={"form_selector": form_selector} if form_selector else None
        )

    async def compare_browsers(self, url: str, wcag_level: Any = "AA") -> Dict[str, Any]:
        """
        Summary audit on every enabled browser, concurrently

        Returns target name -> record dict, or {"error": ..., "success": False}
        for targets that failed.
        """
        level = parse_wcag_level(wcag_level or self.default_wcag_level)

        async def audit_on(target: BrowserTarget) -> Dict[str, Any]:
            record = await self.run_audit(url, mode=AuditMode.SUMMARY, browser=target, wcag_level=level)
            return record.to_dict()

        return await self.browser_manager.run_across_browsers(audit_on)

    def get_audit(self, audit_id: str) -> AuditRecord:
        """Look up a stored audit; raises NotFoundError for unknown ids"""
        return self.audits.require(audit_id)

    def list_audits(self) -> List[str]:
        return self.audits.keys()

    async def close(self) -> None:
        await self.browser_manager.close_all()
