"""
axe-core analyzer

Injects axe-core into the page, runs it for the audit's WCAG level and
converts every affected node of every violation into an Issue.

Runs in every audit mode.
"""
from pathlib import Path
from typing import Any, Dict, List

from core.config import get_settings
from core.exceptions import AnalyzerError
from core.logging import get_logger
from d0_browser.page import PageHandle
from d3_assessment import severity
from d3_assessment.analyzers.base import BaseAnalyzer
from d3_assessment.models import AnalysisContext, AnalyzerResult, Issue

logger = get_logger(__name__, domain="d3")

AXE_LOADED_SCRIPT = "() => typeof window.axe !== 'undefined'"

AXE_RUN_SCRIPT = """
async (tags) => {
  const results = await window.axe.run(document, { runOnly: { type: 'tag', values: tags } });
  return {
    violations: results.violations.map((v) => ({
      id: v.id,
      impact: v.impact,
      tags: v.tags,
      description: v.description,
      help: v.help,
      helpUrl: v.helpUrl,
      nodes: v.nodes.map((n) => ({
        target: n.target,
        html: n.html,
        failureSummary: n.failureSummary,
      })),
    })),
    passes: results.passes.length,
    incomplete: results.incomplete.length,
  };
}
"""


def _selector(target: Any) -> str:
    # Targets inside iframes/shadow roots arrive as nested lists
    if isinstance(target, (list, tuple)):
        return " ".join(_selector(part) for part in target)
    return str(target)


def format_axe_results(raw: Dict[str, Any]) -> List[Issue]:
    """Convert raw axe-core output into issues, one per affected node"""
    issues = []
    for violation in raw.get("violations", []):
        mapped = severity.normalize("axe-core", violation.get("impact"))
        tags = [tag for tag in violation.get("tags", []) if tag.startswith("wcag")]

        for node in violation.get("nodes", []):
            issues.append(
                Issue(
                    tool="axe-core",
                    type=violation.get("id", "unknown"),
                    severity=mapped,
                    description=violation.get("description", ""),
                    wcag_tags=tuple(tags),
                    selector=_selector(node.get("target", [])),
                    evidence={
                        "impact": violation.get("impact"),
                        "help": violation.get("help"),
                        "help_url": violation.get("helpUrl"),
                        "html": node.get("html"),
                        "failure_summary": node.get("failureSummary"),
                    },
                )
            )
    return issues


class AxeAnalyzer(BaseAnalyzer):
    """Generic rule engine: axe-core"""

    def __init__(self):
        settings = get_settings()
        self.script_path = settings.axe_script_path
        self.script_url = settings.axe_script_url

    @property
    def name(self) -> str:
        return "axe-core"

    async def _ensure_loaded(self, page: PageHandle) -> None:
        if await page.evaluate(AXE_LOADED_SCRIPT):
            return

        if self.script_path and Path(self.script_path).exists():
            source = Path(self.script_path).read_text(encoding="utf-8")
            await page.inject_script(content=source)
        else:
            await page.inject_script(url=self.script_url)

        await page.wait_for_function(AXE_LOADED_SCRIPT)

    async def analyze(self, page: PageHandle, context: AnalysisContext) -> AnalyzerResult:
        tags = context.wcag_level.axe_tags
        logger.info(f"Running axe-core on {context.url} with tags {tags}")

        try:
            await self._ensure_loaded(page)
        except Exception as e:
            raise AnalyzerError(self.name, f"could not load axe-core: {e}", url=context.url)

        raw = await page.evaluate(AXE_RUN_SCRIPT, tags)
        issues = format_axe_results(raw or {})

        return AnalyzerResult(
            tool=self.name,
            issues=issues,
            summary={
                "violations": len((raw or {}).get("violations", [])),
                "passes": (raw or {}).get("passes", 0),
                "incomplete": (raw or {}).get("incomplete", 0),
            },
        )
