"""
Pa11y analyzer using the Pa11y CLI

Runs `pa11y --reporter json` against the audit URL in its own headless
browser and maps error/warning/notice onto the canonical severities.

Runs in full audits only.
"""

import asyncio
import json
import re
import shutil
from typing import Any, Dict, List

from core.config import get_settings
from core.exceptions import AnalyzerError
from core.logging import get_logger
from d0_browser.page import PageHandle
from d3_assessment import severity
from d3_assessment.analyzers.base import BaseAnalyzer
from d3_assessment.models import AnalysisContext, AnalyzerResult, Issue

logger = get_logger(__name__, domain="d3")

# Pa11y exits with 2 when it ran fine and found issues
PA11Y_OK_RETURN_CODES = (0, 2)

# Slack on top of Pa11y's own --timeout and --wait before the child is killed
PA11Y_DEADLINE_MARGIN_SECONDS = 15

CLAUSE_PATTERN = re.compile(r"(\d+)_(\d+)_(\d+)")


def wcag_clauses(code: str) -> List[str]:
    """Extract WCAG clause ids (e.g. 1.1.1) from a Pa11y/HTML_CodeSniffer code"""
    clauses = [".".join(match) for match in CLAUSE_PATTERN.findall(code or "")]
    return clauses or ([code] if code else [])


def format_pa11y_results(raw: List[Dict[str, Any]]) -> List[Issue]:
    issues = []
    for item in raw:
        code = item.get("code", "")
        issues.append(
            Issue(
                tool="pa11y",
                type=code or "unknown",
                severity=severity.normalize("pa11y", item.get("type")),
                description=item.get("message", ""),
                wcag_tags=tuple(wcag_clauses(code)),
                selector=item.get("selector") or None,
                evidence={
                    "context": item.get("context"),
                    "runner": item.get("runner"),
                    "pa11y_type": item.get("type"),
                },
            )
        )
    return issues


class Pa11yAnalyzer(BaseAnalyzer):
    """Generic rule engine: Pa11y (HTML_CodeSniffer runner)"""

    def __init__(self):
        settings = get_settings()
        self.command = settings.pa11y_command
        self.timeout_ms = settings.pa11y_timeout_ms
        self.wait_ms = settings.pa11y_wait_ms
        self.deadline_seconds = (self.timeout_ms + self.wait_ms) / 1000 + PA11Y_DEADLINE_MARGIN_SECONDS

    @property
    def name(self) -> str:
        return "pa11y"

    def is_available(self) -> bool:
        return shutil.which(self.command) is not None

    def build_command(self, context: AnalysisContext) -> List[str]:
        return [
            self.command,
            context.url,
            "--reporter",
            "json",
            "--standard",
            context.wcag_level.pa11y_standard,
            "--timeout",
            str(self.timeout_ms),
            "--wait",
            str(self.wait_ms),
        ]

    async def _run_cli(self, context: AnalysisContext) -> List[Dict[str, Any]]:
        cmd = self.build_command(context)
        logger.info(f"Running Pa11y CLI: {' '.join(cmd)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd, stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.PIPE
            )
        except FileNotFoundError:
            raise AnalyzerError(self.name, f"command not found: {self.command}", url=context.url)

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.deadline_seconds)
        except asyncio.TimeoutError:
            logger.error(f"Pa11y CLI timed out after {self.deadline_seconds}s, killing it")
            try:
                process.kill()
            except ProcessLookupError:
                logger.debug("Pa11y CLI exited before it could be killed")
            await process.wait()
            raise AnalyzerError(self.name, f"timed out after {self.deadline_seconds}s", url=context.url)

        if process.returncode not in PA11Y_OK_RETURN_CODES:
            logger.error(f"Pa11y CLI failed with return code {process.returncode}")
            raise AnalyzerError(
                self.name,
                stderr.decode(errors="replace").strip() or f"exit code {process.returncode}",
                url=context.url,
                return_code=process.returncode,
            )

        output = stdout.decode(errors="replace").strip()
        if not output:
            return []
        try:
            parsed = json.loads(output)
        except json.JSONDecodeError as e:
            raise AnalyzerError(self.name, f"unreadable JSON output: {e}", url=context.url)

        # Older reporters wrap the list as {"issues": [...]}
        if isinstance(parsed, dict):
            parsed = parsed.get("issues", [])
        return parsed

    async def analyze(self, page: PageHandle, context: AnalysisContext) -> AnalyzerResult:
        raw = await self._run_cli(context)
        issues = format_pa11y_results(raw)
        return AnalyzerResult(
            tool=self.name,
            issues=issues,
            summary={"standard": context.wcag_level.pa11y_standard, "reported": len(raw)},
        )
