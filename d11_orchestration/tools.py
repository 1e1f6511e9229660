"""
D11 Orchestration - Tool dispatcher

Named operations over the audit coordinator and scoring engine, called
with a plain argument mapping. Every call returns a ToolResponse: pretty
JSON on success, "Error: <message>" with is_error set on any failure.
"""
import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from core.exceptions import AccessAuditError, UnknownOperationError, ValidationError
from core.logging import get_logger
from d3_assessment.coordinator import AuditCoordinator
from d5_scoring.engine import ScoringEngine
from d5_scoring.formatter import format_score_summary

logger = get_logger(__name__, domain="d11")

ALL_BROWSERS = "all"

TOOL_DESCRIPTIONS = {
    "audit_accessibility": "Run an accessibility audit and score it. browser='all' compares every browser.",
    "check_color_contrast": "Check text color contrast against WCAG AA or AAA.",
    "test_keyboard_navigation": "Tab through the page checking traps, skip links, focus indicators and tab order.",
    "validate_aria_labels": "Check accessible names and ARIA roles.",
    "audit_form_accessibility": "Check form labels and autocomplete hints.",
    "check_cognitive_accessibility": "Reading level, sentence length, vocabulary, jargon and time limits.",
    "check_care_sector_standards": "Care-sector checks: emergency features, text size, health info, care records.",
    "compare_browsers": "Summary audit on every enabled browser.",
    "get_accessibility_score": "Score of a previous audit, as JSON.",
    "get_score_summary": "Score of a previous audit, as a text score card.",
}


@dataclass
class ToolResponse:
    text: str
    is_error: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"content": [{"type": "text", "text": self.text}], "isError": self.is_error}


def _require(args: Dict[str, Any], name: str) -> Any:
    value = args.get(name)
    if value in (None, ""):
        raise ValidationError(f"Missing required argument: {name}", field=name)
    return value


def _to_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, default=str)


class ToolDispatcher:
    """Routes tool calls by name to the coordinator and scoring engine"""

    def __init__(self, coordinator: Optional[AuditCoordinator] = None, scoring_engine: Optional[ScoringEngine] = None):
        self.coordinator = coordinator or AuditCoordinator()
        self.scoring_engine = scoring_engine or ScoringEngine()
        self._handlers: Dict[str, Callable[[Dict[str, Any]], Awaitable[str]]] = {
            "audit_accessibility": self._audit_accessibility,
            "check_color_contrast": self._check_color_contrast,
            "test_keyboard_navigation": self._test_keyboard_navigation,
            "validate_aria_labels": self._validate_aria_labels,
            "audit_form_accessibility": self._audit_form_accessibility,
            "check_cognitive_accessibility": self._check_cognitive_accessibility,
            "check_care_sector_standards": self._check_care_sector_standards,
            "compare_browsers": self._compare_browsers,
            "get_accessibility_score": self._get_accessibility_score,
            "get_score_summary": self._get_score_summary,
        }

    def list_tools(self) -> List[Dict[str, str]]:
        return [{"name": name, "description": TOOL_DESCRIPTIONS[name]} for name in self._handlers]

    async def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResponse:
        """Dispatch one tool call; never raises"""
        try:
            handler = self._handlers.get(name)
            if handler is None:
                raise UnknownOperationError(name)
            text = await handler(arguments or {})
            return ToolResponse(text=text)
        except AccessAuditError as e:
            logger.warning(f"Tool {name} failed: {e.message}", extra={"error_code": e.error_code})
            return ToolResponse(text=f"Error: {e.message}", is_error=True)
        except Exception as e:
            logger.exception(f"Tool {name} failed unexpectedly")
            return ToolResponse(text=f"Error: {e}", is_error=True)

    async def _audit_accessibility(self, args: Dict[str, Any]) -> str:
        url = _require(args, "url")
        browser = args.get("browser") or "chromium"
        wcag_level = args.get("wcag_level", "AA")

        if browser == ALL_BROWSERS:
            return _to_json(await self.coordinator.compare_browsers(url, wcag_level=wcag_level))

        record = await self.coordinator.run_audit(
            url, mode=args.get("mode", "full"), browser=browser, wcag_level=wcag_level
        )
        result = record.to_dict()
        result["score"] = self.scoring_engine.score(record).to_dict()
        return _to_json(result)

    async def _check_color_contrast(self, args: Dict[str, Any]) -> str:
        result = await self.coordinator.check_color_contrast(
            _require(args, "url"),
            browser=args.get("browser"),
            wcag_level=args.get("level") or args.get("wcag_level") or "AA",
            selector=args.get("selector"),
        )
        return _to_json(result.to_dict())

    async def _test_keyboard_navigation(self, args: Dict[str, Any]) -> str:
        result = await self.coordinator.test_keyboard_navigation(
            _require(args, "url"), browser=args.get("browser"), start_selector=args.get("start_selector")
        )
        return _to_json(result.to_dict())

    async def _validate_aria_labels(self, args: Dict[str, Any]) -> str:
        result = await self.coordinator.validate_aria_labels(
            _require(args, "url"),
            browser=args.get("browser"),
            check_interactive_only=args.get("check_interactive_only", True),
        )
        return _to_json(result.to_dict())

    async def _audit_form_accessibility(self, args: Dict[str, Any]) -> str:
        result = await self.coordinator.audit_form_accessibility(
            _require(args, "url"), browser=args.get("browser"), form_selector=args.get("form_selector")
        )
        return _to_json(result.to_dict())

    async def _check_cognitive_accessibility(self, args: Dict[str, Any]) -> str:
        result = await self.coordinator.check_readability(_require(args, "url"), browser=args.get("browser"))
        return _to_json(result.to_dict())

    async def _check_care_sector_standards(self, args: Dict[str, Any]) -> str:
        result = await self.coordinator.check_domain_standards(_require(args, "url"), browser=args.get("browser"))
        return _to_json(result.to_dict())

    async def _compare_browsers(self, args: Dict[str, Any]) -> str:
        results = await self.coordinator.compare_browsers(_require(args, "url"), wcag_level=args.get("wcag_level", "AA"))
        return _to_json(results)

    async def _get_accessibility_score(self, args: Dict[str, Any]) -> str:
        return _to_json(self.scoring_engine.get_score(_require(args, "audit_id")).to_dict())

    async def _get_score_summary(self, args: Dict[str, Any]) -> str:
        return format_score_summary(self.scoring_engine.get_score(_require(args, "audit_id")))
