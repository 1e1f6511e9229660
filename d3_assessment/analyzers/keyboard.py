"""
Keyboard flow analyzer

Walks the page with real Tab key presses and checks four things
independently: focus traps, skip links, visible focus indicators and
tab-order coherence. A failing sub-check is logged and skipped; the
others still report.
"""
from typing import Any, Dict, List, Optional, Tuple

from core.config import get_settings
from core.logging import get_logger
from d0_browser.page import PageHandle
from d3_assessment.analyzers.base import BaseAnalyzer
from d3_assessment.models import AnalysisContext, AnalyzerResult, Issue
from d3_assessment.types import Severity

logger = get_logger(__name__, domain="d3")

FOCUSABLE_SELECTOR = 'a[href], button, input, select, textarea, [tabindex]:not([tabindex="-1"])'
INDICATOR_SELECTOR = "a[href], button, input, select, textarea"
SKIP_LINK_WORDS = ("skip", "jump")
SKIP_LINK_THRESHOLD = 20
CHAOTIC_TAB_RATIO = 0.7
TAB_ORDER_SAMPLE = 20
INDICATOR_EXAMPLES = 5

FOCUSABLE_SCRIPT = """
(selector) => Array.from(document.querySelectorAll(selector)).map((el, index) => ({
  index,
  tagName: el.tagName.toLowerCase(),
  id: el.id || '',
  className: typeof el.className === 'string' ? el.className : '',
  tabIndex: el.tabIndex,
  text: (el.textContent || '').trim().substring(0, 30),
  type: el.type || null,
  isVisible: el.offsetParent !== null,
}))
"""

ACTIVE_ELEMENT_SCRIPT = """
() => {
  const active = document.activeElement;
  if (!active) return null;
  return {
    tagName: active.tagName.toLowerCase(),
    id: active.id || '',
    className: typeof active.className === 'string' ? active.className : '',
    text: (active.textContent || '').trim().substring(0, 30),
  };
}
"""

ANCHOR_LINK_TEXTS_SCRIPT = """
() => Array.from(document.querySelectorAll('a[href^="#"]')).map((a) => a.textContent || '')
"""

FOCUS_STYLES_SCRIPT = """
([selector, limit]) => {
  const snapshot = (el) => {
    const s = window.getComputedStyle(el);
    return {
      outline: `${s.outlineStyle} ${s.outlineWidth} ${s.outlineColor}`,
      boxShadow: s.boxShadow,
      border: `${s.borderStyle} ${s.borderWidth} ${s.borderColor}`,
    };
  };
  const previous = document.activeElement;
  const results = [];
  for (const el of Array.from(document.querySelectorAll(selector)).slice(0, limit)) {
    el.blur();
    const rest = snapshot(el);
    el.focus();
    const focused = snapshot(el);
    el.blur();
    results.push({
      tagName: el.tagName.toLowerCase(),
      id: el.id || '',
      className: typeof el.className === 'string' ? el.className : '',
      rest,
      focused,
    });
  }
  if (previous && previous.focus) previous.focus();
  return results;
}
"""

Identity = Tuple[str, str, str, str]


def focus_identity(focus: Optional[Dict[str, Any]]) -> Identity:
    focus = focus or {}
    return (
        focus.get("tagName", ""),
        focus.get("id", ""),
        focus.get("className", ""),
        focus.get("text", ""),
    )


def has_skip_link(anchor_texts: List[str]) -> bool:
    return any(word in (text or "").lower() for text in anchor_texts for word in SKIP_LINK_WORDS)


def missing_focus_indicator(snapshot: Dict[str, Any]) -> bool:
    """True when focusing the element changed none of outline, box-shadow or border"""
    rest, focused = snapshot.get("rest") or {}, snapshot.get("focused") or {}
    return all(rest.get(prop) == focused.get(prop) for prop in ("outline", "boxShadow", "border"))


def is_chaotic(tab_order: List[Dict[str, Any]]) -> bool:
    """Distinct (previous tag, current tag) transitions exceed 70% of recorded stops"""
    if len(tab_order) < 2:
        return False
    transitions = {
        (tab_order[i - 1].get("tagName"), tab_order[i].get("tagName")) for i in range(1, len(tab_order))
    }
    return len(transitions) > len(tab_order) * CHAOTIC_TAB_RATIO


class KeyboardAnalyzer(BaseAnalyzer):
    """Keyboard-only navigation checks (WCAG 2.1.2, 2.4.1, 2.4.3, 2.4.7)"""

    def __init__(self, max_tabs: Optional[int] = None, indicator_sample: Optional[int] = None):
        settings = get_settings()
        self.max_tabs = max_tabs or settings.keyboard_max_tabs
        self.indicator_sample = indicator_sample or settings.focus_indicator_sample

    @property
    def name(self) -> str:
        return "keyboard-tester"

    async def _walk_tab_order(
        self, page: PageHandle, focusable_count: int, tab_order: List[Dict[str, Any]]
    ) -> Optional[Issue]:
        """Press Tab up to max_tabs times, appending each focus stop to tab_order"""
        steps = min(self.max_tabs, focusable_count)

        for _ in range(steps):
            await page.press_key("Tab")
            focus = await page.evaluate(ACTIVE_ELEMENT_SCRIPT) or {}
            tab_order.append(focus)

            if len(tab_order) > 1:
                current, previous = focus_identity(tab_order[-1]), focus_identity(tab_order[-2])
                if current == previous and current[1]:
                    return Issue(
                        tool=self.name,
                        type="focus-trap",
                        severity=Severity.CRITICAL,
                        description="Keyboard focus trap detected - users cannot escape",
                        wcag_tags=("2.1.2",),
                        element=current[0],
                        evidence={"element_id": current[1]},
                    )

        return None

    async def _check_focus_indicators(self, page: PageHandle) -> List[Dict[str, Any]]:
        snapshots = await page.evaluate(FOCUS_STYLES_SCRIPT, [INDICATOR_SELECTOR, self.indicator_sample]) or []
        return [
            {"tagName": s.get("tagName"), "id": s.get("id"), "className": s.get("className")}
            for s in snapshots
            if missing_focus_indicator(s)
        ]

    async def analyze(self, page: PageHandle, context: AnalysisContext) -> AnalyzerResult:
        issues: List[Issue] = []
        focusable: List[Dict[str, Any]] = []
        tab_order: List[Dict[str, Any]] = []
        skip_link: Optional[bool] = None
        indicator_failures: List[Dict[str, Any]] = []

        start_selector = context.option("start_selector")
        if start_selector:
            try:
                await page.focus(start_selector)
            except Exception as e:
                logger.warning(f"Could not focus start selector {start_selector}: {e}")

        try:
            focusable = await page.evaluate(FOCUSABLE_SCRIPT, FOCUSABLE_SELECTOR) or []
        except Exception as e:
            logger.warning(f"Focusable element enumeration failed: {e}")

        try:
            trap = await self._walk_tab_order(page, len(focusable), tab_order)
            if trap:
                issues.append(trap)
        except Exception as e:
            logger.warning(f"Tab walk failed after {len(tab_order)} stops: {e}")

        try:
            skip_link = has_skip_link(await page.evaluate(ANCHOR_LINK_TEXTS_SCRIPT) or [])
            if not skip_link and len(focusable) > SKIP_LINK_THRESHOLD:
                issues.append(
                    Issue(
                        tool=self.name,
                        type="missing-skip-link",
                        severity=Severity.MODERATE,
                        description="No skip link found - keyboard users must tab through all navigation",
                        wcag_tags=("2.4.1",),
                        evidence={"suggestion": 'Add a "Skip to main content" link as the first focusable element'},
                    )
                )
        except Exception as e:
            logger.warning(f"Skip link check failed: {e}")

        try:
            indicator_failures = await self._check_focus_indicators(page)
            if indicator_failures:
                issues.append(
                    Issue(
                        tool=self.name,
                        type="missing-focus-indicator",
                        severity=Severity.SERIOUS,
                        description=f"{len(indicator_failures)} elements have no visible focus indicator",
                        wcag_tags=("2.4.7",),
                        evidence={
                            "elements": indicator_failures[:INDICATOR_EXAMPLES],
                            "fix": "Add visible :focus styles with outline, box-shadow, or border changes",
                        },
                    )
                )
        except Exception as e:
            logger.warning(f"Focus indicator check failed: {e}")

        try:
            if is_chaotic(tab_order):
                issues.append(
                    Issue(
                        tool=self.name,
                        type="chaotic-tab-order",
                        severity=Severity.MODERATE,
                        description="Tab order appears illogical - may confuse keyboard users",
                        wcag_tags=("2.4.3",),
                        evidence={"suggestion": "Review tabindex values and DOM order"},
                    )
                )
        except Exception as e:
            logger.warning(f"Tab order check failed: {e}")

        summary = {
            "total_focusable": len(focusable),
            "tabs_tested": len(tab_order),
            "has_skip_link": skip_link,
            "focus_indicator_failures": len(indicator_failures),
        }
        logger.info(f"Keyboard: {summary}")

        return AnalyzerResult(
            tool=self.name,
            issues=issues,
            summary=summary,
            data={"tab_order": tab_order[:TAB_ORDER_SAMPLE]},
        )
