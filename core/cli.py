"""
Command-line interface for AccessAudit
"""
import asyncio
import json
from typing import Any, Awaitable, Callable

import click

from core.config import settings
from core.exceptions import AccessAuditError
from core.logging import get_logger
from core.metrics import get_metrics_collector
from d0_browser.manager import BUNDLED_CONFIG_PATH
from d0_browser.types import BrowserTarget

logger = get_logger(__name__)

BROWSERS = [target.value for target in BrowserTarget]
LEVELS = ["A", "AA", "AAA"]


def build_coordinator():
    """Coordinator factory; tests patch this to avoid launching browsers"""
    from d3_assessment.coordinator import AuditCoordinator

    return AuditCoordinator()


def _run(operation: Callable[[Any], Awaitable[Any]]) -> Any:
    """Run an async operation against a fresh coordinator, closing browsers afterwards"""

    async def runner():
        coordinator = build_coordinator()
        try:
            return await operation(coordinator)
        finally:
            await coordinator.close()

    try:
        return asyncio.run(runner())
    except AccessAuditError as e:
        raise click.ClickException(e.message)


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


@click.group()
@click.version_option(version=settings.app_version)
def cli():
    """AccessAudit CLI - accessibility audits with UK compliance scoring"""
    pass


@cli.command()
@click.argument("url")
@click.option("--mode", type=click.Choice(["summary", "full"]), default=settings.default_audit_mode)
@click.option("--browser", type=click.Choice(BROWSERS + ["all"]), default=settings.default_browser)
@click.option("--level", "wcag_level", type=click.Choice(LEVELS), default=settings.default_wcag_level)
@click.option("--format", "output_format", type=click.Choice(["json", "text"]), default="json")
@click.option("--show-metrics", is_flag=True, help="Print Prometheus metrics for this run to stderr")
def audit(url: str, mode: str, browser: str, wcag_level: str, output_format: str, show_metrics: bool):
    """Run an accessibility audit and score it"""
    from d5_scoring.engine import ScoringEngine
    from d5_scoring.formatter import format_score_summary

    if browser == "all":
        _echo_json(_run(lambda c: c.compare_browsers(url, wcag_level=wcag_level)))
    else:
        record = _run(lambda c: c.run_audit(url, mode=mode, browser=browser, wcag_level=wcag_level))
        score = ScoringEngine().score(record)

        if output_format == "text":
            click.echo(format_score_summary(score))
            if record.tools_failed:
                click.echo(f"\nAnalyzers that failed: {', '.join(record.tools_failed)}", err=True)
        else:
            payload = record.to_dict()
            payload["score"] = score.to_dict()
            _echo_json(payload)

    if show_metrics:
        click.echo(get_metrics_collector().get_metrics().decode("utf-8"), err=True)


@cli.command()
@click.argument("url")
@click.option("--level", "wcag_level", type=click.Choice(LEVELS), default="AA")
def compare(url: str, wcag_level: str):
    """Summary audit on every enabled browser"""
    _echo_json(_run(lambda c: c.compare_browsers(url, wcag_level=wcag_level)))


@cli.command()
@click.argument("url")
@click.option("--browser", type=click.Choice(BROWSERS), default=settings.default_browser)
@click.option("--level", "wcag_level", type=click.Choice(["AA", "AAA"]), default="AA")
@click.option("--selector", default=None, help="Only check text inside this selector")
def contrast(url: str, browser: str, wcag_level: str, selector: str):
    """Check text color contrast"""
    result = _run(lambda c: c.check_color_contrast(url, browser=browser, wcag_level=wcag_level, selector=selector))
    _echo_json(result.to_dict())


@cli.command()
@click.argument("url")
@click.option("--browser", type=click.Choice(BROWSERS), default=settings.default_browser)
@click.option("--start-selector", default=None, help="Element to focus before tabbing")
def keyboard(url: str, browser: str, start_selector: str):
    """Test keyboard navigation"""
    result = _run(lambda c: c.test_keyboard_navigation(url, browser=browser, start_selector=start_selector))
    _echo_json(result.to_dict())


@cli.command()
@click.argument("url")
@click.option("--browser", type=click.Choice(BROWSERS), default=settings.default_browser)
def readability(url: str, browser: str):
    """Check reading level and cognitive load"""
    _echo_json(_run(lambda c: c.check_readability(url, browser=browser)).to_dict())


@cli.command()
@click.argument("url")
@click.option("--browser", type=click.Choice(BROWSERS), default=settings.default_browser)
def care(url: str, browser: str):
    """Run care-sector checks"""
    _echo_json(_run(lambda c: c.check_domain_standards(url, browser=browser)).to_dict())


@cli.command()
@click.argument("url")
@click.option("--browser", type=click.Choice(BROWSERS), default=settings.default_browser)
@click.option("--all-elements", is_flag=True, help="Check every element with ARIA attributes")
def aria(url: str, browser: str, all_elements: bool):
    """Validate ARIA labels and roles"""
    result = _run(lambda c: c.validate_aria_labels(url, browser=browser, check_interactive_only=not all_elements))
    _echo_json(result.to_dict())


@cli.command()
@click.argument("url")
@click.option("--browser", type=click.Choice(BROWSERS), default=settings.default_browser)
@click.option("--form-selector", default=None, help="Only audit forms matching this selector")
def forms(url: str, browser: str, form_selector: str):
    """Audit form labels and autocomplete"""
    result = _run(lambda c: c.audit_form_accessibility(url, browser=browser, form_selector=form_selector))
    _echo_json(result.to_dict())


@cli.command()
def env_info():
    """Display environment information"""
    click.echo(f"{settings.app_name} v{settings.app_version}")
    click.echo(f"Environment: {settings.environment}")
    click.echo(f"Default browser: {settings.default_browser} (headless: {settings.headless})")
    click.echo(f"Browser config: {settings.browser_config_path or BUNDLED_CONFIG_PATH}")
    click.echo(f"Default audit: {settings.default_audit_mode}, WCAG {settings.default_wcag_level}")
    click.echo(f"Pa11y command: {settings.pa11y_command}")
    click.echo(f"Store capacity: {settings.store_max_entries or 'unbounded'}")


def main():
    """Main entry point"""
    cli()


if __name__ == "__main__":
    main()
