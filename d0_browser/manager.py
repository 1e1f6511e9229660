"""
Browser Manager - Playwright browser lifecycle

Launches one browser per target on first use and hands out isolated pages.
Navigation failures are returned as NavigationResult(success=False) so the
caller decides whether the run is fatal.
"""
import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional

import yaml
from playwright.async_api import Browser, BrowserContext, Playwright, async_playwright

from core.config import get_settings
from core.exceptions import ConfigurationError
from core.logging import get_logger
from d0_browser.page import PageHandle
from d0_browser.types import BrowserConfig, BrowserTarget, NavigationResult

logger = get_logger(__name__, domain="d0")

BUNDLED_CONFIG_PATH = Path(__file__).with_name("browsers.yaml")

DEFAULT_BROWSER_CONFIG: Dict[str, Any] = {
    "default": "chromium",
    "chromium": {"enabled": True, "args": ["--no-sandbox", "--disable-setuid-sandbox", "--disable-dev-shm-usage"]},
    "firefox": {"enabled": True},
    "webkit": {"enabled": True},
}


class BrowserManager:
    """Owns the Playwright driver and one launched browser per target"""

    def __init__(
        self,
        config_path: Optional[str] = None,
        headless: Optional[bool] = None,
        timeout_ms: Optional[int] = None,
        wait_until: Optional[str] = None,
    ):
        settings = get_settings()
        self.config_path = Path(config_path or settings.browser_config_path or BUNDLED_CONFIG_PATH)
        self.headless = settings.headless if headless is None else headless
        self.timeout_ms = timeout_ms or settings.navigation_timeout_ms
        self.wait_until = wait_until or settings.navigation_wait_until

        self.configs, self.default_target = self.load_config()
        self._playwright: Optional[Playwright] = None
        self._browsers: Dict[BrowserTarget, Browser] = {}
        self._lock = asyncio.Lock()

    def load_config(self) -> tuple:
        """Load browser targets from YAML, falling back to built-in defaults"""
        raw = DEFAULT_BROWSER_CONFIG
        path = self.config_path
        if path.exists():
            try:
                with open(path, "r", encoding="utf-8") as f:
                    raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid browser config {path}: {e}", setting="browser_config_path")
            logger.info(f"Loaded browser config from {path}")
        else:
            logger.info(f"Browser config {self.config_path} not found, using defaults")

        configs = {}
        for target in BrowserTarget:
            entry = raw.get(target.value)
            if entry is None:
                continue
            if not isinstance(entry, dict):
                raise ConfigurationError(f"Browser entry '{target.value}' must be a mapping", setting=target.value)
            configs[target] = BrowserConfig.from_dict(target, entry)

        try:
            default_target = BrowserTarget.from_value(raw.get("default", get_settings().default_browser))
        except ValueError as e:
            raise ConfigurationError(str(e), setting="default")

        return configs, default_target

    def enabled_targets(self) -> List[BrowserTarget]:
        return [target for target in BrowserTarget if target in self.configs and self.configs[target].enabled]

    async def get_browser(self, target: BrowserTarget) -> Browser:
        """Return the launched browser for a target, launching it on first use"""
        async with self._lock:
            if target in self._browsers:
                return self._browsers[target]

            config = self.configs.get(target)
            if not config or not config.enabled:
                raise ConfigurationError(f"Browser {target.value} is not enabled in config", setting=target.value)

            if self._playwright is None:
                self._playwright = await async_playwright().start()

            launcher = getattr(self._playwright, target.value)
            browser = await launcher.launch(
                headless=self.headless,
                args=config.args or None,
                executable_path=config.executable_path,
            )
            self._browsers[target] = browser
            logger.info(f"Launched {target.value} browser")
            return browser

    async def navigate_to(self, url: str, target: BrowserTarget) -> NavigationResult:
        """Open a fresh page on the target browser and load the URL"""
        try:
            browser = await self.get_browser(target)
        except ConfigurationError as e:
            return NavigationResult(page=None, success=False, error=e.message)
        except Exception as e:
            logger.error(f"Failed to launch {target.value}: {e}")
            return NavigationResult(page=None, success=False, error=f"Failed to launch {target.value}: {e}")

        context = None
        try:
            context = await browser.new_context()
            page = await context.new_page()
        except Exception as e:
            logger.error(f"Failed to open a page on {target.value}: {e}")
            if context is None:
                # A browser that cannot create contexts is gone; relaunch on next use
                await self._forget_browser(target, browser)
            else:
                await self._close_context(context)
            return NavigationResult(page=None, success=False, error=str(e))

        handle = PageHandle(page, context, browser=target.value, url=url)

        try:
            await page.goto(url, wait_until=self.wait_until, timeout=self.timeout_ms)
        except Exception as e:
            logger.warning(f"Navigation to {url} failed on {target.value}: {e}")
            return NavigationResult(page=handle, success=False, error=str(e))

        return NavigationResult(page=handle, success=True)

    async def run_across_browsers(
        self, operation: Callable[[BrowserTarget], Awaitable[Any]]
    ) -> Dict[str, Any]:
        """
        Run the same operation once per enabled target, concurrently

        A failing target maps to an error descriptor and never blocks the others.
        """
        targets = self.enabled_targets()

        async def run_one(target: BrowserTarget):
            try:
                return target.value, await operation(target)
            except Exception as e:
                logger.error(f"{target.value} run failed: {e}")
                return target.value, {"error": getattr(e, "message", str(e)), "success": False}

        results = await asyncio.gather(*(run_one(target) for target in targets))
        return dict(results)

    async def _forget_browser(self, target: BrowserTarget, browser: Browser) -> None:
        async with self._lock:
            if self._browsers.get(target) is browser:
                del self._browsers[target]

    async def _close_context(self, context: BrowserContext) -> None:
        try:
            await context.close()
        except Exception as e:
            logger.warning(f"Failed to close browser context: {e}")

    async def close_browser(self, target: BrowserTarget) -> None:
        async with self._lock:
            browser = self._browsers.pop(target, None)
        if browser is not None:
            await browser.close()

    async def close_all(self) -> None:
        for target in list(self._browsers):
            await self.close_browser(target)
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
