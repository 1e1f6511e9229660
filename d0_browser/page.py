"""
Page handle wrapping a live Playwright page

Analyzers only talk to the DOM through this handle: evaluate a script,
press a key, focus an element, inject a script, close.
"""
from typing import Any, Optional

from playwright.async_api import BrowserContext, Page

from core.logging import get_logger

logger = get_logger(__name__, domain="d0")


class PageHandle:
    """Async handle over one rendered page and the context that owns it"""

    def __init__(self, page: Page, context: BrowserContext, browser: str, url: str):
        self._page = page
        self._context = context
        self.browser = browser
        self.url = url
        self.closed = False

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        """Run a JavaScript function against the DOM and return serializable data"""
        if arg is None:
            return await self._page.evaluate(script)
        return await self._page.evaluate(script, arg)

    async def press_key(self, key: str) -> None:
        await self._page.keyboard.press(key)

    async def focus(self, selector: str) -> None:
        await self._page.focus(selector)

    async def inject_script(self, content: Optional[str] = None, url: Optional[str] = None) -> None:
        """Add a <script> tag to the page from inline content or a URL"""
        if content is None and url is None:
            raise ValueError("inject_script needs content or url")
        if content is not None:
            await self._page.add_script_tag(content=content)
        else:
            await self._page.add_script_tag(url=url)

    async def wait_for_function(self, expression: str, timeout_ms: int = 10000) -> None:
        await self._page.wait_for_function(expression, timeout=timeout_ms)

    async def close(self) -> None:
        """Release the page and its context; safe to call more than once"""
        if self.closed:
            return
        self.closed = True
        await self._context.close()
        logger.debug(f"Closed {self.browser} page for {self.url}")
