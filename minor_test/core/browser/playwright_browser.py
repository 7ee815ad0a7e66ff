"""Playwright-backed browser collaborator.

One browser process is launched lazily per factory and shared for the whole
run. Every ``create()`` opens a fresh browser context with its own page, so
each test gets isolated cookies, storage, history and DOM while paying the
process start-up cost only once.
"""

from typing import Any, Dict, Optional

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright
)

from ..config.settings import PlaywrightConfig
from ...utils.logging import get_logger
from .base import BrowserFactory, BrowserHandle, BrowserWindow

logger = get_logger(__name__)

# Calls window.on<event> the way the page itself would before navigating away.
_DISPATCH_SCRIPT = """
(name) => {
    const handler = window['on' + name];
    if (typeof handler !== 'function') {
        return false;
    }
    handler.call(window, new Event(name));
    return true;
}
"""


class PageWindow(BrowserWindow):
    """Window of a Playwright page."""

    def __init__(self, page: Page):
        self.page = page

    async def dispatch(self, event: str) -> bool:
        return await self.page.evaluate(_DISPATCH_SCRIPT, event)


class PlaywrightBrowser(BrowserHandle):
    """A single browser context and its page."""

    def __init__(self, context: BrowserContext, page: Page):
        self.context = context
        self.page = page
        self._window = PageWindow(page)

    @property
    def window(self) -> Optional[PageWindow]:
        if self.page.is_closed():
            return None
        return self._window

    async def html(self) -> str:
        return await self.page.content()

    async def destroy(self) -> None:
        await self.context.close()


class PlaywrightBrowserFactory(BrowserFactory):
    """Creates isolated Playwright browser instances on a shared process."""

    def __init__(self, config: Optional[PlaywrightConfig] = None):
        """Initialize the factory.

        Args:
            config: Launch settings for the shared browser process
        """
        self.config = config or PlaywrightConfig()
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None

    def _get_launch_options(self) -> Dict[str, Any]:
        return {
            "headless": self.config.headless,
            "args": list(self.config.launch_args),
        }

    async def _ensure_browser(self) -> Browser:
        if self.browser is None:
            logger.info(f"Launching {self.config.browser_type} browser")
            self.playwright = await async_playwright().start()
            try:
                launcher = getattr(self.playwright, self.config.browser_type)
                self.browser = await launcher.launch(**self._get_launch_options())
            except Exception:
                await self.close()
                raise
        return self.browser

    async def create(self, options: Dict[str, Any]) -> PlaywrightBrowser:
        browser = await self._ensure_browser()
        context = await browser.new_context(**options)
        page = await context.new_page()
        logger.debug("Created browser context", options=options)
        return PlaywrightBrowser(context, page)

    async def close(self) -> None:
        """Close the shared browser process and stop Playwright."""
        try:
            if self.browser:
                await self.browser.close()
            if self.playwright:
                await self.playwright.stop()
        finally:
            self.browser = None
            self.playwright = None

        logger.debug("Playwright browser factory closed")
