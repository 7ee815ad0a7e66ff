"""Browser collaborators for functional tests.

The lifecycle depends only on the abstract interfaces in ``base``; the
Playwright implementation is the default engine.
"""

from .base import BrowserFactory, BrowserHandle, BrowserWindow
from .playwright_browser import PlaywrightBrowserFactory, PlaywrightBrowser

__all__ = [
    "BrowserFactory",
    "BrowserHandle",
    "BrowserWindow",
    "PlaywrightBrowserFactory",
    "PlaywrightBrowser",
]
