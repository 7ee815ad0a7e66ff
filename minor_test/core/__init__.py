"""Core collaborators of the functional test lifecycle.

- Browser instances (Playwright by default)
- HTTP interception (responses)
- Configuration and settings management
"""

from .config.config_manager import ConfigManager
from .config.settings import FunctionalTestConfig
from .browser.playwright_browser import PlaywrightBrowserFactory
from .mocks.http_mocks import MockCapabilities, ResponsesMocks

__all__ = [
    "ConfigManager",
    "FunctionalTestConfig",
    "PlaywrightBrowserFactory",
    "MockCapabilities",
    "ResponsesMocks",
]
