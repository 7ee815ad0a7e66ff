"""Lifecycle controller for functional test suites.

``MinorTest`` owns the state shared by a whole test run (configuration, the
application port, the live browser instance) and defines what happens once
when the suite starts and before every single test:

- suite start: mark the process as a production-like functional test run,
  then run the ``start()`` and ``before()`` extension points;
- per-test reset: unload and destroy the previous browser, create a new one,
  clear HTTP mocks, then run the ``before_each()`` extension point.

The reset runs before every test so no test can observe another test's DOM,
navigation history, or outstanding mocked calls.
"""

import os
import time
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from .core.browser.base import BrowserFactory, BrowserHandle
from .core.config.settings import FunctionalTestConfig
from .core.mocks.http_mocks import MockCapabilities
from .exceptions import BrowserNotStartedError, ParentChannelError
from .utils.logging import get_logger

logger = get_logger(__name__)

NODE_ENV = "NODE_ENV"
FUNCTIONAL_TEST = "FUNCTIONAL_TEST"
TEST_DEBUG = "TEST_DEBUG"

Callback = Callable[[], Any]


def debug_enabled() -> bool:
    """True when diagnostic logging was requested with TEST_DEBUG=1."""
    return os.environ.get(TEST_DEBUG) == "1"


def _complete(done: Optional[Callback]) -> Any:
    if callable(done):
        return done()
    return None


class SetupHandle:
    """Deferred hook registration returned by ``MinorTest.setup()``."""

    def __init__(self, lifecycle: "MinorTest"):
        self.lifecycle = lifecycle

    def run(self, runner) -> None:
        """Register the suite-start and per-test-reset hooks with ``runner``.

        Nothing runs here; the runner invokes the hooks later.

        Args:
            runner: Host runner exposing ``before_all`` and ``before_each``
        """
        lifecycle = self.lifecycle

        async def before_all() -> None:
            await lifecycle._before()

        async def before_each() -> None:
            await lifecycle._before_each()

        runner.before_all(before_all)
        runner.before_each(before_each)


class MinorTest:
    """Suite-wide state plus the hook sequence run around every test."""

    HTML_FILE = "test.html"

    CAPABILITIES: Tuple[str, ...] = (
        "start",
        "before",
        "before_each",
        "clear",
        "save",
        "set_port",
        "setup",
        "teardown",
    )

    def __init__(self,
                 options: Union[FunctionalTestConfig, Mapping[str, Any], None],
                 browser_factory: BrowserFactory,
                 mocks: MockCapabilities,
                 channel=None):
        """Initialize the lifecycle controller.

        Args:
            options: Suite configuration, as a model or a plain mapping
            browser_factory: Creates a new browser instance per test
            mocks: HTTP interception capability set
            channel: Connection to the supervising process, if any
        """
        if not isinstance(options, FunctionalTestConfig):
            options = FunctionalTestConfig(**dict(options or {}))

        self.options = options
        self.browser_factory = browser_factory
        self.mocks = mocks
        self.channel = channel

        self.started = False
        self.port: Optional[int] = None
        self.browser: Optional[BrowserHandle] = None

    # Extension points

    async def start(self) -> None:
        """Runs once when the suite starts, before ``before()``."""

    async def before(self, done: Optional[Callback] = None) -> Any:
        """Runs once when the suite starts.

        Allows real connections to the local host so the application under
        test stays reachable while every other host is intercepted. If
        ``done`` is given it is called and its result returned.
        """
        self.mocks.enable_local_connect(self.options.local_host)
        return _complete(done)

    async def before_each(self, done: Optional[Callback] = None) -> Any:
        """Runs before each test, after the browser and mocks were reset."""
        return _complete(done)

    # Public operations

    def clear(self) -> None:
        """Clear all HTTP mocks and notify the supervising process.

        Raises:
            ParentChannelError: If no channel to a supervisor exists
        """
        self.mocks.clean_all()
        if self.channel is None:
            raise ParentChannelError(
                "clear() needs a channel to the supervising process; "
                "run the suite inside a supervised worker"
            )
        self.channel.send({
            "type": "clearMocks",
            "start": int(time.time() * 1000),
        })

    async def save(self) -> Path:
        """Write the current page's markup to ``<base_path>/test/test.html``.

        Returns:
            Path of the written file

        Raises:
            BrowserNotStartedError: If no browser instance is live
        """
        if self.browser is None:
            raise BrowserNotStartedError("save() called before any browser was created")

        html = await self.browser.html()
        filename = Path(self.options.base_path) / "test" / self.HTML_FILE
        filename.parent.mkdir(parents=True, exist_ok=True)
        filename.write_text(html, encoding="utf-8")

        logger.info(f"Wrote HTML to {filename}")
        return filename

    def set_port(self, port: int) -> None:
        """Store the port the application under test listens on."""
        if debug_enabled():
            logger.info(f"setPort {port}")
        self.port = port

    def setup(self) -> SetupHandle:
        """Return a handle whose ``run(runner)`` registers this suite's hooks."""
        return SetupHandle(self)

    async def teardown(self) -> None:
        """Release the live browser, HTTP interception and the browser factory.

        Meant to run once when the test process finishes.
        """
        if self.browser is not None:
            await self._destroy_browser()
        self.mocks.stop()
        await self.browser_factory.close()

    # Hook bodies

    async def _before(self) -> Any:
        """Suite-start procedure."""
        os.environ[NODE_ENV] = "production"
        os.environ[FUNCTIONAL_TEST] = "true"

        await self.start()
        result = await self.before()
        self.started = True
        return result

    async def _before_each(self) -> Any:
        """Per-test reset procedure."""
        options: Dict[str, Any] = dict(self.options.browser or {})

        if self.browser is not None:
            try:
                # simulate the page being closed before the instance goes away
                window = self.browser.window
                if window is not None:
                    await window.dispatch("beforeunload")
                    await window.dispatch("unload")
            finally:
                await self._destroy_browser()

        self.browser = await self.browser_factory.create(options)
        self.clear()
        return await self.before_each()

    async def _destroy_browser(self) -> None:
        browser, self.browser = self.browser, None
        try:
            await browser.destroy()
        except Exception as e:
            if debug_enabled():
                logger.warning(
                    f"minor-test: error calling destroy() on browser instance: {e}",
                    exc_info=True,
                )
