"""Builds the single suite object test authors work with.

A suite combines two capability sets: the lifecycle controller and the HTTP
mock helpers. Both declare the names they expose in ``CAPABILITIES``; the
facade snapshots those bound methods once, at construction, and refuses to
build when two sets claim the same name.
"""

from typing import Any, Callable, Dict, Mapping, Optional, Type, Union

from .core.browser.base import BrowserFactory
from .core.browser.playwright_browser import PlaywrightBrowserFactory
from .core.config.settings import FunctionalTestConfig
from .core.mocks.http_mocks import MockCapabilities, ResponsesMocks
from .exceptions import CapabilityConflictError
from .lifecycle import MinorTest
from .supervisor import parent_channel
from .utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def compose_capabilities(*sources: Any) -> Dict[str, Callable[..., Any]]:
    """Merge the declared capabilities of ``sources`` into one mapping.

    Args:
        *sources: Objects with a ``CAPABILITIES`` tuple of method names

    Returns:
        Capability name to bound method

    Raises:
        CapabilityConflictError: If a name is declared by more than one source
    """
    capabilities: Dict[str, Callable[..., Any]] = {}
    owners: Dict[str, Any] = {}

    for source in sources:
        for name in source.CAPABILITIES:
            if name in capabilities:
                raise CapabilityConflictError(name, owners[name], source)
            capabilities[name] = getattr(source, name)
            owners[name] = source

    return capabilities


class FunctionalTestSuite:
    """Facade over a lifecycle controller and its mock capability set."""

    def __init__(self, lifecycle: MinorTest, mocks: MockCapabilities):
        self.lifecycle = lifecycle
        self.mocks = mocks
        self._capabilities = compose_capabilities(mocks, lifecycle)

    def __getattr__(self, name: str) -> Any:
        capabilities = self.__dict__.get("_capabilities", {})
        try:
            return capabilities[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}"
            ) from None

    def __dir__(self):
        return sorted(set(super().__dir__()) | set(self._capabilities))

    @property
    def capabilities(self) -> Dict[str, Callable[..., Any]]:
        return dict(self._capabilities)

    @property
    def browser(self):
        return self.lifecycle.browser

    @property
    def port(self) -> Optional[int]:
        return self.lifecycle.port

    @property
    def options(self) -> FunctionalTestConfig:
        return self.lifecycle.options

    @property
    def started(self) -> bool:
        return self.lifecycle.started


def create_suite(options: Union[FunctionalTestConfig, Mapping[str, Any], None] = None,
                 *,
                 browser_factory: Optional[BrowserFactory] = None,
                 mocks: Optional[MockCapabilities] = None,
                 channel=None,
                 lifecycle_class: Type[MinorTest] = MinorTest) -> FunctionalTestSuite:
    """Create the suite object for one test process.

    Call this once from the test harness entry point and pass the result
    around; nothing here is a module-level singleton.

    Args:
        options: Suite configuration
        browser_factory: Defaults to a Playwright factory built from options
        mocks: Defaults to ``ResponsesMocks``, which starts intercepting now
        channel: Defaults to the channel registered by a supervisor, if any
        lifecycle_class: ``MinorTest`` subclass overriding extension points

    Returns:
        The composed suite
    """
    if not isinstance(options, FunctionalTestConfig):
        options = FunctionalTestConfig(**dict(options or {}))

    setup_logging(
        level=options.logging.level,
        log_file=options.logging.file,
        format_type=options.logging.format,
        max_size=options.logging.max_size,
        backup_count=options.logging.backup_count,
    )

    if browser_factory is None:
        browser_factory = PlaywrightBrowserFactory(options.playwright)
    if mocks is None:
        mocks = ResponsesMocks()
    if channel is None:
        channel = parent_channel()

    lifecycle = lifecycle_class(options, browser_factory, mocks, channel=channel)
    suite = FunctionalTestSuite(lifecycle, mocks)

    logger.debug(
        f"Created suite with {lifecycle_class.__name__}",
        capabilities=sorted(suite.capabilities),
    )
    return suite
