"""Pytest configuration and fixtures for minor-test tests."""

import multiprocessing
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

from minor_test.core.browser.base import BrowserFactory, BrowserHandle, BrowserWindow
from minor_test.core.mocks.http_mocks import ResponsesMocks
from minor_test.lifecycle import MinorTest
from minor_test.utils.logging import setup_logging

pytest_plugins = ["pytester"]


class FakeWindow(BrowserWindow):
    """Window whose unload handlers are plain Python callables."""

    def __init__(self, events: List[str], handlers: Dict[str, Callable[[], Any]]):
        self.events = events
        self.handlers = handlers

    async def dispatch(self, event: str) -> bool:
        handler = self.handlers.get(event)
        if handler is None:
            return False
        self.events.append(event)
        handler()
        return True


class FakeBrowser(BrowserHandle):
    """In-memory browser instance recording its lifecycle."""

    def __init__(self, factory: "FakeBrowserFactory", options: Dict[str, Any]):
        self.factory = factory
        self.options = options
        self.destroyed = False
        self._window = FakeWindow(factory.events, dict(factory.handlers))

    @property
    def window(self) -> Optional[FakeWindow]:
        if self.destroyed:
            return None
        return self._window

    async def html(self) -> str:
        return "<html><body><h1>Hello</h1></body></html>"

    async def destroy(self) -> None:
        self.factory.events.append("destroy")
        if self.factory.fail_destroy:
            raise RuntimeError("browser refused to close")
        self.destroyed = True


class FakeBrowserFactory(BrowserFactory):
    """Browser factory handing out FakeBrowser instances."""

    def __init__(self):
        self.created: List[FakeBrowser] = []
        self.events: List[str] = []
        self.handlers: Dict[str, Callable[[], Any]] = {}
        self.fail_destroy = False
        self.fail_create = False
        self.closed = False

    async def create(self, options: Dict[str, Any]) -> FakeBrowser:
        if self.fail_create:
            raise RuntimeError("browser failed to start")
        browser = FakeBrowser(self, options)
        self.created.append(browser)
        self.events.append("create")
        return browser

    async def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def setup_test_logging():
    """Set up logging for tests."""
    setup_logging(level="DEBUG", format_type="simple")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without the flags the lifecycle sets or reads."""
    for name in ("NODE_ENV", "FUNCTIONAL_TEST", "TEST_DEBUG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def browser_factory() -> FakeBrowserFactory:
    """Create a fake browser factory."""
    return FakeBrowserFactory()


@pytest.fixture
def http_mocks():
    """Create an active responses-backed mock set."""
    mocks = ResponsesMocks()
    yield mocks
    mocks.stop()


@pytest.fixture
def channel_pair():
    """Create a pipe standing in for the supervisor connection.

    Yields:
        (supervisor_end, worker_end)
    """
    supervisor_end, worker_end = multiprocessing.Pipe()
    yield supervisor_end, worker_end
    supervisor_end.close()
    worker_end.close()


@pytest.fixture
def lifecycle(tmp_path: Path,
              browser_factory: FakeBrowserFactory,
              http_mocks: ResponsesMocks,
              channel_pair) -> MinorTest:
    """Create a lifecycle controller wired to fakes."""
    _, worker_end = channel_pair
    return MinorTest(
        {"base_path": tmp_path},
        browser_factory,
        http_mocks,
        channel=worker_end,
    )
