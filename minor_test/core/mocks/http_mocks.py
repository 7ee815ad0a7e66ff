"""HTTP interception for functional tests.

Outbound ``requests`` calls made while a suite runs are intercepted: a call
either matches a registered mock or fails, unless it targets a host that was
explicitly allowed through with ``enable_local_connect()``. The application
under test listens on the loopback host, so that host is allowed through at
suite start and stays allowed when mocks are cleared between tests.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple, Union

import responses

from ...utils.logging import get_logger

logger = get_logger(__name__)

UrlPattern = Union[str, re.Pattern[str]]


class MockCapabilities(ABC):
    """Capability set for stubbing outbound HTTP calls.

    ``CAPABILITIES`` lists the names a suite facade exposes to test authors.
    """

    CAPABILITIES: Tuple[str, ...] = (
        "enable_local_connect",
        "clean_all",
        "mock",
        "mock_get",
        "mock_post",
        "mock_put",
        "mock_delete",
        "pending_mocks",
        "is_done",
    )

    @abstractmethod
    def enable_local_connect(self, host: str = "localhost") -> None:
        """Let requests to ``host`` reach the real network."""

    @abstractmethod
    def clean_all(self) -> None:
        """Remove every registered mock. Allowed hosts stay allowed."""

    @abstractmethod
    def mock(self, method: str, url: UrlPattern, **kwargs: Any) -> Any:
        """Register a mocked response for ``method`` and ``url``."""

    @abstractmethod
    def registered(self) -> List[Any]:
        """Return the mocks currently registered."""

    @abstractmethod
    def stop(self) -> None:
        """Stop intercepting."""

    def mock_get(self, url: UrlPattern, **kwargs: Any) -> Any:
        return self.mock("GET", url, **kwargs)

    def mock_post(self, url: UrlPattern, **kwargs: Any) -> Any:
        return self.mock("POST", url, **kwargs)

    def mock_put(self, url: UrlPattern, **kwargs: Any) -> Any:
        return self.mock("PUT", url, **kwargs)

    def mock_delete(self, url: UrlPattern, **kwargs: Any) -> Any:
        return self.mock("DELETE", url, **kwargs)

    @abstractmethod
    def pending_mocks(self) -> List[str]:
        """Describe mocks that have not been called yet."""

    def is_done(self) -> bool:
        """True when every registered mock has been called."""
        return not self.pending_mocks()


def local_host_pattern(host: str) -> re.Pattern[str]:
    """Match any http(s) URL on ``host``, with or without a port."""
    return re.compile(rf"https?://{re.escape(host)}(:\d+)?(/|$)")


class ResponsesMocks(MockCapabilities):
    """Mock capabilities backed by the ``responses`` library."""

    def __init__(self, requests_mock: Optional[responses.RequestsMock] = None):
        """Create the mock set and start intercepting.

        Args:
            requests_mock: Optional pre-built ``RequestsMock`` to drive
        """
        self.requests_mock = requests_mock or responses.RequestsMock(
            assert_all_requests_are_fired=False
        )
        self._passthru: List[re.Pattern[str]] = []
        self._active = False
        self.start()

    def start(self) -> None:
        if not self._active:
            self.requests_mock.start()
            self._active = True

    def stop(self) -> None:
        if self._active:
            self.requests_mock.stop(allow_assert=False)
            self._active = False
            logger.debug("HTTP interception stopped")

    def enable_local_connect(self, host: str = "localhost") -> None:
        pattern = local_host_pattern(host)
        if any(p.pattern == pattern.pattern for p in self._passthru):
            return
        self._passthru.append(pattern)
        self.requests_mock.add_passthru(pattern)
        logger.debug(f"Real connections enabled for {host}")

    def clean_all(self) -> None:
        # reset() also drops passthrough prefixes, re-add ours.
        self.requests_mock.reset()
        for pattern in self._passthru:
            self.requests_mock.add_passthru(pattern)

    def mock(self, method: str, url: UrlPattern, **kwargs: Any) -> responses.BaseResponse:
        return self.requests_mock.add(method.upper(), url, **kwargs)

    def registered(self) -> List[responses.BaseResponse]:
        return list(self.requests_mock.registered())

    def pending_mocks(self) -> List[str]:
        return [
            f"{mock.method} {getattr(mock.url, 'pattern', mock.url)}"
            for mock in self.registered()
            if mock.call_count == 0
        ]
