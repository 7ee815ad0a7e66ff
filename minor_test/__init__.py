"""minor-test - functional test lifecycle for browser-driven suites

Boots shared suite state once, gives every test a fresh browser instance and
a clean set of HTTP mocks, and exposes that sequence as hooks for a host test
runner.
"""

__version__ = "0.1.0"
__description__ = "Functional test lifecycle for browser-driven web application suites"

from .composer import FunctionalTestSuite, compose_capabilities, create_suite
from .lifecycle import MinorTest
from .runner import HookRunner
from .exceptions import (
    MinorTestError,
    BrowserNotStartedError,
    ParentChannelError,
    CapabilityConflictError,
    ConfigurationError,
)

__all__ = [
    "FunctionalTestSuite",
    "compose_capabilities",
    "create_suite",
    "MinorTest",
    "HookRunner",
    "MinorTestError",
    "BrowserNotStartedError",
    "ParentChannelError",
    "CapabilityConflictError",
    "ConfigurationError",
]
