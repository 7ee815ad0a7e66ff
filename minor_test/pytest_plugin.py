"""pytest integration for minor-test.

Enable it from a ``conftest.py``::

    pytest_plugins = ["minor_test.pytest_plugin"]

Every test in that tree then starts with a fresh browser and no HTTP mocks.
The suite defaults to one built from ``test/minor-test.yaml``; override the
``minor_test_suite`` fixture (session scope) to build your own, for example
with a ``MinorTest`` subclass.
"""

import pytest

from .composer import FunctionalTestSuite, create_suite
from .core.config.config_manager import ConfigManager
from .runner import HookRunner
from .utils.logging import LogContext, generate_suite_id


@pytest.fixture(scope="session")
def minor_test_suite() -> FunctionalTestSuite:
    """The suite for this test session."""
    return create_suite(ConfigManager().load_config())


@pytest.fixture(scope="session")
def minor_test_runner(minor_test_suite: FunctionalTestSuite):
    """Runner holding the suite's hooks; runs suite start once."""
    runner = HookRunner()
    minor_test_suite.setup().run(runner)
    try:
        with LogContext(suite_id=generate_suite_id()):
            runner.run_before_all()
        yield runner
    finally:
        try:
            runner.run(minor_test_suite.teardown())
        finally:
            runner.close()


@pytest.fixture(autouse=True)
def minor_test_reset(request, minor_test_runner: HookRunner) -> None:
    """Reset browser and mocks before every test."""
    with LogContext(test_id=request.node.nodeid):
        minor_test_runner.run_before_each()


@pytest.fixture
def minor_test(minor_test_suite: FunctionalTestSuite,
               minor_test_reset) -> FunctionalTestSuite:
    """The suite, after this test's reset."""
    return minor_test_suite


@pytest.fixture
def minor_test_browser(minor_test: FunctionalTestSuite):
    """This test's browser instance."""
    return minor_test.browser
