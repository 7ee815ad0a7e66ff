"""End-to-end runs of a suite through a host runner.

These tests drive the suite exactly the way a host test runner does: build
the suite once, register its hooks, then fire before-all once and
before-each per test.
"""

import os
from unittest.mock import patch

import pytest

from minor_test import create_suite
from minor_test.runner import HookRunner


@pytest.fixture
def host_runner():
    runner = HookRunner()
    yield runner
    runner.close()


@pytest.fixture
def suite(browser_factory, http_mocks, channel_pair, tmp_path):
    _, worker_end = channel_pair
    suite = create_suite(
        {"base_path": tmp_path},
        browser_factory=browser_factory,
        mocks=http_mocks,
        channel=worker_end,
    )
    return suite


class TestSuiteFlow:
    """Suite lifecycle driven through HookRunner."""

    def test_default_options_scenario(self, browser_factory, http_mocks, channel_pair, host_runner):
        supervisor_end, worker_end = channel_pair
        suite = create_suite({}, browser_factory=browser_factory, mocks=http_mocks,
                             channel=worker_end)

        suite.setup().run(host_runner)
        host_runner.run_before_all()

        assert suite.started
        assert any(p.match("http://localhost:8080/")
                   for p in http_mocks.requests_mock.passthru_prefixes)
        assert os.environ["NODE_ENV"] == "production"
        assert os.environ["FUNCTIONAL_TEST"] == "true"

        suite.mock_get("http://api.example.com/session", json={"user": "ana"})
        host_runner.run_before_each()
        first = suite.browser
        assert http_mocks.registered() == []

        suite.mock_get("http://api.example.com/session", json={"user": "ana"})
        host_runner.run_before_each()
        second = suite.browser
        assert http_mocks.registered() == []

        assert first is not second
        assert first.destroyed
        assert [supervisor_end.recv()["type"] for _ in range(2)] == ["clearMocks", "clearMocks"]

    def test_teardown_failure_never_blocks_next_test(self, suite, browser_factory, host_runner):
        suite.setup().run(host_runner)
        host_runner.run_before_all()
        host_runner.run_before_each()
        browser_factory.fail_destroy = True

        with patch("minor_test.lifecycle.logger") as mock_logger:
            host_runner.run_before_each()
            host_runner.run_before_each()

        mock_logger.warning.assert_not_called()
        assert len(browser_factory.created) == 3

    def test_save_from_a_test_body(self, suite, host_runner, tmp_path):
        suite.setup().run(host_runner)
        host_runner.run_before_all()
        host_runner.run_before_each()

        path = host_runner.run(suite.save())

        assert path == tmp_path / "test" / "test.html"
        assert "<h1>Hello</h1>" in path.read_text(encoding="utf-8")

    def test_teardown_at_end_of_run(self, suite, browser_factory, http_mocks, host_runner):
        suite.setup().run(host_runner)
        host_runner.run_before_all()
        host_runner.run_before_each()

        host_runner.run(suite.teardown())

        assert browser_factory.created[0].destroyed
        assert browser_factory.closed
        assert http_mocks._active is False
