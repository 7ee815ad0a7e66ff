"""Tests for the supervisor and the worker's parent channel."""

from unittest.mock import MagicMock

import pytest

from minor_test import supervisor
from minor_test.core.mocks.http_mocks import MockCapabilities, ResponsesMocks
from minor_test.lifecycle import MinorTest
from minor_test.supervisor import Supervisor


def _clear_from_worker():
    mocks = ResponsesMocks()
    try:
        lifecycle = MinorTest({}, MagicMock(), mocks, channel=supervisor.parent_channel())
        lifecycle.clear()
    finally:
        mocks.stop()


def _send_unknown_then_exit():
    supervisor.parent_channel().send({"type": "screenshot", "path": "/tmp/x.png"})


def _fail_in_worker():
    raise SystemExit(3)


class TestSupervisor:
    """Worker processes reporting back over the pipe."""

    def test_worker_clear_resets_supervisor_mocks(self):
        mocks = MagicMock(spec=MockCapabilities)
        sup = Supervisor(mocks=mocks, context="fork")

        sup.spawn(_clear_from_worker)
        exit_code = sup.join(timeout=30)

        assert exit_code == 0
        mocks.clean_all.assert_called_once_with()

    def test_unknown_messages_are_ignored(self):
        handler = MagicMock()
        sup = Supervisor(handlers={"other": handler}, context="fork")

        sup.spawn(_send_unknown_then_exit)

        assert sup.join(timeout=30) == 0
        handler.assert_not_called()

    def test_exit_code_is_reported(self):
        sup = Supervisor(context="fork")

        sup.spawn(_fail_in_worker)

        assert sup.join(timeout=30) == 3

    def test_join_without_worker(self):
        assert Supervisor().join() is None
        assert Supervisor().poll() == 0


class TestDispatch:
    """Message routing."""

    def test_custom_handler_receives_message(self):
        handler = MagicMock()
        sup = Supervisor(handlers={"screenshot": handler})

        assert sup.dispatch({"type": "screenshot", "path": "a.png"}) is True
        handler.assert_called_once_with({"type": "screenshot", "path": "a.png"})

    @pytest.mark.parametrize("message", [{"type": "nope"}, {}, "clearMocks"])
    def test_unroutable_messages(self, message):
        assert Supervisor().dispatch(message) is False

    def test_clear_mocks_without_own_mocks(self):
        assert Supervisor().dispatch({"type": "clearMocks", "start": 1}) is True


class TestParentChannel:

    def test_register_and_read(self):
        channel = MagicMock()
        supervisor.register_parent_channel(channel)
        try:
            assert supervisor.parent_channel() is channel
        finally:
            supervisor.register_parent_channel(None)

        assert supervisor.parent_channel() is None
