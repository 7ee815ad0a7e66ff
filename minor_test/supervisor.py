"""Parent-process channel for functional test workers.

Functional tests usually run in a worker process started by a supervisor
that also hosts the application under test. The worker tells the supervisor
when it resets its HTTP mocks so the application side can drop its own
mocks at the same moment. Messages are plain dicts sent over a
``multiprocessing`` pipe.
"""

import multiprocessing
import time
from typing import Any, Callable, Dict, Optional

from .core.mocks.http_mocks import MockCapabilities
from .utils.logging import get_logger

logger = get_logger(__name__)

CLEAR_MOCKS = "clearMocks"

MessageHandler = Callable[[Dict[str, Any]], None]

_parent_channel = None


def register_parent_channel(channel) -> None:
    """Register the channel this process uses to reach its supervisor."""
    global _parent_channel
    _parent_channel = channel


def parent_channel():
    """Return the channel to the supervising process, or None."""
    return _parent_channel


def _worker_main(channel, target: Callable[..., Any], args: tuple) -> None:
    register_parent_channel(channel)
    try:
        target(*args)
    finally:
        register_parent_channel(None)
        channel.close()


class Supervisor:
    """Spawns a test worker and handles the messages it sends back."""

    def __init__(self,
                 mocks: Optional[MockCapabilities] = None,
                 handlers: Optional[Dict[str, MessageHandler]] = None,
                 context: Optional[str] = None):
        """Initialize the supervisor.

        Args:
            mocks: Mocks owned by this process, cleared on ``clearMocks``
            handlers: Extra handlers keyed by message type
            context: multiprocessing start method, e.g. ``"fork"``
        """
        self.mocks = mocks
        self.handlers: Dict[str, MessageHandler] = {CLEAR_MOCKS: self._on_clear_mocks}
        self.handlers.update(handlers or {})
        self._ctx = multiprocessing.get_context(context)
        self.process = None
        self.connection = None
        self._eof = False

    def spawn(self, target: Callable[..., Any], *args: Any):
        """Start ``target(*args)`` in a worker that can message this process.

        Returns:
            The started worker process
        """
        parent_conn, child_conn = self._ctx.Pipe()
        self.process = self._ctx.Process(
            target=_worker_main,
            args=(child_conn, target, args),
        )
        self.process.start()
        child_conn.close()
        self.connection = parent_conn
        self._eof = False
        logger.info(f"Started test worker pid={self.process.pid}")
        return self.process

    def dispatch(self, message: Dict[str, Any]) -> bool:
        """Route one message to its handler.

        Returns:
            False if the message type has no handler
        """
        message_type = message.get("type") if isinstance(message, dict) else None
        handler = self.handlers.get(message_type)
        if handler is None:
            logger.warning(f"Ignoring unknown worker message: {message!r}")
            return False
        handler(message)
        return True

    def poll(self, timeout: float = 0.0) -> int:
        """Handle every message that arrives within ``timeout`` seconds.

        Returns:
            Number of messages handled
        """
        if self.connection is None:
            return 0

        handled = 0
        while self.connection.poll(timeout):
            try:
                message = self.connection.recv()
            except EOFError:
                self._eof = True
                break
            self.dispatch(message)
            handled += 1
            timeout = 0.0
        return handled

    def join(self, timeout: Optional[float] = None) -> Optional[int]:
        """Keep handling messages until the worker exits.

        Returns:
            The worker's exit code, or None if it is still running
        """
        if self.process is None:
            return None

        deadline = None if timeout is None else time.monotonic() + timeout
        while self.process.is_alive() and not self._eof:
            self.poll(0.1)
            if deadline is not None and time.monotonic() >= deadline:
                break
        self.poll()

        remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
        self.process.join(remaining)

        if self.process.exitcode is not None and self.connection is not None:
            self.connection.close()
            self.connection = None
        return self.process.exitcode

    def _on_clear_mocks(self, message: Dict[str, Any]) -> None:
        if self.mocks is not None:
            self.mocks.clean_all()
        logger.info("Worker cleared its mocks", start=message.get("start"))
