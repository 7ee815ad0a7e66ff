"""A minimal host runner with before-all and before-each hook slots.

Suites register their hooks here through ``suite.setup().run(runner)``; the
host (the pytest plugin, a behave environment, or a plain script) then calls
``run_before_all()`` once and ``run_before_each()`` before every test.

The runner owns a single event loop for its whole lifetime. Browser objects
are bound to the loop they were created on, so every hook and every test
coroutine of a run must go through ``run()``.
"""

import asyncio
from typing import Any, Awaitable, Callable, List, Optional

from .utils.logging import get_logger

logger = get_logger(__name__)

Hook = Callable[[], Awaitable[Any]]


class HookRunner:
    """Sequential hook scheduler backed by one private event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop or asyncio.new_event_loop()
        self._before_all: List[Hook] = []
        self._before_each: List[Hook] = []

    def before_all(self, callback: Hook) -> None:
        """Register a hook to run once before any test."""
        self._before_all.append(callback)

    def before_each(self, callback: Hook) -> None:
        """Register a hook to run before every test."""
        self._before_each.append(callback)

    def run(self, awaitable: Awaitable[Any]) -> Any:
        """Run ``awaitable`` to completion on the runner's loop."""
        return self.loop.run_until_complete(awaitable)

    def run_before_all(self) -> None:
        for hook in self._before_all:
            self.run(hook())

    def run_before_each(self) -> None:
        for hook in self._before_each:
            self.run(hook())

    def close(self) -> None:
        if not self.loop.is_closed():
            self.loop.close()
            logger.debug("Hook runner loop closed")
