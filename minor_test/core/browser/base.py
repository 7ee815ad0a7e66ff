"""Browser collaborator interfaces.

The lifecycle only ever talks to a browser through these three types, so a
suite can swap the Playwright engine for any other implementation (or a fake
in unit tests) without touching the hook sequencing.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class BrowserWindow(ABC):
    """The page-level window of a live browser instance."""

    @abstractmethod
    async def dispatch(self, event: str) -> bool:
        """Invoke the window's ``on<event>`` handler if one is set.

        Args:
            event: Event name without the ``on`` prefix, e.g. ``"unload"``

        Returns:
            True if a handler was present and invoked
        """


class BrowserHandle(ABC):
    """One simulated browser instance, owned by the lifecycle."""

    @property
    @abstractmethod
    def window(self) -> Optional[BrowserWindow]:
        """The live window, or None once the page is gone."""

    @abstractmethod
    async def html(self) -> str:
        """Return the currently rendered markup."""

    @abstractmethod
    async def destroy(self) -> None:
        """Tear the instance down. May raise; callers treat it as best effort."""


class BrowserFactory(ABC):
    """Creates browser instances from per-suite options."""

    @abstractmethod
    async def create(self, options: Dict[str, Any]) -> BrowserHandle:
        """Create a brand-new browser instance.

        Args:
            options: Browser sub-configuration, passed through unchanged
        """

    async def close(self) -> None:
        """Release resources shared between instances."""
