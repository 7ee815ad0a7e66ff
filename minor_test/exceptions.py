"""Exception types raised by minor-test."""


class MinorTestError(Exception):
    """Base class for all minor-test errors."""


class BrowserNotStartedError(MinorTestError, RuntimeError):
    """Raised when an operation needs a live browser and none exists."""


class ParentChannelError(MinorTestError, RuntimeError):
    """Raised when a message must reach the supervising process but no
    channel to it was registered in this process."""


class CapabilityConflictError(MinorTestError, ValueError):
    """Raised when two capability sets define the same name."""

    def __init__(self, name: str, first: object, second: object):
        self.name = name
        super().__init__(
            f"Capability '{name}' is defined by both "
            f"{type(first).__name__} and {type(second).__name__}"
        )


class ConfigurationError(MinorTestError):
    """Raised when a configuration file cannot be loaded or validated."""
