"""HTTP mocking capability sets."""

from .http_mocks import MockCapabilities, ResponsesMocks, local_host_pattern

__all__ = ["MockCapabilities", "ResponsesMocks", "local_host_pattern"]
