"""
Exception types raised across the package.
"""


class InvalidArgument(ValueError):
    """Scan bounds outside the accepted domain."""


class LlmError(RuntimeError):
    """The LLM server replied with something that is not usable JSON."""


class DiscoveryError(RuntimeError):
    """AI discovery or source lookup failed."""


__all__ = ["InvalidArgument", "LlmError", "DiscoveryError"]
