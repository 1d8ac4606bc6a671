"""Exception types raised by gitscope.

Every failure is fatal for the hook invocation that triggered it; the host
pipeline reports the error and nothing here retries.
"""


class GitscopeError(Exception):
    """Base class for all gitscope errors."""


class HistoryUnavailable(GitscopeError):
    """Raised when git cannot be run or the history cannot be read."""


class PackageResolutionError(GitscopeError):
    """Raised when the current package cannot be located inside the repository."""
