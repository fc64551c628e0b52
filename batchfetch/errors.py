"""
batchfetch.errors — Failures raised by a download run.

Only two kinds of error ever leave a run: configuration problems, raised
before any worker starts, and sequencing problems, which mean the collector
lost track of a request.  Failed fetches are never raised; they come back as
result records marked failed.
"""

__all__ = [
    "BatchFetchError",
    "ConfigurationError",
    "SequencingError",
]


class BatchFetchError(RuntimeError):
    """Base exception for batchfetch failures."""


class ConfigurationError(BatchFetchError, ValueError):
    """Raised when download options are invalid (e.g. a negative worker count)."""


class SequencingError(BatchFetchError):
    """Raised when a result cannot be matched back to exactly one input request."""
