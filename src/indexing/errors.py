"""Exception types that cross the invocation boundary.

Benign conditions (malformed payloads, items with nothing to index) are
never raised; they come back as ``SyncOutcome`` values.  Everything here
is a real failure the caller is expected to surface or retry.
"""

from __future__ import annotations


class SyncError(Exception):
    """Base class for indexing failures."""


class ConfigurationError(SyncError):
    """Required Ghost or Algolia settings are missing."""


class UpstreamError(SyncError):
    """The content source or the search index rejected or failed a call."""

    def __init__(self, service: str, message: str, status_code: int | None = None):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.message = message
        self.status_code = status_code


class RecordBudgetError(SyncError):
    """A record still exceeds the hard ceiling after every degradation.

    Only reachable when metadata alone is larger than the ceiling, which
    means the limits are misconfigured for this content.
    """

    def __init__(self, object_id: str, size_bytes: int, hard_limit_bytes: int):
        super().__init__(
            f"Record {object_id!r} is {size_bytes} bytes after all degradations "
            f"(hard limit {hard_limit_bytes})."
        )
        self.object_id = object_id
        self.size_bytes = size_bytes
        self.hard_limit_bytes = hard_limit_bytes
