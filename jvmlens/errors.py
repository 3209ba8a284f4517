"""Exception types shared by sources, codec and service."""

from __future__ import annotations


class SnapshotFormatError(ValueError):
    """Snapshot payload does not have the expected shape."""


class SourceUnavailableError(Exception):
    """Raised by a snapshot source when the monitored process cannot be reached."""


class UnsupportedOperationError(Exception):
    """Raised by a snapshot source when its agent version cannot serve the request."""


class SourceNotConfiguredError(RuntimeError):
    """A service operation was called without a snapshot source. This is a wiring bug."""


class MBeanNotFoundError(LookupError):
    """No MBean in the dump carries the requested object name."""
