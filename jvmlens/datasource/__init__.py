"""Snapshot sources handed to the diagnostics service."""

from jvmlens.datasource.base import SnapshotSource
from jvmlens.datasource.file_source import FileSnapshotSource

__all__ = ["FileSnapshotSource", "SnapshotSource"]
