"""Diagnostics service: snapshot source in, views or sentinel results out."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any, TypeIs, TypeVar

from jvmlens.config import DEFAULT_RENDER_BATCH_SIZE
from jvmlens.datasource.base import SnapshotSource
from jvmlens.errors import (
    SourceNotConfiguredError,
    SourceUnavailableError,
    UnsupportedOperationError,
)
from jvmlens.jvm.capabilities import Capabilities
from jvmlens.jvm.heap import HeapHistogramView, build_heap_histogram_view
from jvmlens.jvm.mbeans import MBeanTreeInnerNode, build_mbean_tree, mbean_attribute_map
from jvmlens.jvm.system_info import SystemInfo
from jvmlens.profile.aggregation import aggregate_stack_tree
from jvmlens.profile.catalog import build_metric_catalog
from jvmlens.profile.contracts import AggregatedNode, CatalogEntry, ProfileRender, RenderedNode
from jvmlens.profile.view import iter_render_batches, render_profile
from jvmlens.spans import SpanPort, traced
from jvmlens.threads.view import ThreadDumpView, build_thread_dump_view

_LOG = logging.getLogger("jvmlens.service")

T = TypeVar("T")

UNKNOWN_AGENT_VERSION = "unknown"


@dataclass(frozen=True, slots=True)
class SourceUnavailable:
    """The monitored process could not be reached."""


@dataclass(frozen=True, slots=True)
class UnsupportedOperation:
    """The agent is too old for the request; carries its version for display."""

    agent_version: str


Sentinel = SourceUnavailable | UnsupportedOperation


def is_sentinel(result: object) -> TypeIs[Sentinel]:
    return isinstance(result, (SourceUnavailable, UnsupportedOperation))


class JvmDiagnosticsService:
    """Analyze snapshots from a ``SnapshotSource``.

    Unreachable processes and unsupported requests come back as ``SourceUnavailable``
    and ``UnsupportedOperation`` results. Calling any operation without a source
    raises ``SourceNotConfiguredError``.
    """

    def __init__(
        self,
        source: SnapshotSource | None,
        *,
        spans: SpanPort | None = None,
        batch_size: int = DEFAULT_RENDER_BATCH_SIZE,
    ) -> None:
        self._source = source
        self._spans = spans
        self._batch_size = max(1, int(batch_size))

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def system_info(self, agent_id: str) -> SystemInfo | None | Sentinel:
        """Captured host, process and JVM facts; ``None`` when the agent never reported them."""
        source = self._require_source()
        with traced(self._spans, "jvmlens.system_info"):
            return self._fetch(agent_id, "system_info", lambda: source.get_system_info(agent_id))

    def thread_dump(self, agent_id: str) -> ThreadDumpView | Sentinel:
        source = self._require_source()
        with traced(self._spans, "jvmlens.thread_dump"):
            dump = self._fetch(agent_id, "thread_dump", lambda: source.get_thread_dump(agent_id))
            if isinstance(dump, (SourceUnavailable, UnsupportedOperation)):
                return dump
            return build_thread_dump_view(dump)

    def jstack(self, agent_id: str) -> str | Sentinel:
        source = self._require_source()
        with traced(self._spans, "jvmlens.jstack"):
            return self._fetch(agent_id, "jstack", lambda: source.get_jstack(agent_id))

    def heap_histogram(self, agent_id: str) -> HeapHistogramView | Sentinel:
        source = self._require_source()
        with traced(self._spans, "jvmlens.heap_histogram"):
            histogram = self._fetch(
                agent_id, "heap_histogram", lambda: source.get_heap_histogram(agent_id)
            )
            if isinstance(histogram, (SourceUnavailable, UnsupportedOperation)):
                return histogram
            return build_heap_histogram_view(histogram)

    def capabilities(self, agent_id: str) -> Capabilities | Sentinel:
        source = self._require_source()
        with traced(self._spans, "jvmlens.capabilities"):
            return self._fetch(agent_id, "capabilities", lambda: source.get_capabilities(agent_id))

    def mbean_tree(
        self, agent_id: str, *, expanded: Iterable[str] = ()
    ) -> list[MBeanTreeInnerNode] | Sentinel:
        source = self._require_source()
        with traced(self._spans, "jvmlens.mbean_tree"):
            dump = self._fetch(agent_id, "mbean_tree", lambda: source.get_mbean_dump(agent_id))
            if isinstance(dump, (SourceUnavailable, UnsupportedOperation)):
                return dump
            return build_mbean_tree(dump, expanded=expanded)

    def mbean_attributes(self, agent_id: str, object_name: str) -> dict[str, Any] | Sentinel:
        source = self._require_source()
        with traced(self._spans, "jvmlens.mbean_attributes"):
            dump = self._fetch(agent_id, "mbean_attributes", lambda: source.get_mbean_dump(agent_id))
            if isinstance(dump, (SourceUnavailable, UnsupportedOperation)):
                return dump
            return mbean_attribute_map(dump, object_name)

    def profile(
        self, agent_id: str, trace_id: str, *, metric_path: str | None = None
    ) -> ProfileRender | Sentinel:
        with traced(self._spans, "jvmlens.profile"):
            aggregated = self._aggregated_profile(agent_id, trace_id)
            if isinstance(aggregated, AggregatedNode):
                return render_profile(aggregated, metric_path)
            return aggregated

    def profile_batches(
        self,
        agent_id: str,
        trace_id: str,
        *,
        metric_path: str | None = None,
        batch_size: int | None = None,
    ) -> Iterator[list[RenderedNode]] | Sentinel:
        """Aggregate now; render lazily as the caller consumes batches."""
        with traced(self._spans, "jvmlens.profile_batches"):
            aggregated = self._aggregated_profile(agent_id, trace_id)
        if not isinstance(aggregated, AggregatedNode):
            return aggregated
        size = self._batch_size if batch_size is None else batch_size
        return iter_render_batches(aggregated, metric_path, batch_size=size)

    def metric_catalog(self, agent_id: str, trace_id: str) -> list[CatalogEntry] | Sentinel:
        with traced(self._spans, "jvmlens.metric_catalog"):
            aggregated = self._aggregated_profile(agent_id, trace_id)
            if isinstance(aggregated, AggregatedNode):
                return build_metric_catalog(aggregated)
            return aggregated

    def _aggregated_profile(self, agent_id: str, trace_id: str) -> AggregatedNode | Sentinel:
        source = self._require_source()
        tree = self._fetch(agent_id, "profile", lambda: source.get_profile(agent_id, trace_id))
        if isinstance(tree, (SourceUnavailable, UnsupportedOperation)):
            return tree
        return aggregate_stack_tree(tree)

    def _require_source(self) -> SnapshotSource:
        if self._source is None:
            raise SourceNotConfiguredError("JvmDiagnosticsService requires a snapshot source")
        return self._source

    def _fetch(self, agent_id: str, operation: str, load: Callable[[], T]) -> T | Sentinel:
        try:
            return load()
        except SourceUnavailableError:
            _LOG.debug("snapshot_source_unavailable agent=%s op=%s", agent_id, operation, exc_info=True)
            return SourceUnavailable()
        except UnsupportedOperationError:
            _LOG.debug("snapshot_operation_unsupported agent=%s op=%s", agent_id, operation, exc_info=True)
            return UnsupportedOperation(agent_version=self._agent_version(agent_id))

    def _agent_version(self, agent_id: str) -> str:
        source = self._require_source()
        try:
            version = source.agent_version(agent_id)
        except SourceUnavailableError:
            return UNKNOWN_AGENT_VERSION
        return version or UNKNOWN_AGENT_VERSION
