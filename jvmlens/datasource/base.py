from __future__ import annotations

from typing import Protocol

from jvmlens.jvm.capabilities import Capabilities
from jvmlens.jvm.heap import HeapHistogram
from jvmlens.jvm.mbeans import MBeanDump
from jvmlens.jvm.system_info import SystemInfo
from jvmlens.profile.contracts import SampledNode
from jvmlens.threads.contracts import ThreadDump


class SnapshotSource(Protocol):
    """Hands over already-materialized snapshots for one monitored process.

    Implementations raise ``SourceUnavailableError`` when the process cannot be
    reached and ``UnsupportedOperationError`` when its agent cannot serve a request.
    """

    def get_thread_dump(self, agent_id: str) -> ThreadDump: ...

    def get_jstack(self, agent_id: str) -> str: ...

    def get_heap_histogram(self, agent_id: str) -> HeapHistogram: ...

    def get_capabilities(self, agent_id: str) -> Capabilities: ...

    def get_mbean_dump(self, agent_id: str) -> MBeanDump: ...

    def get_profile(self, agent_id: str, trace_id: str) -> SampledNode: ...

    def get_system_info(self, agent_id: str) -> SystemInfo | None:
        """Stored host/process/JVM facts, or ``None`` when none were captured."""
        ...

    def agent_version(self, agent_id: str) -> str | None: ...
