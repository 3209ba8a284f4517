from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from jvmlens.codec import (
    decode_capabilities,
    decode_heap_histogram,
    decode_mbean_dump,
    decode_sampled_tree,
    decode_system_info,
    decode_thread_dump,
)
from jvmlens.datasource.base import SnapshotSource
from jvmlens.errors import SnapshotFormatError, SourceUnavailableError, UnsupportedOperationError
from jvmlens.json_codec import loads
from jvmlens.jvm.capabilities import Capabilities
from jvmlens.jvm.heap import HeapHistogram
from jvmlens.jvm.mbeans import MBeanDump
from jvmlens.jvm.system_info import SystemInfo
from jvmlens.profile.contracts import SampledNode
from jvmlens.threads.contracts import ThreadDump

_LOG = logging.getLogger("jvmlens.datasource")

T = TypeVar("T")

THREAD_DUMP_FILE = "thread_dump.json"
JSTACK_FILE = "jstack.txt"
HEAP_HISTOGRAM_FILE = "heap_histogram.json"
CAPABILITIES_FILE = "capabilities.json"
MBEANS_FILE = "mbeans.json"
AGENT_FILE = "agent.json"
SYSTEM_INFO_FILE = "system_info.json"
PROFILES_DIR = "profiles"


class FileSnapshotSource(SnapshotSource):
    """Snapshots captured to disk, one directory per agent.

    A missing agent directory reads as an unreachable process; a missing file
    inside it reads as an operation that agent's version does not support.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def list_agents(self) -> list[str]:
        if not self._root.is_dir():
            return []
        return sorted(path.name for path in self._root.iterdir() if path.is_dir())

    def get_thread_dump(self, agent_id: str) -> ThreadDump:
        return self._load_json(agent_id, THREAD_DUMP_FILE, decode_thread_dump)

    def get_jstack(self, agent_id: str) -> str:
        path = self._snapshot_path(agent_id, JSTACK_FILE)
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise SnapshotFormatError(f"{path} is not UTF-8 text: {exc}") from exc

    def get_heap_histogram(self, agent_id: str) -> HeapHistogram:
        return self._load_json(agent_id, HEAP_HISTOGRAM_FILE, decode_heap_histogram)

    def get_capabilities(self, agent_id: str) -> Capabilities:
        return self._load_json(agent_id, CAPABILITIES_FILE, decode_capabilities)

    def get_mbean_dump(self, agent_id: str) -> MBeanDump:
        return self._load_json(agent_id, MBEANS_FILE, decode_mbean_dump)

    def get_profile(self, agent_id: str, trace_id: str) -> SampledNode:
        return self._load_json(agent_id, f"{PROFILES_DIR}/{trace_id}.json", decode_sampled_tree)

    def get_system_info(self, agent_id: str) -> SystemInfo | None:
        agent_dir = self._agent_dir(agent_id)
        if agent_dir.is_dir() and not (agent_dir / SYSTEM_INFO_FILE).is_file():
            return None
        return self._load_json(agent_id, SYSTEM_INFO_FILE, decode_system_info)

    def agent_version(self, agent_id: str) -> str | None:
        path = self._agent_dir(agent_id) / AGENT_FILE
        if not path.is_file():
            return None
        try:
            payload = loads(path.read_bytes())
        except ValueError as exc:
            raise SnapshotFormatError(f"{path} is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            return None
        version = payload.get("version")
        return str(version) if version else None

    def _agent_dir(self, agent_id: str) -> Path:
        return self._root / agent_id

    def _snapshot_path(self, agent_id: str, relative: str) -> Path:
        agent_dir = self._agent_dir(agent_id)
        if not agent_dir.is_dir():
            raise SourceUnavailableError(f"No snapshots for agent {agent_id!r} under {self._root}")
        path = agent_dir / relative
        if not path.is_file():
            raise UnsupportedOperationError(f"Agent {agent_id!r} has no {relative} snapshot")
        return path

    def _load_json(self, agent_id: str, relative: str, decode: Callable[[Any], T]) -> T:
        path = self._snapshot_path(agent_id, relative)
        _LOG.debug("snapshot_load path=%s", path)
        try:
            payload = loads(path.read_bytes())
        except ValueError as exc:
            raise SnapshotFormatError(f"{path} is not valid JSON: {exc}") from exc
        return decode(payload)
