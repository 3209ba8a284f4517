"""Decode JSON-shaped snapshot payloads into typed, immutable snapshots."""

from __future__ import annotations

from typing import Any

from jvmlens.errors import SnapshotFormatError
from jvmlens.jvm.capabilities import Availability, Capabilities
from jvmlens.jvm.heap import ClassHistogramEntry, HeapHistogram
from jvmlens.jvm.mbeans import MBeanDump, MBeanInfo
from jvmlens.jvm.system_info import HostInfo, JavaInfo, ProcessInfo, SystemInfo
from jvmlens.profile.contracts import SampledNode
from jvmlens.schema import (
    JVM_CAPABILITIES_SCHEMA_VERSION,
    JVM_HEAP_HISTOGRAM_SCHEMA_VERSION,
    JVM_MBEAN_DUMP_SCHEMA_VERSION,
    JVM_PROFILE_SCHEMA_VERSION,
    JVM_SYSTEM_INFO_SCHEMA_VERSION,
    JVM_THREAD_DUMP_SCHEMA_VERSION,
)
from jvmlens.threads.contracts import (
    LockInfo,
    StackFrame,
    ThreadDump,
    ThreadSnapshot,
    ThreadState,
    TransactionThreads,
)


def _object(value: object, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise SnapshotFormatError(f"{what} must be a JSON object, got {type(value).__name__}")
    return value


def _list(value: object, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise SnapshotFormatError(f"{what} must be a JSON array, got {type(value).__name__}")
    return value


def _int(payload: dict[str, Any], key: str, default: int | None = None) -> int:
    raw = payload.get(key, default)
    if raw is None:
        raise SnapshotFormatError(f"missing required field {key!r}")
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        raise SnapshotFormatError(f"field {key!r} is not an integer: {raw!r}")
    # 64-bit ids may arrive as decimal strings
    try:
        return int(raw)
    except ValueError as exc:
        raise SnapshotFormatError(f"field {key!r} is not an integer: {raw!r}") from exc


def _optional_int(payload: dict[str, Any], key: str) -> int | None:
    if payload.get(key) is None:
        return None
    return _int(payload, key)


def check_schema_version(payload: dict[str, Any], expected: str) -> None:
    """Accept payloads without a version; reject ones stamped with another schema."""
    version = payload.get("schema_version")
    if version is not None and str(version) != expected:
        raise SnapshotFormatError(f"expected schema {expected!r}, got {version!r}")


def decode_sampled_tree(payload: object) -> SampledNode:
    """Decode ``{stackTraceElement, sampleCount, leafThreadState?, metricNames?, childNodes?}``.

    Walks the payload with an explicit stack so very deep trees decode safely.
    """
    root = _object(payload, "sampled tree")
    check_schema_version(root, JVM_PROFILE_SCHEMA_VERSION)
    if "rootNode" in root:
        root = _object(root["rootNode"], "sampled tree root")

    preorder: list[dict[str, Any]] = []
    pending = [root]
    while pending:
        item = pending.pop()
        preorder.append(item)
        for child in _list(item.get("childNodes"), "childNodes"):
            pending.append(_object(child, "sampled tree node"))

    built: dict[int, SampledNode] = {}
    for item in reversed(preorder):
        leaf_state = item.get("leafThreadState") or None
        metric_names = tuple(str(name) for name in _list(item.get("metricNames"), "metricNames"))
        built[id(item)] = SampledNode(
            stack_frame_label=str(item.get("stackTraceElement", "")),
            sample_count=max(0, _int(item, "sampleCount", 0)),
            leaf_thread_state=str(leaf_state) if leaf_state is not None else None,
            metric_names_at_leaf=metric_names if leaf_state is not None else (),
            children=tuple(built[id(child)] for child in _list(item.get("childNodes"), "childNodes")),
        )
    return built[id(root)]


def decode_lock_info(payload: object) -> LockInfo:
    item = _object(payload, "lock info")
    return LockInfo(
        class_name=str(item.get("className", "")),
        identity_hash_code=_int(item, "identityHashCode", 0),
    )


def decode_stack_frame(payload: object) -> StackFrame:
    item = _object(payload, "stack trace element")
    file_name = item.get("fileName")
    return StackFrame(
        class_name=str(item.get("className", "")),
        method_name=str(item.get("methodName", "")),
        file_name=str(file_name) if file_name else None,
        line_number=_int(item, "lineNumber", -1),
        locked_monitors=tuple(
            decode_lock_info(monitor)
            for monitor in _list(item.get("monitorInfoList"), "monitorInfoList")
        ),
    )


def decode_thread(payload: object) -> ThreadSnapshot:
    item = _object(payload, "thread")
    raw_state = str(item.get("state", "")).strip().upper()
    try:
        state = ThreadState(raw_state)
    except ValueError as exc:
        raise SnapshotFormatError(f"unknown thread state {raw_state!r}") from exc
    lock_info = item.get("lockInfo")
    return ThreadSnapshot(
        id=_int(item, "id"),
        name=str(item.get("name", "")),
        state=state,
        stack_frames=tuple(
            decode_stack_frame(frame)
            for frame in _list(item.get("stackTraceElements"), "stackTraceElements")
        ),
        lock_owner_id=_optional_int(item, "lockOwnerId"),
        lock_info=decode_lock_info(lock_info) if lock_info is not None else None,
        lock_name=str(item.get("lockName") or ""),
    )


def decode_threads(payload: object) -> list[ThreadSnapshot]:
    return [decode_thread(item) for item in _list(payload, "threads")]


def decode_thread_dump(payload: object) -> ThreadDump:
    item = _object(payload, "thread dump")
    check_schema_version(item, JVM_THREAD_DUMP_SCHEMA_VERSION)
    transactions = []
    for raw in _list(item.get("transactions"), "transactions"):
        transaction = _object(raw, "transaction")
        transactions.append(
            TransactionThreads(
                trace_id=str(transaction.get("traceId", "")),
                transaction_type=str(transaction.get("transactionType", "")),
                transaction_name=str(transaction.get("transactionName", "")),
                total_duration_nanos=_int(transaction, "totalDurationNanos", 0),
                threads=tuple(decode_threads(transaction.get("threads"))),
            )
        )
    dumping = item.get("threadDumpingThread")
    return ThreadDump(
        transactions=tuple(transactions),
        unmatched_threads=tuple(decode_threads(item.get("unmatchedThreads"))),
        thread_dumping_thread=decode_thread(dumping) if dumping is not None else None,
        jstack_available=bool(item.get("jstackAvailable", False)),
    )


def decode_heap_histogram(payload: object) -> HeapHistogram:
    item = _object(payload, "heap histogram")
    check_schema_version(item, JVM_HEAP_HISTOGRAM_SCHEMA_VERSION)
    entries = []
    for raw in _list(item.get("classInfo"), "classInfo"):
        info = _object(raw, "class info")
        entries.append(
            ClassHistogramEntry(
                class_name=str(info.get("className", "")),
                bytes=_int(info, "bytes", 0),
                count=_int(info, "count", 0),
            )
        )
    return HeapHistogram(entries=tuple(entries))


def _availability(payload: dict[str, Any], key: str) -> Availability:
    raw = payload.get(key)
    if raw is None:
        return Availability(available=False, reason="not reported")
    item = _object(raw, key)
    return Availability(
        available=bool(item.get("available", False)),
        reason=str(item.get("reason", "")),
    )


def decode_capabilities(payload: object) -> Capabilities:
    item = _object(payload, "capabilities")
    check_schema_version(item, JVM_CAPABILITIES_SCHEMA_VERSION)
    return Capabilities(
        thread_cpu_time=_availability(item, "threadCpuTime"),
        thread_contention_time=_availability(item, "threadContentionTime"),
        thread_allocated_bytes=_availability(item, "threadAllocatedBytes"),
    )


def decode_mbean_dump(payload: object) -> MBeanDump:
    item = _object(payload, "mbean dump")
    check_schema_version(item, JVM_MBEAN_DUMP_SCHEMA_VERSION)
    mbeans = []
    for raw in _list(item.get("mbeanInfo"), "mbeanInfo"):
        info = _object(raw, "mbean info")
        object_name = info.get("objectName")
        if not object_name:
            raise SnapshotFormatError("mbean info is missing 'objectName'")
        attributes = info.get("attributes") or {}
        mbeans.append(
            MBeanInfo(
                object_name=str(object_name),
                attributes=dict(_object(attributes, "mbean attributes")),
            )
        )
    return MBeanDump(mbeans=tuple(mbeans))


def decode_system_info(payload: object) -> SystemInfo:
    """Decode ``{hostInfo, processInfo, javaInfo}``; optional numbers may be absent."""
    item = _object(payload, "system info")
    check_schema_version(item, JVM_SYSTEM_INFO_SCHEMA_VERSION)
    host = _object(item.get("hostInfo") or {}, "hostInfo")
    process = _object(item.get("processInfo") or {}, "processInfo")
    java = _object(item.get("javaInfo") or {}, "javaInfo")
    return SystemInfo(
        host=HostInfo(
            host_name=str(host.get("hostName", "")),
            available_processors=_int(host, "availableProcessors", 0),
            os_name=str(host.get("osName", "")),
            os_version=str(host.get("osVersion", "")),
            total_physical_memory_bytes=_optional_int(host, "totalPhysicalMemoryBytes"),
        ),
        process=ProcessInfo(
            start_time=_int(process, "startTime", 0),
            process_id=_optional_int(process, "processId"),
        ),
        java=JavaInfo(
            version=str(java.get("version", "")),
            vm=str(java.get("vm", "")),
            args=tuple(str(arg) for arg in _list(java.get("args"), "args")),
            agent_version=str(java.get("agentVersion", "")),
        ),
    )
