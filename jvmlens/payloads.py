"""Plain-dict payloads for views and sentinel results."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from jvmlens.jvm.capabilities import Capabilities
from jvmlens.jvm.heap import HeapHistogramView
from jvmlens.jvm.mbeans import MBeanTreeInnerNode, MBeanTreeLeafNode
from jvmlens.jvm.system_info import SystemInfo
from jvmlens.profile.contracts import CatalogEntry, ProfileRender, RenderedNode
from jvmlens.service import SourceUnavailable, UnsupportedOperation
from jvmlens.threads.view import AnnotatedThread, DeadlockCycleEntry, ThreadDumpView


def sentinel_payload(result: SourceUnavailable | UnsupportedOperation) -> dict[str, Any]:
    if isinstance(result, SourceUnavailable):
        return {"source_unavailable": True}
    return {"unsupported_operation": result.agent_version}


def rendered_node_payload(node: RenderedNode) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "label": node.label,
        "percentage": node.percentage,
        "indent_level": node.indent_level,
    }
    if node.leaf_thread_state:
        payload["leaf_thread_state"] = node.leaf_thread_state
    return payload


def catalog_payload(entries: list[CatalogEntry] | tuple[CatalogEntry, ...]) -> list[dict[str, Any]]:
    return [{"metric_path": entry.metric_path, "count": entry.count} for entry in entries]


def profile_payload(render: ProfileRender) -> dict[str, Any]:
    return {
        "selected_metric_path": render.selected_metric_path,
        "reference_total": render.reference_total,
        "common_base": [rendered_node_payload(node) for node in render.common_base],
        "interesting": [rendered_node_payload(node) for node in render.interesting],
        "catalog": catalog_payload(render.catalog),
    }


def _thread_payload(thread: AnnotatedThread) -> dict[str, Any]:
    return {
        "name": thread.name,
        "id": str(thread.id),
        "state": thread.state,
        "stack_trace_elements": list(thread.stack_lines),
    }


def _cycle_payload(cycle: tuple[DeadlockCycleEntry, ...]) -> list[dict[str, str]]:
    return [asdict(entry) for entry in cycle]


def thread_dump_payload(view: ThreadDumpView) -> dict[str, Any]:
    dumping = view.thread_dumping_thread
    return {
        "transactions": [
            {
                "trace_id": transaction.trace_id,
                "transaction_type": transaction.transaction_type,
                "transaction_name": transaction.transaction_name,
                "total_duration_nanos": transaction.total_duration_nanos,
                "threads": [_thread_payload(thread) for thread in transaction.threads],
            }
            for transaction in view.transactions
        ],
        "unmatched_threads": [_thread_payload(thread) for thread in view.unmatched_threads],
        "thread_dumping_thread": _thread_payload(dumping) if dumping is not None else None,
        "deadlocked_cycles": [_cycle_payload(cycle) for cycle in view.deadlocked_cycles],
        "jstack_available": view.jstack_available,
    }


def heap_histogram_payload(view: HeapHistogramView) -> dict[str, Any]:
    return {
        "items": [
            {"class_name": item.class_name, "bytes": item.bytes, "count": item.count}
            for item in view.items
        ],
        "total_bytes": view.total_bytes,
        "total_count": view.total_count,
    }


def capabilities_payload(capabilities: Capabilities) -> dict[str, Any]:
    return {
        name: {"available": available, "reason": reason}
        for name, available, reason in capabilities.as_rows()
    }


def _mbean_node_payload(node: MBeanTreeInnerNode | MBeanTreeLeafNode) -> dict[str, Any]:
    if isinstance(node, MBeanTreeLeafNode):
        return {
            "node_name": node.node_name,
            "object_name": node.object_name,
            "expanded": node.expanded,
            "attribute_map": node.attribute_map,
        }
    return {
        "node_name": node.node_name,
        "child_nodes": [_mbean_node_payload(child) for child in node.children],
    }


def mbean_tree_payload(roots: list[MBeanTreeInnerNode]) -> list[dict[str, Any]]:
    return [_mbean_node_payload(root) for root in roots]


def system_info_payload(info: SystemInfo | None) -> dict[str, Any]:
    """Nested host/process/java sections; ``{}`` when nothing was captured."""
    if info is None:
        return {}
    host: dict[str, Any] = {
        "host_name": info.host.host_name,
        "available_processors": info.host.available_processors,
    }
    if info.host.total_physical_memory_bytes is not None:
        host["total_physical_memory_bytes"] = info.host.total_physical_memory_bytes
    host["os_name"] = info.host.os_name
    host["os_version"] = info.host.os_version
    process: dict[str, Any] = {}
    if info.process.process_id is not None:
        process["process_id"] = info.process.process_id
    process["start_time"] = info.process.start_time
    return {
        "host": host,
        "process": process,
        "java": {
            "version": info.java.version,
            "vm": info.java.vm,
            "args": list(info.java.args),
            "agent_version": info.java.agent_version,
        },
    }
