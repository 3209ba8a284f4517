from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from jvmlens import __version__
from jvmlens.config import load_config, resolve_export_dir, resolve_snapshot_dir
from jvmlens.datasource.file_source import FileSnapshotSource
from jvmlens.errors import MBeanNotFoundError, SnapshotFormatError
from jvmlens.export import export_json_report
from jvmlens.json_codec import dumps_text
from jvmlens.logging import configure_logging
from jvmlens.payloads import (
    capabilities_payload,
    catalog_payload,
    heap_histogram_payload,
    mbean_tree_payload,
    profile_payload,
    rendered_node_payload,
    sentinel_payload,
    system_info_payload,
    thread_dump_payload,
)
from jvmlens.schema import JVMLENS_REPORT_SCHEMA_VERSION
from jvmlens.service import (
    JvmDiagnosticsService,
    SourceUnavailable,
    UnsupportedOperation,
    is_sentinel,
)

_LOG = logging.getLogger("jvmlens.cli")

_TRACE_COMMANDS = {"profile", "profile-batches", "catalog"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jvmlens", description="Analyze captured JVM snapshots.")
    parser.add_argument("--version", action="version", version=f"jvmlens {__version__}")
    parser.add_argument(
        "--snapshots-root",
        type=Path,
        default=None,
        help="Directory holding one snapshot folder per agent (default: JVMLENS_SNAPSHOT_DIR).",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("system-info", "Host, process and JVM facts of the agent."),
        ("thread-dump", "Annotated threads and deadlock cycles."),
        ("jstack", "Raw jstack text."),
        ("heap-histogram", "Heap histogram with totals."),
        ("capabilities", "Thread metric capabilities of the agent."),
        ("mbean-tree", "MBeans grouped by domain and key properties."),
        ("mbean-attributes", "Sorted attributes of one MBean."),
        ("profile", "Rendered merged stack tree with metric catalog."),
        ("profile-batches", "Rendered merged stack tree streamed as JSON lines."),
        ("catalog", "Selectable metric paths of a profile."),
    ):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("--agent", required=True, help="Agent id (snapshot folder name).")
        sub.add_argument(
            "--out",
            type=Path,
            default=None,
            help="Write a JSON report here (relative to JVMLENS_EXPORT_DIR).",
        )
        if name in _TRACE_COMMANDS:
            sub.add_argument("--trace", required=True, help="Trace id of the profile.")
        if name in {"profile", "profile-batches"}:
            sub.add_argument("--metric", default=None, help="Only count samples under this metric path.")
        if name == "profile-batches":
            sub.add_argument("--batch-size", type=int, default=None, help="Rendered nodes per batch.")
        if name == "mbean-tree":
            sub.add_argument(
                "--expand",
                action="append",
                default=[],
                help="Object name whose attributes are included (repeatable).",
            )
        if name == "mbean-attributes":
            sub.add_argument("--object-name", required=True)
    return parser


def _run(service: JvmDiagnosticsService, args: argparse.Namespace) -> Any:
    command = args.command
    agent = args.agent
    if command == "system-info":
        result = service.system_info(agent)
        return result if is_sentinel(result) else system_info_payload(result)
    if command == "thread-dump":
        result = service.thread_dump(agent)
        return result if is_sentinel(result) else thread_dump_payload(result)
    if command == "jstack":
        result = service.jstack(agent)
        return result if is_sentinel(result) else {"jstack": result}
    if command == "heap-histogram":
        result = service.heap_histogram(agent)
        return result if is_sentinel(result) else heap_histogram_payload(result)
    if command == "capabilities":
        result = service.capabilities(agent)
        return result if is_sentinel(result) else capabilities_payload(result)
    if command == "mbean-tree":
        result = service.mbean_tree(agent, expanded=args.expand)
        return result if is_sentinel(result) else mbean_tree_payload(result)
    if command == "mbean-attributes":
        return service.mbean_attributes(agent, args.object_name)
    if command == "profile":
        result = service.profile(agent, args.trace, metric_path=args.metric)
        return result if is_sentinel(result) else profile_payload(result)
    if command == "catalog":
        result = service.metric_catalog(agent, args.trace)
        return result if is_sentinel(result) else catalog_payload(result)
    raise ValueError(f"unknown command {command!r}")


def _emit(payload: Any, args: argparse.Namespace) -> None:
    if isinstance(payload, (SourceUnavailable, UnsupportedOperation)):
        payload = sentinel_payload(payload)
    if args.out is not None:
        report = {
            "schema_version": JVMLENS_REPORT_SCHEMA_VERSION,
            "command": args.command,
            "agent": args.agent,
            "result": payload,
        }
        path = export_json_report(report, args.out)
        _LOG.info("report_exported path=%s", path)
        return
    print(dumps_text(payload, pretty=True))


def _stream_batches(service: JvmDiagnosticsService, args: argparse.Namespace) -> None:
    result = service.profile_batches(
        args.agent, args.trace, metric_path=args.metric, batch_size=args.batch_size
    )
    if isinstance(result, (SourceUnavailable, UnsupportedOperation)):
        _emit(result, args)
        return
    if args.out is not None:
        nodes = [rendered_node_payload(node) for batch in result for node in batch]
        _emit({"nodes": nodes}, args)
        return
    for batch in result:
        print(dumps_text([rendered_node_payload(node) for node in batch]), flush=True)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if getattr(args, "batch_size", None) is not None and args.batch_size < 1:
        parser.error("--batch-size must be at least 1")
    config = load_config()
    configure_logging(config)
    root = args.snapshots_root if args.snapshots_root is not None else resolve_snapshot_dir(config)
    if args.out is not None and not args.out.is_absolute():
        args.out = resolve_export_dir(config) / args.out
    service = JvmDiagnosticsService(
        FileSnapshotSource(root),
        batch_size=config.render_batch_size,
    )
    try:
        if args.command == "profile-batches":
            _stream_batches(service, args)
        else:
            _emit(_run(service, args), args)
    except SnapshotFormatError as exc:
        _LOG.error("snapshot_malformed command=%s agent=%s error=%s", args.command, args.agent, exc)
        return 2
    except MBeanNotFoundError as exc:
        _LOG.error("lookup_failed command=%s agent=%s error=%s", args.command, args.agent, exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
