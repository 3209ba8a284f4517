"""JVM diagnostics analysis: profile stack trees, thread dumps and JVM inventory views."""

from jvmlens.profile import aggregate_stack_tree, build_metric_catalog, render_profile
from jvmlens.service import (
    JvmDiagnosticsService,
    SourceUnavailable,
    UnsupportedOperation,
    is_sentinel,
)
from jvmlens.threads import build_thread_dump_view, find_deadlocked_cycles, render_threads

__version__ = "0.1.0"

__all__ = [
    "JvmDiagnosticsService",
    "SourceUnavailable",
    "UnsupportedOperation",
    "__version__",
    "aggregate_stack_tree",
    "build_metric_catalog",
    "build_thread_dump_view",
    "find_deadlocked_cycles",
    "is_sentinel",
    "render_profile",
    "render_threads",
]
