"""Thread dump views and deadlock detection."""

from jvmlens.threads.contracts import (
    DeadlockCycle,
    LockInfo,
    StackFrame,
    ThreadDump,
    ThreadSnapshot,
    ThreadState,
    TransactionThreads,
)
from jvmlens.threads.deadlock import find_deadlocked_cycles
from jvmlens.threads.view import (
    AnnotatedThread,
    DeadlockCycleEntry,
    ThreadDumpView,
    ThreadListView,
    TransactionView,
    build_thread_dump_view,
    render_threads,
)

__all__ = [
    "AnnotatedThread",
    "DeadlockCycle",
    "DeadlockCycleEntry",
    "LockInfo",
    "StackFrame",
    "ThreadDump",
    "ThreadDumpView",
    "ThreadListView",
    "ThreadSnapshot",
    "ThreadState",
    "TransactionThreads",
    "TransactionView",
    "build_thread_dump_view",
    "find_deadlocked_cycles",
    "render_threads",
]
