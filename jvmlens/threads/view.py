"""Thread dump view helpers: per-thread stack annotations and deadlock summaries."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from jvmlens.threads.contracts import (
    DeadlockCycle,
    LockInfo,
    ThreadDump,
    ThreadSnapshot,
    ThreadState,
)
from jvmlens.threads.deadlock import find_deadlocked_cycles


@dataclass(frozen=True, slots=True)
class AnnotatedThread:
    id: int
    name: str
    state: str
    stack_lines: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class DeadlockCycleEntry:
    name: str
    desc1: str
    desc2: str


@dataclass(frozen=True, slots=True)
class TransactionView:
    trace_id: str
    transaction_type: str
    transaction_name: str
    total_duration_nanos: int
    threads: tuple[AnnotatedThread, ...]


@dataclass(frozen=True, slots=True)
class ThreadListView:
    threads: tuple[AnnotatedThread, ...]
    deadlocked_cycles: tuple[tuple[DeadlockCycleEntry, ...], ...]


@dataclass(frozen=True, slots=True)
class ThreadDumpView:
    transactions: tuple[TransactionView, ...]
    unmatched_threads: tuple[AnnotatedThread, ...]
    thread_dumping_thread: AnnotatedThread | None
    deadlocked_cycles: tuple[tuple[DeadlockCycleEntry, ...], ...]
    jstack_available: bool


def _wait_operation(thread: ThreadSnapshot) -> str:
    return "waiting to lock" if thread.state is ThreadState.BLOCKED else "waiting on"


def _monitor_line(operation: str, lock: LockInfo) -> str:
    return f"- {operation} {lock.display}"


def annotate_thread(thread: ThreadSnapshot) -> AnnotatedThread:
    lines: list[str] = []
    for index, frame in enumerate(thread.stack_frames):
        lines.append(f"at {frame.display}")
        if index == 0:
            if thread.lock_info is not None:
                lines.append(_monitor_line(_wait_operation(thread), thread.lock_info))
            elif thread.lock_name:
                # agents without structured lock info only report the lock's name
                lines.append(f"- {_wait_operation(thread)} {thread.lock_name}")
        for monitor in frame.locked_monitors:
            lines.append(_monitor_line("locked on", monitor))
    return AnnotatedThread(
        id=thread.id,
        name=thread.name,
        state=thread.state.value,
        stack_lines=tuple(lines),
    )


def describe_cycle(cycle: DeadlockCycle) -> tuple[DeadlockCycleEntry, ...]:
    by_id = {thread.id: thread for thread in cycle}
    entries: list[DeadlockCycleEntry] = []
    for thread in cycle:
        if thread.lock_info is not None:
            lock = thread.lock_info.display
        else:
            lock = thread.lock_name
        owner = by_id.get(thread.lock_owner_id) if thread.lock_owner_id is not None else None
        owner_name = owner.name if owner is not None else ""
        entries.append(
            DeadlockCycleEntry(
                name=thread.name,
                desc1=f"waiting to lock {lock}" if lock else "waiting to lock",
                desc2=f'which is held by "{owner_name}"',
            )
        )
    return tuple(entries)


def describe_deadlocks(threads: Iterable[ThreadSnapshot]) -> tuple[tuple[DeadlockCycleEntry, ...], ...]:
    return tuple(describe_cycle(cycle) for cycle in find_deadlocked_cycles(threads))


def render_threads(threads: Iterable[ThreadSnapshot]) -> ThreadListView:
    snapshot = list(threads)
    return ThreadListView(
        threads=tuple(annotate_thread(thread) for thread in snapshot),
        deadlocked_cycles=describe_deadlocks(snapshot),
    )


def build_thread_dump_view(dump: ThreadDump) -> ThreadDumpView:
    transactions = tuple(
        TransactionView(
            trace_id=transaction.trace_id,
            transaction_type=transaction.transaction_type,
            transaction_name=transaction.transaction_name,
            total_duration_nanos=transaction.total_duration_nanos,
            threads=tuple(annotate_thread(thread) for thread in transaction.threads),
        )
        for transaction in dump.transactions
    )
    dumping = dump.thread_dumping_thread
    return ThreadDumpView(
        transactions=transactions,
        unmatched_threads=tuple(annotate_thread(thread) for thread in dump.unmatched_threads),
        thread_dumping_thread=annotate_thread(dumping) if dumping is not None else None,
        deadlocked_cycles=describe_deadlocks(dump.all_threads()),
        jstack_available=dump.jstack_available,
    )
