from __future__ import annotations

from jvmlens.threads.contracts import (
    LockInfo,
    StackFrame,
    ThreadDump,
    ThreadSnapshot,
    ThreadState,
    TransactionThreads,
)
from jvmlens.threads.view import annotate_thread, build_thread_dump_view, render_threads

_LOCK_A = LockInfo(class_name="java.lang.Object", identity_hash_code=0x1A2B)
_LOCK_B = LockInfo(class_name="com.acme.Resource", identity_hash_code=0xFF)


def _frames() -> tuple[StackFrame, ...]:
    return (
        StackFrame("com.acme.Foo", "bar", "Foo.java", 42, locked_monitors=(_LOCK_B,)),
        StackFrame("com.acme.Foo", "run", "Foo.java", 10),
    )


def test_frame_display_variants() -> None:
    assert StackFrame("a.B", "c", "B.java", 3).display == "a.B.c(B.java:3)"
    assert StackFrame("a.B", "c", "B.java").display == "a.B.c(B.java)"
    assert StackFrame("a.B", "c").display == "a.B.c(Unknown Source)"
    assert StackFrame("a.B", "c", "B.java", -2).display == "a.B.c(Native Method)"


def test_lock_hash_renders_as_unsigned_hex() -> None:
    assert _LOCK_A.display == "java.lang.Object@1a2b"
    assert LockInfo("x.Y", -1).display == "x.Y@ffffffff"


def test_blocked_thread_annotation() -> None:
    thread = ThreadSnapshot(
        id=5,
        name="worker",
        state=ThreadState.BLOCKED,
        stack_frames=_frames(),
        lock_owner_id=6,
        lock_info=_LOCK_A,
    )
    annotated = annotate_thread(thread)
    assert annotated.state == "BLOCKED"
    assert annotated.stack_lines == (
        "at com.acme.Foo.bar(Foo.java:42)",
        "- waiting to lock java.lang.Object@1a2b",
        "- locked on com.acme.Resource@ff",
        "at com.acme.Foo.run(Foo.java:10)",
    )


def test_waiting_thread_uses_waiting_on() -> None:
    thread = ThreadSnapshot(
        id=5,
        name="worker",
        state=ThreadState.TIMED_WAITING,
        stack_frames=_frames()[1:],
        lock_info=_LOCK_A,
    )
    assert annotate_thread(thread).stack_lines == (
        "at com.acme.Foo.run(Foo.java:10)",
        "- waiting on java.lang.Object@1a2b",
    )


def test_legacy_lock_name_is_used_without_lock_info() -> None:
    thread = ThreadSnapshot(
        id=5,
        name="worker",
        state=ThreadState.BLOCKED,
        stack_frames=_frames()[1:],
        lock_name="java.lang.Object@abc",
    )
    assert annotate_thread(thread).stack_lines[1] == "- waiting to lock java.lang.Object@abc"


def test_thread_without_frames_has_no_lines() -> None:
    thread = ThreadSnapshot(id=1, name="idle", state=ThreadState.WAITING, lock_info=_LOCK_A)
    assert annotate_thread(thread).stack_lines == ()


def _deadlocked_pair() -> tuple[ThreadSnapshot, ThreadSnapshot]:
    first = ThreadSnapshot(
        id=1,
        name="worker-1",
        state=ThreadState.BLOCKED,
        stack_frames=_frames(),
        lock_owner_id=2,
        lock_info=_LOCK_A,
    )
    second = ThreadSnapshot(
        id=2,
        name="worker-2",
        state=ThreadState.BLOCKED,
        stack_frames=_frames(),
        lock_owner_id=1,
        lock_info=_LOCK_B,
    )
    return first, second


def test_render_threads_describes_deadlock_cycle() -> None:
    first, second = _deadlocked_pair()
    view = render_threads([first, second, ThreadSnapshot(id=3, name="main", state=ThreadState.RUNNABLE)])

    assert [thread.name for thread in view.threads] == ["worker-1", "worker-2", "main"]
    assert len(view.deadlocked_cycles) == 1
    cycle = view.deadlocked_cycles[0]
    assert [entry.name for entry in cycle] == ["worker-2", "worker-1"]
    assert cycle[0].desc1 == "waiting to lock com.acme.Resource@ff"
    assert cycle[0].desc2 == 'which is held by "worker-1"'
    assert cycle[1].desc1 == "waiting to lock java.lang.Object@1a2b"
    assert cycle[1].desc2 == 'which is held by "worker-2"'


def test_thread_dump_view_detects_deadlock_across_groups() -> None:
    first, second = _deadlocked_pair()
    dump = ThreadDump(
        transactions=(
            TransactionThreads(
                trace_id="t-1",
                transaction_type="Web",
                transaction_name="/checkout",
                total_duration_nanos=1_500_000,
                threads=(first,),
            ),
        ),
        unmatched_threads=(second,),
        thread_dumping_thread=ThreadSnapshot(id=99, name="dumper", state=ThreadState.RUNNABLE),
        jstack_available=True,
    )
    view = build_thread_dump_view(dump)

    assert view.transactions[0].transaction_name == "/checkout"
    assert [thread.name for thread in view.transactions[0].threads] == ["worker-1"]
    assert [thread.name for thread in view.unmatched_threads] == ["worker-2"]
    assert view.thread_dumping_thread is not None
    assert view.thread_dumping_thread.name == "dumper"
    assert view.jstack_available is True
    assert [[entry.name for entry in cycle] for cycle in view.deadlocked_cycles] == [
        ["worker-2", "worker-1"]
    ]


def test_empty_dump_view() -> None:
    view = build_thread_dump_view(ThreadDump())
    assert view.transactions == ()
    assert view.unmatched_threads == ()
    assert view.thread_dumping_thread is None
    assert view.deadlocked_cycles == ()


def test_deadlock_entry_without_lock_has_no_trailing_space() -> None:
    first = ThreadSnapshot(id=1, name="a", state=ThreadState.BLOCKED, lock_owner_id=2)
    second = ThreadSnapshot(id=2, name="b", state=ThreadState.BLOCKED, lock_owner_id=1)
    cycle = render_threads([first, second]).deadlocked_cycles[0]
    assert [entry.desc1 for entry in cycle] == ["waiting to lock", "waiting to lock"]
