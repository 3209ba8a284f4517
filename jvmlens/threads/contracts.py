from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum


class ThreadState(str, Enum):
    RUNNABLE = "RUNNABLE"
    BLOCKED = "BLOCKED"
    WAITING = "WAITING"
    TIMED_WAITING = "TIMED_WAITING"
    NEW = "NEW"
    TERMINATED = "TERMINATED"


@dataclass(frozen=True, slots=True)
class LockInfo:
    class_name: str
    identity_hash_code: int

    @property
    def display(self) -> str:
        """``<class>@<hash>`` with the hash in unsigned 32-bit hex."""
        return f"{self.class_name}@{self.identity_hash_code & 0xFFFFFFFF:x}"


@dataclass(frozen=True, slots=True)
class StackFrame:
    class_name: str
    method_name: str
    file_name: str | None = None
    line_number: int = -1
    locked_monitors: tuple[LockInfo, ...] = ()

    @property
    def display(self) -> str:
        if self.line_number == -2:
            location = "Native Method"
        elif self.file_name is None:
            location = "Unknown Source"
        elif self.line_number >= 0:
            location = f"{self.file_name}:{self.line_number}"
        else:
            location = self.file_name
        return f"{self.class_name}.{self.method_name}({location})"


@dataclass(frozen=True, slots=True)
class ThreadSnapshot:
    id: int
    name: str
    state: ThreadState
    stack_frames: tuple[StackFrame, ...] = ()
    lock_owner_id: int | None = None
    lock_info: LockInfo | None = None
    lock_name: str = ""


@dataclass(frozen=True, slots=True)
class TransactionThreads:
    trace_id: str
    transaction_type: str
    transaction_name: str
    total_duration_nanos: int
    threads: tuple[ThreadSnapshot, ...] = ()


@dataclass(frozen=True, slots=True)
class ThreadDump:
    transactions: tuple[TransactionThreads, ...] = ()
    unmatched_threads: tuple[ThreadSnapshot, ...] = ()
    thread_dumping_thread: ThreadSnapshot | None = None
    jstack_available: bool = False

    def all_threads(self) -> list[ThreadSnapshot]:
        out: list[ThreadSnapshot] = []
        for transaction in self.transactions:
            out.extend(transaction.threads)
        out.extend(self.unmatched_threads)
        if self.thread_dumping_thread is not None:
            out.append(self.thread_dumping_thread)
        return out


@dataclass(frozen=True, slots=True)
class DeadlockCycle:
    """Threads waiting on each other, ordered by descending thread id."""

    threads: tuple[ThreadSnapshot, ...]

    def __iter__(self) -> Iterator[ThreadSnapshot]:
        return iter(self.threads)

    def __len__(self) -> int:
        return len(self.threads)

    @property
    def ids(self) -> tuple[int, ...]:
        return tuple(thread.id for thread in self.threads)
