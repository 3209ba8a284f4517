"""Deadlock detection over the wait-for graph of a thread dump."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from jvmlens.threads.contracts import DeadlockCycle, ThreadSnapshot

_LOG = logging.getLogger("jvmlens.deadlock")


def blocked_threads_by_id(threads: Iterable[ThreadSnapshot]) -> dict[int, ThreadSnapshot]:
    return {thread.id: thread for thread in threads if thread.lock_owner_id is not None}


def find_cycle_roots(blocked: dict[int, ThreadSnapshot]) -> list[ThreadSnapshot]:
    """Chase lock owners from every blocked thread, each thread at most once.

    A chase ends when the owner is not blocked (no cycle through this chain) or
    when it revisits a thread from the same chase; the thread that closed the
    loop is recorded as the cycle root.
    """
    remaining = dict(blocked)
    roots: list[ThreadSnapshot] = []
    while remaining:
        current_id, current = remaining.popitem()
        seen: set[int] = set()
        while current is not None:
            seen.add(current_id)
            owner_id = current.lock_owner_id
            if owner_id is None:
                break
            if owner_id in seen:
                roots.append(current)
                break
            current_id = owner_id
            current = remaining.pop(owner_id, None)
    return roots


def _cycle_from_root(root: ThreadSnapshot, blocked: dict[int, ThreadSnapshot]) -> list[ThreadSnapshot]:
    members = [root]
    owner_id = root.lock_owner_id
    while owner_id is not None and owner_id != root.id:
        member = blocked[owner_id]
        members.append(member)
        owner_id = member.lock_owner_id
    return members


def find_deadlocked_cycles(threads: Iterable[ThreadSnapshot]) -> list[DeadlockCycle]:
    blocked = blocked_threads_by_id(threads)
    if not blocked:
        return []
    roots = find_cycle_roots(blocked)
    if not roots:
        return []
    cycles: list[DeadlockCycle] = []
    for root in roots:
        members = _cycle_from_root(root, blocked)
        if len(members) < 2:
            # A thread cannot block on a monitor it owns; treat as inconsistent data.
            _LOG.debug("deadlock_self_owner_ignored thread_id=%d", root.id)
            continue
        members.sort(key=lambda thread: thread.id, reverse=True)
        cycles.append(DeadlockCycle(threads=tuple(members)))
    cycles.sort(key=lambda cycle: cycle.threads[0].id, reverse=True)
    if cycles:
        _LOG.info("deadlock_cycles_found count=%d", len(cycles))
    return cycles
