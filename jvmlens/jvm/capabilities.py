from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Availability:
    available: bool
    reason: str = ""


@dataclass(frozen=True, slots=True)
class Capabilities:
    thread_cpu_time: Availability
    thread_contention_time: Availability
    thread_allocated_bytes: Availability

    def as_rows(self) -> list[tuple[str, bool, str]]:
        return [
            ("thread_cpu_time", self.thread_cpu_time.available, self.thread_cpu_time.reason),
            (
                "thread_contention_time",
                self.thread_contention_time.available,
                self.thread_contention_time.reason,
            ),
            (
                "thread_allocated_bytes",
                self.thread_allocated_bytes.available,
                self.thread_allocated_bytes.reason,
            ),
        ]
