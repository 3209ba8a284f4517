"""Host, process and JVM facts captured once when an agent connects."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class HostInfo:
    host_name: str
    available_processors: int
    os_name: str
    os_version: str
    total_physical_memory_bytes: int | None = None


@dataclass(frozen=True, slots=True)
class ProcessInfo:
    start_time: int
    process_id: int | None = None


@dataclass(frozen=True, slots=True)
class JavaInfo:
    version: str
    vm: str
    args: tuple[str, ...] = ()
    agent_version: str = ""


@dataclass(frozen=True, slots=True)
class SystemInfo:
    host: HostInfo
    process: ProcessInfo
    java: JavaInfo
