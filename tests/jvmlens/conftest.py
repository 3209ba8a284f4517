from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from jvmlens.json_codec import dumps_bytes

AGENT_ID = "checkout-svc"
TRACE_ID = "trace-1"


def _thread(thread_id: int, name: str, owner: int | None, lock_hash: int) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": thread_id,
        "name": name,
        "state": "BLOCKED" if owner is not None else "RUNNABLE",
        "stackTraceElements": [
            {
                "className": "com.acme.Ledger",
                "methodName": "post",
                "fileName": "Ledger.java",
                "lineNumber": 88,
                "monitorInfoList": [{"className": "com.acme.Account", "identityHashCode": thread_id}],
            }
        ],
    }
    if owner is not None:
        payload["lockOwnerId"] = owner
        payload["lockInfo"] = {"className": "com.acme.Account", "identityHashCode": lock_hash}
    return payload


def _profile_snapshot() -> dict[str, Any]:
    return {
        "schema_version": "jvm.profile.v1",
        "rootNode": {
            "stackTraceElement": "java.lang.Thread.run(Thread.java:750)",
            "sampleCount": 4,
            "childNodes": [
                {
                    "stackTraceElement": "com.acme.Server.handle(Server.java:20)",
                    "sampleCount": 4,
                    "childNodes": [
                        {
                            "stackTraceElement": "com.acme.Dao.query(Dao.java:5)",
                            "sampleCount": 3,
                            "leafThreadState": "RUNNABLE",
                            "metricNames": ["http request", "jdbc query"],
                        },
                        {
                            "stackTraceElement": "com.acme.View.render(View.java:9)",
                            "sampleCount": 1,
                            "leafThreadState": "RUNNABLE",
                            "metricNames": ["http request"],
                        },
                    ],
                }
            ],
        },
    }


def write_agent_snapshots(root: Path, agent_id: str = AGENT_ID, *, version: str | None = "0.9.2") -> Path:
    agent_dir = root / agent_id
    (agent_dir / "profiles").mkdir(parents=True)
    files: dict[str, Any] = {
        "thread_dump.json": {
            "transactions": [
                {
                    "traceId": TRACE_ID,
                    "transactionType": "Web",
                    "transactionName": "/checkout",
                    "totalDurationNanos": 5_000_000,
                    "threads": [_thread(11, "http-11", 12, 12)],
                }
            ],
            "unmatchedThreads": [_thread(12, "http-12", 11, 11), _thread(1, "main", None, 0)],
            "jstackAvailable": True,
        },
        "heap_histogram.json": {
            "classInfo": [
                {"className": "byte[]", "bytes": 2048, "count": 4},
                {"className": "java.lang.String", "bytes": 480, "count": 20},
            ]
        },
        "capabilities.json": {
            "threadCpuTime": {"available": True},
            "threadContentionTime": {"available": False, "reason": "disabled"},
            "threadAllocatedBytes": {"available": True},
        },
        "mbeans.json": {
            "mbeanInfo": [
                {"objectName": "java.lang:type=Memory", "attributes": {"Verbose": False, "ObjectPendingFinalizationCount": 0}},
                {"objectName": "java.lang:type=Threading", "attributes": {"ThreadCount": 42}},
            ]
        },
        "system_info.json": {
            "hostInfo": {
                "hostName": "app-01",
                "availableProcessors": 8,
                "totalPhysicalMemoryBytes": 17_179_869_184,
                "osName": "Linux",
                "osVersion": "6.1.0",
            },
            "processInfo": {"processId": 4242, "startTime": 1_700_000_000_000},
            "javaInfo": {
                "version": "17.0.9",
                "vm": "OpenJDK 64-Bit Server VM",
                "args": ["-Xmx2g"],
                "agentVersion": "0.9.2",
            },
        },
        f"profiles/{TRACE_ID}.json": _profile_snapshot(),
    }
    for relative, payload in files.items():
        (agent_dir / relative).write_bytes(dumps_bytes(payload))
    (agent_dir / "jstack.txt").write_text('"main" #1 prio=5 RUNNABLE\n', encoding="utf-8")
    if version is not None:
        (agent_dir / "agent.json").write_bytes(dumps_bytes({"version": version}))
    return agent_dir


@pytest.fixture
def snapshot_root(tmp_path: Path) -> Path:
    root = tmp_path / "snapshots"
    write_agent_snapshots(root)
    return root


@pytest.fixture
def write_snapshots():
    return write_agent_snapshots
