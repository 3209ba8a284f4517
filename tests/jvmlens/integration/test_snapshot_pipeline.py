from __future__ import annotations

from pathlib import Path
from time import perf_counter

from jvmlens.datasource.file_source import FileSnapshotSource
from jvmlens.export import export_json_report
from jvmlens.json_codec import dumps_bytes, loads
from jvmlens.payloads import profile_payload, thread_dump_payload
from jvmlens.service import JvmDiagnosticsService, is_sentinel


def _wide_profile(leaves: int) -> dict[str, object]:
    children = [
        {
            "stackTraceElement": f"com.acme.Handler.h{idx}(Handler.java:{idx})",
            "sampleCount": 1 + idx % 7,
            "leafThreadState": "RUNNABLE",
            "metricNames": ["http request", f"step {idx % 5}"],
        }
        for idx in range(leaves)
    ]
    total = sum(int(child["sampleCount"]) for child in children)
    return {
        "stackTraceElement": "java.lang.Thread.run(Thread.java:750)",
        "sampleCount": total,
        "childNodes": [
            {"stackTraceElement": "com.acme.Server.dispatch(Server.java:1)", "sampleCount": total, "childNodes": children}
        ],
    }


def test_snapshot_to_report_round_trip(snapshot_root: Path, tmp_path: Path) -> None:
    service = JvmDiagnosticsService(FileSnapshotSource(snapshot_root))

    dump = service.thread_dump("checkout-svc")
    render = service.profile("checkout-svc", "trace-1")
    assert not is_sentinel(dump)
    assert not is_sentinel(render)

    report_path = export_json_report(
        {"threads": thread_dump_payload(dump), "profile": profile_payload(render)},
        tmp_path / "report.json",
    )
    report = loads(report_path.read_bytes())

    assert report["threads"]["transactions"][0]["trace_id"] == "trace-1"
    assert len(report["threads"]["deadlocked_cycles"]) == 1
    assert report["profile"]["reference_total"] == 4
    assert [node["percentage"] for node in report["profile"]["interesting"]] == [100.0, 75.0, 25.0]


def test_wide_profile_batches_cover_every_node_within_budget(tmp_path: Path) -> None:
    agent_dir = tmp_path / "wide-agent" / "profiles"
    agent_dir.mkdir(parents=True)
    (agent_dir / "big.json").write_bytes(dumps_bytes(_wide_profile(20_000)))
    service = JvmDiagnosticsService(FileSnapshotSource(tmp_path))

    start = perf_counter()
    batches = service.profile_batches("wide-agent", "big")
    assert not is_sentinel(batches)
    sizes = [len(batch) for batch in batches]
    catalog = service.metric_catalog("wide-agent", "big")
    elapsed = perf_counter() - start

    assert sum(sizes) == 20_001
    assert max(sizes) == 100
    assert not is_sentinel(catalog)
    assert catalog[0].metric_path == "http request"
    assert len(catalog) == 6
    assert elapsed < 3.0
