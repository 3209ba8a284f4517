from __future__ import annotations

from jvmlens.profile.aggregation import aggregate_stack_tree
from jvmlens.profile.catalog import build_metric_catalog
from jvmlens.profile.contracts import AggregatedNode, SampledNode


def _root_with_counts(counts: dict[str, int]) -> AggregatedNode:
    return AggregatedNode(
        stack_frame_label="root",
        sample_count=sum(counts.values()),
        leaf_thread_state=None,
        metric_path_counts=counts,
    )


def test_single_other_child_collapses_into_parent() -> None:
    root = aggregate_stack_tree(
        SampledNode("run", 1, leaf_thread_state="RUNNABLE", metric_names_at_leaf=("x",))
    )
    entries = build_metric_catalog(root)
    assert [(entry.metric_path, entry.count) for entry in entries] == [("x", 1)]


def test_catalog_is_depth_first_busiest_first() -> None:
    root = _root_with_counts(
        {
            "http": 6,
            "http / jdbc": 4,
            "http / jdbc / other": 4,
            "http / other": 2,
            "batch": 9,
            "batch / other": 9,
        }
    )
    entries = build_metric_catalog(root)
    assert [(entry.metric_path, entry.count) for entry in entries] == [
        ("batch", 9),
        ("http", 6),
        ("http / jdbc", 4),
        ("http / other", 2),
    ]


def test_catalog_never_lists_empty_root() -> None:
    assert build_metric_catalog(_root_with_counts({})) == []
    entries = build_metric_catalog(_root_with_counts({"a": 1, "a / other": 1}))
    assert all(entry.metric_path for entry in entries)


def test_paths_without_other_descendant_are_ignored() -> None:
    entries = build_metric_catalog(_root_with_counts({"orphan": 3, "a": 1, "a / other": 1}))
    assert [entry.metric_path for entry in entries] == ["a"]
