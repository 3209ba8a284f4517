"""Bottom-up metric path aggregation over a sampled stack tree."""

from __future__ import annotations

import logging
from types import MappingProxyType

from jvmlens.profile.contracts import AggregatedNode, SampledNode
from jvmlens.profile.metric_path import metric_path_prefixes, other_path

_LOG = logging.getLogger("jvmlens.profile")


def leaf_metric_path_counts(node: SampledNode) -> dict[str, int]:
    """Counts contributed by the node itself, ignoring its children."""
    if not node.is_leaf_sample or not node.metric_names_at_leaf:
        return {}
    counts: dict[str, int] = {}
    prefixes = metric_path_prefixes(node.metric_names_at_leaf)
    for path in prefixes:
        counts[path] = counts.get(path, 0) + node.sample_count
    full = other_path(prefixes[-1])
    counts[full] = counts.get(full, 0) + node.sample_count
    return counts


def aggregate_stack_tree(root: SampledNode) -> AggregatedNode:
    """Annotate every node with the metric path counts of its whole subtree.

    Nodes are visited in reverse pre-order from an explicit stack, which places
    every child before its parent without using native recursion.
    """
    preorder: list[SampledNode] = []
    pending = [root]
    while pending:
        node = pending.pop()
        preorder.append(node)
        pending.extend(node.children)

    built: dict[int, AggregatedNode] = {}
    for node in reversed(preorder):
        counts = leaf_metric_path_counts(node)
        children: list[AggregatedNode] = []
        for child in node.children:
            aggregated_child = built[id(child)]
            children.append(aggregated_child)
            for path, count in aggregated_child.metric_path_counts.items():
                counts[path] = counts.get(path, 0) + count
        built[id(node)] = AggregatedNode(
            stack_frame_label=node.stack_frame_label,
            sample_count=node.sample_count,
            leaf_thread_state=node.leaf_thread_state,
            metric_path_counts=MappingProxyType(counts),
            children=tuple(children),
        )

    aggregated = built[id(root)]
    _LOG.debug(
        "stack_tree_aggregated nodes=%d metric_paths=%d",
        len(preorder),
        len(aggregated.metric_path_counts),
    )
    return aggregated
