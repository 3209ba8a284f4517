"""Selectable metric path catalog for filtering a profile view."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from jvmlens.profile.contracts import AggregatedNode, CatalogEntry
from jvmlens.profile.metric_path import SEPARATOR, is_other_path, split_metric_path


@dataclass(slots=True)
class _TrieNode:
    path: str
    children: dict[str, _TrieNode] = field(default_factory=dict)


def _build_trie(counts: Mapping[str, int]) -> _TrieNode:
    # Every metric path is an ancestor of at least one " / other" path.
    root = _TrieNode(path="")
    for metric_path in counts:
        if not is_other_path(metric_path):
            continue
        node = root
        partial = ""
        for index, part in enumerate(split_metric_path(metric_path)):
            if index > 0:
                partial += SEPARATOR
            partial += part
            child = node.children.get(part)
            if child is None:
                child = _TrieNode(path=partial)
                node.children[part] = child
            node = child
    return root


def build_metric_catalog(root: AggregatedNode) -> list[CatalogEntry]:
    """List metric paths depth first, busiest first at every level.

    A path whose only child is its own ``" / other"`` entry stands for that entry,
    so the child is left out.
    """
    counts = root.metric_path_counts
    trie = _build_trie(counts)
    ordered: list[_TrieNode] = []
    pending = [trie]
    while pending:
        node = pending.pop()
        ordered.append(node)
        children = sorted(
            node.children.values(),
            key=lambda child: counts.get(child.path, 0),
            reverse=True,
        )
        if len(children) == 1 and is_other_path(children[0].path):
            continue
        pending.extend(reversed(children))
    return [
        CatalogEntry(metric_path=node.path, count=counts.get(node.path, 0))
        for node in ordered[1:]
    ]
