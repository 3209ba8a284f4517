"""Profile view helpers: percentages, nesting, common base and batched rendering."""

from __future__ import annotations

from collections.abc import Iterator
from itertools import islice

from jvmlens.config import DEFAULT_RENDER_BATCH_SIZE
from jvmlens.profile.catalog import build_metric_catalog
from jvmlens.profile.contracts import AggregatedNode, ProfileRender, RenderedNode


def reference_total(root: AggregatedNode, metric_path: str | None = None) -> int:
    return root.count_for(metric_path)


def format_percentage(count: int, total: int) -> float:
    """Percentage of ``total`` rounded to one decimal place."""
    return float(f"{(count / total) * 100.0:.1f}")


def split_common_base(
    root: AggregatedNode,
) -> tuple[tuple[AggregatedNode, ...], AggregatedNode]:
    """Split off the single-child chain every sample passes through.

    Returns the chain and the first node that branches (or whose only child is a
    sampled leaf), which becomes the root for the interesting part of the view.
    """
    common: list[AggregatedNode] = []
    node = root
    while len(node.children) == 1 and not node.children[0].is_leaf_sample:
        common.append(node)
        node = node.children[0]
    return tuple(common), node


def render_common_base(chain: tuple[AggregatedNode, ...]) -> tuple[RenderedNode, ...]:
    return tuple(
        RenderedNode(label=node.stack_frame_label, percentage=100.0, indent_level=0)
        for node in chain
    )


def iter_rendered_nodes(
    root: AggregatedNode,
    metric_path: str | None = None,
    *,
    start: AggregatedNode | None = None,
) -> Iterator[RenderedNode]:
    """Yield rendered nodes depth first, children ordered by descending count.

    ``root`` supplies the reference total; ``start`` (defaults to ``root``) is
    where the walk begins. Zero-count nodes are not shown. With a metric filter their
    subtree is skipped too; unfiltered, their children are still walked.
    """
    total = reference_total(root, metric_path)
    if total <= 0:
        return
    first = root if start is None else start
    # (node, parent count, parent indent level)
    pending: list[tuple[AggregatedNode, int, int]] = [(first, total, 0)]
    while pending:
        node, parent_count, parent_level = pending.pop()
        count = node.count_for(metric_path)
        if count == 0:
            if metric_path is not None:
                continue
            # hidden frame; its children attach to the nearest shown ancestor
            count, level = parent_count, parent_level
        else:
            level = parent_level + 1 if count < parent_count else parent_level
            yield RenderedNode(
                label=node.stack_frame_label,
                percentage=format_percentage(count, total),
                indent_level=level,
                leaf_thread_state=node.leaf_thread_state or None,
            )
        ordered = sorted(node.children, key=lambda child: child.count_for(metric_path), reverse=True)
        for child in reversed(ordered):
            pending.append((child, count, level))


def iter_render_batches(
    root: AggregatedNode,
    metric_path: str | None = None,
    *,
    batch_size: int = DEFAULT_RENDER_BATCH_SIZE,
) -> Iterator[list[RenderedNode]]:
    """Stream the interesting part of the view in lists of at most ``batch_size`` nodes."""
    if batch_size <= 0:
        raise ValueError("batch_size must be > 0")
    _, interesting_root = split_common_base(root)
    nodes = iter_rendered_nodes(root, metric_path, start=interesting_root)
    while True:
        batch = list(islice(nodes, batch_size))
        if not batch:
            return
        yield batch


def render_profile(root: AggregatedNode, metric_path: str | None = None) -> ProfileRender:
    chain, interesting_root = split_common_base(root)
    return ProfileRender(
        selected_metric_path=metric_path,
        reference_total=reference_total(root, metric_path),
        common_base=render_common_base(chain),
        interesting=tuple(iter_rendered_nodes(root, metric_path, start=interesting_root)),
        catalog=tuple(build_metric_catalog(root)),
    )
