"""Sampled stack tree aggregation and profile views."""

from jvmlens.profile.aggregation import aggregate_stack_tree
from jvmlens.profile.catalog import build_metric_catalog
from jvmlens.profile.contracts import (
    AggregatedNode,
    CatalogEntry,
    ProfileRender,
    RenderedNode,
    SampledNode,
)
from jvmlens.profile.view import (
    iter_render_batches,
    iter_rendered_nodes,
    render_profile,
    split_common_base,
)

__all__ = [
    "AggregatedNode",
    "CatalogEntry",
    "ProfileRender",
    "RenderedNode",
    "SampledNode",
    "aggregate_stack_tree",
    "build_metric_catalog",
    "iter_render_batches",
    "iter_rendered_nodes",
    "render_profile",
    "split_common_base",
]
