from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class SampledNode:
    stack_frame_label: str
    sample_count: int
    leaf_thread_state: str | None = None
    metric_names_at_leaf: tuple[str, ...] = ()
    children: tuple[SampledNode, ...] = ()

    @property
    def is_leaf_sample(self) -> bool:
        return bool(self.leaf_thread_state)


@dataclass(frozen=True, slots=True)
class AggregatedNode:
    stack_frame_label: str
    sample_count: int
    leaf_thread_state: str | None
    metric_path_counts: Mapping[str, int] = field(default_factory=dict)
    children: tuple[AggregatedNode, ...] = ()

    @property
    def is_leaf_sample(self) -> bool:
        return bool(self.leaf_thread_state)

    def count_for(self, metric_path: str | None) -> int:
        """Sample count under ``metric_path``, or the node's own count when unfiltered."""
        if metric_path is None:
            return self.sample_count
        return self.metric_path_counts.get(metric_path, 0)


@dataclass(frozen=True, slots=True)
class RenderedNode:
    label: str
    percentage: float
    indent_level: int
    leaf_thread_state: str | None = None

    @property
    def percentage_text(self) -> str:
        return f"{self.percentage:.1f}"


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    metric_path: str
    count: int


@dataclass(frozen=True, slots=True)
class ProfileRender:
    selected_metric_path: str | None
    reference_total: int
    common_base: tuple[RenderedNode, ...]
    interesting: tuple[RenderedNode, ...]
    catalog: tuple[CatalogEntry, ...]
