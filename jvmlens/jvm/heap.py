from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ClassHistogramEntry:
    class_name: str
    bytes: int
    count: int


@dataclass(frozen=True, slots=True)
class HeapHistogram:
    entries: tuple[ClassHistogramEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class HeapHistogramView:
    items: tuple[ClassHistogramEntry, ...]
    total_bytes: int
    total_count: int


def build_heap_histogram_view(histogram: HeapHistogram) -> HeapHistogramView:
    """Carry entries through in agent order and total their bytes and instance counts."""
    total_bytes = 0
    total_count = 0
    for entry in histogram.entries:
        total_bytes += entry.bytes
        total_count += entry.count
    return HeapHistogramView(
        items=histogram.entries,
        total_bytes=total_bytes,
        total_count=total_count,
    )
