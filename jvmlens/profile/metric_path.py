"""Metric path construction and parsing.

A metric path joins the metric names that were active when a leaf was sampled,
outermost first, with ``" / "``. The full path of a leaf is additionally
recorded with an ``" / other"`` suffix, meaning "time spent in this path that no
nested metric claimed".
"""

from __future__ import annotations

from collections.abc import Sequence

SEPARATOR = " / "
OTHER_SUFFIX = SEPARATOR + "other"


def join_metric_path(names: Sequence[str]) -> str:
    return SEPARATOR.join(names)


def metric_path_prefixes(names: Sequence[str]) -> list[str]:
    """Return every non-empty ancestor path, shortest first."""
    out: list[str] = []
    partial = ""
    for index, name in enumerate(names):
        if index > 0:
            partial += SEPARATOR
        partial += name
        out.append(partial)
    return out


def other_path(path: str) -> str:
    return path + OTHER_SUFFIX


def is_other_path(path: str) -> bool:
    return path.endswith(OTHER_SUFFIX)


def strip_other(path: str) -> str:
    if is_other_path(path):
        return path[: -len(OTHER_SUFFIX)]
    return path


def split_metric_path(path: str) -> list[str]:
    if not path:
        return []
    return path.split(SEPARATOR)


__all__ = [
    "OTHER_SUFFIX",
    "SEPARATOR",
    "is_other_path",
    "join_metric_path",
    "metric_path_prefixes",
    "other_path",
    "split_metric_path",
    "strip_other",
]
