"""MBean tree view built from a materialized MBean dump."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from jvmlens.errors import MBeanNotFoundError, SnapshotFormatError

_LOG = logging.getLogger("jvmlens.mbeans")


@dataclass(frozen=True, slots=True)
class MBeanInfo:
    object_name: str
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class MBeanDump:
    mbeans: tuple[MBeanInfo, ...] = ()


@dataclass(frozen=True, slots=True)
class MBeanTreeLeafNode:
    node_name: str
    object_name: str
    expanded: bool
    attribute_map: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class MBeanTreeInnerNode:
    node_name: str
    children: tuple[MBeanTreeInnerNode | MBeanTreeLeafNode, ...] = ()


def parse_object_name(object_name: str) -> tuple[str, list[str]]:
    """Split ``domain:k1=v1,k2=v2`` into the domain and its property values in order.

    Quoted values may contain ``,`` ``=`` and ``:``; backslash escapes inside quotes
    are kept verbatim.
    """
    domain, sep, properties = object_name.partition(":")
    if not sep or not properties:
        raise SnapshotFormatError(f"Invalid MBean object name: {object_name!r}")
    values: list[str] = []
    for chunk in _split_properties(properties):
        key, eq, value = chunk.partition("=")
        if not eq or not key:
            raise SnapshotFormatError(f"Invalid MBean key property {chunk!r} in {object_name!r}")
        values.append(value)
    return domain, values


def _split_properties(properties: str) -> list[str]:
    chunks: list[str] = []
    current: list[str] = []
    in_quotes = False
    escaped = False
    for char in properties:
        if escaped:
            current.append(char)
            escaped = False
            continue
        if in_quotes and char == "\\":
            current.append(char)
            escaped = True
            continue
        if char == '"':
            in_quotes = not in_quotes
        if char == "," and not in_quotes:
            chunks.append("".join(current))
            current = []
            continue
        current.append(char)
    chunks.append("".join(current))
    return chunks


def sorted_attribute_map(attributes: Mapping[str, Any]) -> dict[str, Any]:
    return {key: attributes[key] for key in sorted(attributes, key=str.lower)}


class _InnerBuilder:
    def __init__(self, name: str) -> None:
        self.name = name
        self.children: list[_InnerBuilder | MBeanTreeLeafNode] = []
        self._inner: dict[str, _InnerBuilder] = {}

    def get_or_create(self, name: str) -> _InnerBuilder:
        node = self._inner.get(name)
        if node is None:
            node = _InnerBuilder(name)
            self._inner[name] = node
            self.children.append(node)
        return node

    def freeze(self) -> MBeanTreeInnerNode:
        children: list[MBeanTreeInnerNode | MBeanTreeLeafNode] = []
        for child in self.children:
            if isinstance(child, _InnerBuilder):
                children.append(child.freeze())
            else:
                children.append(child)
        children.sort(key=lambda node: node.node_name.lower())
        return MBeanTreeInnerNode(node_name=self.name, children=tuple(children))


def build_mbean_tree(dump: MBeanDump, *, expanded: Iterable[str] = ()) -> list[MBeanTreeInnerNode]:
    """Group MBeans by domain, then by each key property value but the last.

    Leaves are not merged by name: two object names can map onto the same path.
    """
    expanded_names = set(expanded)
    roots: dict[str, _InnerBuilder] = {}
    for mbean in dump.mbeans:
        domain, values = parse_object_name(mbean.object_name)
        node = roots.get(domain)
        if node is None:
            node = _InnerBuilder(domain)
            roots[domain] = node
        for value in values[:-1]:
            node = node.get_or_create(value)
        if mbean.object_name in expanded_names:
            leaf = MBeanTreeLeafNode(
                node_name=values[-1],
                object_name=mbean.object_name,
                expanded=True,
                attribute_map=sorted_attribute_map(mbean.attributes),
            )
        else:
            leaf = MBeanTreeLeafNode(
                node_name=values[-1],
                object_name=mbean.object_name,
                expanded=False,
            )
        node.children.append(leaf)
    return [roots[domain].freeze() for domain in sorted(roots, key=str.lower)]


def mbean_attribute_map(dump: MBeanDump, object_name: str) -> dict[str, Any]:
    matches = [mbean for mbean in dump.mbeans if mbean.object_name == object_name]
    if not matches:
        raise MBeanNotFoundError(f"Could not find mbean with object name: {object_name}")
    if len(matches) > 1:
        _LOG.warning("mbean_lookup_ambiguous object_name=%s count=%d", object_name, len(matches))
    return sorted_attribute_map(matches[0].attributes)
