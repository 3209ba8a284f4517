from __future__ import annotations

import logging

import pytest

from jvmlens.errors import MBeanNotFoundError, SnapshotFormatError
from jvmlens.jvm.mbeans import (
    MBeanDump,
    MBeanInfo,
    MBeanTreeInnerNode,
    MBeanTreeLeafNode,
    build_mbean_tree,
    mbean_attribute_map,
    parse_object_name,
)


def _dump() -> MBeanDump:
    return MBeanDump(
        mbeans=(
            MBeanInfo("java.lang:type=Memory", {"Verbose": False, "HeapMemoryUsage": {"used": 10}}),
            MBeanInfo("java.lang:type=GarbageCollector,name=G1 Young Generation", {"CollectionCount": 4}),
            MBeanInfo("java.lang:type=GarbageCollector,name=G1 Old Generation", {"CollectionCount": 0}),
            MBeanInfo("JMImplementation:type=MBeanServerDelegate", {}),
            MBeanInfo('com.acme:type=cache,name="orders,v2"', {"size": 3, "Hits": 7}),
        )
    )


def test_parse_object_name_keeps_property_order() -> None:
    assert parse_object_name("java.lang:type=GarbageCollector,name=G1") == (
        "java.lang",
        ["GarbageCollector", "G1"],
    )


def test_parse_object_name_respects_quoted_values() -> None:
    domain, values = parse_object_name('com.acme:type=cache,name="a,b=c:d"')
    assert domain == "com.acme"
    assert values == ["cache", '"a,b=c:d"']


@pytest.mark.parametrize("name", ["no-domain-separator", "java.lang:", "java.lang:type"])
def test_parse_object_name_rejects_invalid(name: str) -> None:
    with pytest.raises(SnapshotFormatError):
        parse_object_name(name)


def test_tree_groups_by_domain_then_properties() -> None:
    roots = build_mbean_tree(_dump())

    assert [root.node_name for root in roots] == ["com.acme", "java.lang", "JMImplementation"]
    java_lang = roots[1]
    assert [child.node_name for child in java_lang.children] == ["GarbageCollector", "Memory"]
    collectors = java_lang.children[0]
    assert isinstance(collectors, MBeanTreeInnerNode)
    assert [child.node_name for child in collectors.children] == [
        "G1 Old Generation",
        "G1 Young Generation",
    ]
    memory = java_lang.children[1]
    assert isinstance(memory, MBeanTreeLeafNode)
    assert memory.object_name == "java.lang:type=Memory"
    assert memory.expanded is False
    assert memory.attribute_map is None


def test_expanded_leaves_carry_sorted_attributes() -> None:
    roots = build_mbean_tree(_dump(), expanded=['com.acme:type=cache,name="orders,v2"'])
    cache = roots[0].children[0]
    assert isinstance(cache, MBeanTreeInnerNode)
    leaf = cache.children[0]
    assert isinstance(leaf, MBeanTreeLeafNode)
    assert leaf.node_name == '"orders,v2"'
    assert leaf.expanded is True
    assert list(leaf.attribute_map or {}) == ["Hits", "size"]


def test_attribute_map_sorted_case_insensitively() -> None:
    attributes = mbean_attribute_map(_dump(), "java.lang:type=Memory")
    assert list(attributes) == ["HeapMemoryUsage", "Verbose"]


def test_attribute_map_unknown_name_raises() -> None:
    with pytest.raises(MBeanNotFoundError):
        mbean_attribute_map(_dump(), "java.lang:type=Missing")


def test_attribute_map_warns_on_duplicate_names(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="jvmlens.mbeans")
    dump = MBeanDump(
        mbeans=(MBeanInfo("a:type=X", {"first": 1}), MBeanInfo("a:type=X", {"second": 2}))
    )
    assert mbean_attribute_map(dump, "a:type=X") == {"first": 1}
    assert "mbean_lookup_ambiguous" in caplog.text
