"""JVM inventory views: heap histogram, capabilities, MBean tree and system info."""

from jvmlens.jvm.capabilities import Availability, Capabilities
from jvmlens.jvm.heap import (
    ClassHistogramEntry,
    HeapHistogram,
    HeapHistogramView,
    build_heap_histogram_view,
)
from jvmlens.jvm.mbeans import (
    MBeanDump,
    MBeanInfo,
    MBeanTreeInnerNode,
    MBeanTreeLeafNode,
    build_mbean_tree,
    mbean_attribute_map,
    parse_object_name,
)
from jvmlens.jvm.system_info import HostInfo, JavaInfo, ProcessInfo, SystemInfo

__all__ = [
    "Availability",
    "Capabilities",
    "ClassHistogramEntry",
    "HeapHistogram",
    "HeapHistogramView",
    "HostInfo",
    "JavaInfo",
    "MBeanDump",
    "MBeanInfo",
    "MBeanTreeInnerNode",
    "MBeanTreeLeafNode",
    "ProcessInfo",
    "SystemInfo",
    "build_heap_histogram_view",
    "build_mbean_tree",
    "mbean_attribute_map",
    "parse_object_name",
]
