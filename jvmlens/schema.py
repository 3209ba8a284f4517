"""Snapshot schema version constants."""

from __future__ import annotations

JVM_PROFILE_SCHEMA_VERSION = "jvm.profile.v1"
JVM_THREAD_DUMP_SCHEMA_VERSION = "jvm.thread_dump.v1"
JVM_HEAP_HISTOGRAM_SCHEMA_VERSION = "jvm.heap_histogram.v1"
JVM_CAPABILITIES_SCHEMA_VERSION = "jvm.capabilities.v1"
JVM_MBEAN_DUMP_SCHEMA_VERSION = "jvm.mbean_dump.v1"
JVM_SYSTEM_INFO_SCHEMA_VERSION = "jvm.system_info.v1"
JVMLENS_REPORT_SCHEMA_VERSION = "jvmlens.report.v1"
