"""
Runtime package: Java runtime classification, JVM property discovery,
runtime image probes and the legacy JDK indexer.
"""

from .image import (
    EmptyRuntimeImage,
    JimageRuntimeImage,
    JmodRuntimeImage,
    RuntimeImage,
    StaticRuntimeImage,
    default_runtime_image,
    parse_jimage_listing,
)
from .jdk_indexer import index_jdk
from .properties import (
    boot_classpath_entries,
    find_java_binary,
    parse_property_settings,
    probe_jvm_properties,
)
from .version import JavaVersion, parse_major_version

__all__ = [
    "EmptyRuntimeImage",
    "JmodRuntimeImage",
    "RuntimeImage",
    "JimageRuntimeImage",
    "StaticRuntimeImage",
    "default_runtime_image",
    "parse_jimage_listing",
    "index_jdk",
    "boot_classpath_entries",
    "find_java_binary",
    "parse_property_settings",
    "probe_jvm_properties",
    "JavaVersion",
    "parse_major_version",
]
