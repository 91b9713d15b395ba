"""
Classification of the active Java runtime.

Runtimes up to Java 8 ship JDK classes as jars on the boot classpath.
Java 9 and later ship them inside a modular runtime image.
"""

import re
from typing import Mapping, Optional

from jvm_provenance.exceptions import ConfigError
from jvm_provenance.schemas import RuntimePackage

LAST_LEGACY_MAJOR = 8

# Leading "1.x" (legacy scheme) or "N" (JEP 223 scheme).
_VERSION_PATTERN = re.compile(r"^(\d+)(?:\.(\d+))?")

# Property keys consulted in order when classifying a probed JVM.
VERSION_PROPERTY_KEYS = ("java.specification.version", "java.version")


def parse_major_version(version: Optional[str]) -> int:
    """
    Extract the major version from a Java version string.

    Examples:
        "1.8.0_292" -> 8
        "11.0.2"    -> 11
        "17-ea"     -> 17
        "21+35"     -> 21
    """
    if not version or not version.strip():
        raise ConfigError("Java version string is empty")
    match = _VERSION_PATTERN.match(version.strip())
    if match is None:
        raise ConfigError(f"Unrecognized Java version string: '{version}'")
    major = int(match.group(1))
    if major == 1 and match.group(2) is not None:
        major = int(match.group(2))
    if major <= 0:
        raise ConfigError(f"Unrecognized Java version string: '{version}'")
    return major


class JavaVersion:
    """
    Legacy-vs-modular classification of a Java runtime, computed once.

    Attributes:
        version_string: The raw version string that was classified.
        major: Major version number.
        is_legacy: True for Java 8 and below.
        package: Provenance for classfiles that belong to the runtime itself.
    """

    def __init__(self, version: str):
        self.version_string = version
        self.major = parse_major_version(version)
        self.is_legacy = self.major <= LAST_LEGACY_MAJOR
        self.package = RuntimePackage(version=str(self.major))

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> "JavaVersion":
        for key in VERSION_PROPERTY_KEYS:
            value = properties.get(key)
            if value:
                return cls(value)
        raise ConfigError(f"JVM properties define none of {', '.join(VERSION_PROPERTY_KEYS)}")

    def __repr__(self) -> str:
        mode = "legacy" if self.is_legacy else "modular"
        return f"JavaVersion({self.version_string!r}, major={self.major}, {mode})"
