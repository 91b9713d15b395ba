"""
Facade for building a package table from options alone.

Fills in what the options leave out by probing the target JVM: the runtime
version, the boot classpath of legacy runtimes and the JDK home that backs
the modular runtime image.
"""

import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from jvm_provenance.config import ProvenanceOptions
from jvm_provenance.logging_config import logger
from jvm_provenance.lsif import PackageWriter
from jvm_provenance.runtime import (
    EmptyRuntimeImage,
    JavaVersion,
    RuntimeImage,
    default_runtime_image,
    find_java_binary,
    probe_jvm_properties,
)
from .package_table import PackageTable


def configured_java_home(options: ProvenanceOptions) -> Optional[Path]:
    """JDK home from the options, then $JAVA_HOME."""
    if options.java_home is not None:
        return options.java_home
    if os.environ.get("JAVA_HOME"):
        return Path(os.environ["JAVA_HOME"])
    return None


def needs_jvm_probe(options: ProvenanceOptions) -> bool:
    """
    True when the options alone cannot classify the runtime, find a legacy
    boot classpath, or locate the JDK home behind a modular runtime image.
    """
    if not options.java_version:
        return True
    if not options.index_jdk:
        return False
    if JavaVersion(options.java_version).is_legacy:
        return True
    return configured_java_home(options) is None


def resolve_java_home(options: ProvenanceOptions, jvm_properties: Mapping[str, str]) -> Optional[Path]:
    """JDK home from the options, then $JAVA_HOME, then the probed ``java.home``."""
    java_home = configured_java_home(options)
    if java_home is None and jvm_properties.get("java.home"):
        java_home = Path(jvm_properties["java.home"])
    return java_home


def build_package_table(
    options: ProvenanceOptions,
    writer: PackageWriter,
    runtime_image: Optional[RuntimeImage] = None,
    jvm_properties: Optional[Dict[str, str]] = None,
) -> PackageTable:
    """
    Construct a PackageTable, probing the JVM only if required.

    Raises:
        JvmProbeError: If a probe is required and the JVM cannot be run.
        ArchiveScanError: If a declared jar cannot be read.
    """
    if jvm_properties is None:
        jvm_properties = {}
        if needs_jvm_probe(options):
            jvm_properties = probe_jvm_properties(find_java_binary(options.java_home))

    if options.java_version:
        java_version = JavaVersion(options.java_version)
    else:
        java_version = JavaVersion.from_properties(jvm_properties)
    logger.info(f"Target runtime: {java_version!r}")

    if runtime_image is None:
        java_home = None
        if options.index_jdk and not java_version.is_legacy:
            java_home = resolve_java_home(options, jvm_properties)
        runtime_image = default_runtime_image(java_version.is_legacy, java_home)

    if options.index_jdk and not java_version.is_legacy and isinstance(runtime_image, EmptyRuntimeImage):
        logger.warning(
            f"JDK indexing is enabled but no runtime image was found for Java {java_version.major}; "
            "JDK classes will not be attributed"
        )

    return PackageTable(
        options,
        writer,
        runtime_image=runtime_image,
        jvm_properties=jvm_properties,
        java_version=java_version,
    )
