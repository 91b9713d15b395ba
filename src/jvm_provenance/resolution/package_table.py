"""
Package resolution engine.

Maps classfiles, and the symbols declared in them, to the package they were
loaded from: a declared library artifact or the JDK.
"""

import threading
from collections import Counter
from typing import Dict, Mapping, Optional, Set

from jvm_provenance.config import ProvenanceOptions
from jvm_provenance.logging_config import logger
from jvm_provenance.lsif import PackageWriter
from jvm_provenance.runtime import EmptyRuntimeImage, JavaVersion, RuntimeImage, index_jdk
from jvm_provenance.scanner import (
    ResolutionTable,
    index_declared_artifacts,
    is_indexable_classfile,
    normalize_classfile_key,
)
from jvm_provenance.schemas import Package, PackageTableStats
from jvm_provenance.symbols import classfile_for_symbol
from jvm_provenance.tracing import trace
from .registry import PackageInformationRegistry


class PackageTable:
    """
    Classfile -> package lookup table.

    Construction scans every declared jar (and, for legacy runtimes with JDK
    indexing on, the boot classpath) before returning. After that the table
    is read-only and queries may run from many threads. The only state that
    changes afterwards is the memo of confirmed runtime-image classfiles and
    the package-information ids handed out by the registry.

    Args:
        options: Declared artifacts and JDK indexing settings.
        writer: Receives package-information vertices and edges.
        runtime_image: Membership probe for modular runtimes.
        jvm_properties: System properties of the target JVM (boot classpath).
        java_version: Runtime classification; derived from ``options`` or
            ``jvm_properties`` when omitted.
    """

    def __init__(
        self,
        options: ProvenanceOptions,
        writer: PackageWriter,
        runtime_image: Optional[RuntimeImage] = None,
        jvm_properties: Optional[Mapping[str, str]] = None,
        java_version: Optional[JavaVersion] = None,
    ):
        self.index_jdk = options.index_jdk
        self._jvm_properties = dict(jvm_properties or {})
        if java_version is None:
            if options.java_version:
                java_version = JavaVersion(options.java_version)
            else:
                java_version = JavaVersion.from_properties(self._jvm_properties)
        self.java_version = java_version

        self._runtime_image = runtime_image or EmptyRuntimeImage()
        self._by_classfile: ResolutionTable = {}
        self._jdk_classfiles: Set[str] = set()
        self._jdk_lock = threading.Lock()
        self._registry = PackageInformationRegistry(writer)
        self._writer = writer

        self._build(options)

    @trace
    def _build(self, options: ProvenanceOptions) -> None:
        artifact_count = index_declared_artifacts(options.packages, self._by_classfile)
        logger.info(
            f"Indexed {artifact_count} classfiles from {len(options.packages)} declared artifacts"
        )
        index_jdk(self.java_version, self._jvm_properties, self._by_classfile, enabled=self.index_jdk)

    def resolve_package(self, classfile: str) -> Optional[Package]:
        """
        Package that owns ``classfile``, or None when its provenance is unknown.
        """
        key = normalize_classfile_key(classfile)
        package = self._by_classfile.get(key)
        if package is not None:
            return package
        if self.index_jdk and not self.java_version.is_legacy and self._is_runtime_classfile(key):
            return self.java_version.package
        return None

    def resolve_symbol_package(self, symbol: str) -> Optional[Package]:
        classfile = classfile_for_symbol(symbol)
        if classfile is None:
            return None
        return self.resolve_package(classfile)

    def record_import_if_known(self, symbol: str, moniker_id: int) -> Optional[int]:
        """
        Link ``moniker_id`` to the package of ``symbol``.

        Symbols without known provenance (project sources, unindexed
        dependencies, locals) are ignored.

        Returns:
            The package-information id the moniker was linked to, or None.
        """
        package = self.resolve_symbol_package(symbol)
        if package is None:
            return None
        package_id = self._registry.id_for(package)
        self._writer.emit_package_information_edge(moniker_id, package_id)
        return package_id

    def _is_runtime_classfile(self, key: str) -> bool:
        # Only positive answers are memoized.
        if key in self._jdk_classfiles:
            return True
        if not is_indexable_classfile(key):
            return False
        try:
            found = bool(self._runtime_image.contains(key))
        except Exception as e:
            logger.debug(f"Runtime image probe failed for '{key}': {e}")
            return False
        if found:
            with self._jdk_lock:
                self._jdk_classfiles.add(key)
        return found

    @property
    def registry(self) -> PackageInformationRegistry:
        return self._registry

    def stats(self) -> PackageTableStats:
        per_package: Dict[str, int] = Counter(p.coordinates for p in self._by_classfile.values())
        return PackageTableStats(
            total_classfiles=len(self._by_classfile),
            packages_indexed=len(per_package),
            classfiles_per_package=dict(per_package),
            jdk_memo_size=len(self._jdk_classfiles),
            emitted_packages=len(self._registry),
            legacy_runtime=self.java_version.is_legacy,
            runtime_version=str(self.java_version.major),
        )
