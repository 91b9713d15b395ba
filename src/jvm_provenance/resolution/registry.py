import threading
from typing import Dict

from jvm_provenance.logging_config import logger
from jvm_provenance.lsif import PackageWriter
from jvm_provenance.schemas import Package


class PackageInformationRegistry:
    """
    Assigns each distinct package one package-information id.

    The first request for a package emits its vertex through the writer;
    every later or concurrent request for an equal package receives the
    same id without emitting again.
    """

    def __init__(self, writer: PackageWriter):
        self._writer = writer
        self._ids: Dict[Package, int] = {}
        self._lock = threading.Lock()

    def id_for(self, package: Package) -> int:
        package_id = self._ids.get(package)
        if package_id is not None:
            return package_id

        with self._lock:
            package_id = self._ids.get(package)
            if package_id is None:
                package_id = self._writer.emit_package_information_vertex(package)
                self._ids[package] = package_id
                logger.debug(f"Emitted package information {package_id} for {package.coordinates}")
            return package_id

    def emitted(self) -> Dict[Package, int]:
        with self._lock:
            return dict(self._ids)

    def __len__(self) -> int:
        return len(self._ids)
