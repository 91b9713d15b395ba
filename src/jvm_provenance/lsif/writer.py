"""
LSIF output for package provenance.

Only the two element kinds this project produces are written here: the
``packageInformation`` vertex and the ``packageInformation`` edge that links
a moniker to it. Elements are written as JSON lines.
"""

import json
import threading
from typing import Any, Dict, Protocol, TextIO

from jvm_provenance.schemas import ArtifactPackage, Package, RuntimePackage

PACKAGE_MANAGER = "jvm-dependencies"
JDK_PACKAGE_NAME = "jdk"


class PackageWriter(Protocol):
    """Persistence collaborator for package information."""

    def emit_package_information_vertex(self, package: Package) -> int:
        ...

    def emit_package_information_edge(self, moniker_id: int, package_id: int) -> None:
        ...


def package_name(package: Package) -> str:
    if isinstance(package, ArtifactPackage):
        return f"{package.group}:{package.artifact}"
    if isinstance(package, RuntimePackage):
        return JDK_PACKAGE_NAME
    raise TypeError(f"Unknown package kind: {type(package).__name__}")


class LsifPackageWriter:
    """
    Thread-safe JSON-lines writer that allocates element ids sequentially.
    """

    def __init__(self, stream: TextIO, start_id: int = 1):
        self._stream = stream
        self._next_id = start_id
        self._lock = threading.Lock()

    def _write(self, element: Dict[str, Any]) -> int:
        # Caller holds the lock so ids appear in the stream in order.
        element_id = self._next_id
        self._next_id += 1
        self._stream.write(json.dumps({"id": element_id, **element}) + "\n")
        return element_id

    def emit_package_information_vertex(self, package: Package) -> int:
        with self._lock:
            return self._write({
                "type": "vertex",
                "label": "packageInformation",
                "name": package_name(package),
                "manager": PACKAGE_MANAGER,
                "version": package.version,
            })

    def emit_package_information_edge(self, moniker_id: int, package_id: int) -> None:
        with self._lock:
            self._write({
                "type": "edge",
                "label": "packageInformation",
                "outV": moniker_id,
                "inV": package_id,
            })
