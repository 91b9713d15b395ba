"""
Pytest configuration for the jvm-provenance test suite.

Provides:
- Machine-mode logging (suppresses console output)
- Fixture jar builders
- Recording writer for package-information output
"""

import os
import threading
import zipfile
from pathlib import Path
from typing import Iterable, List, Tuple

import pytest

from jvm_provenance.logging_config import setup_logging
from jvm_provenance.schemas import DeclaredArtifact


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    os.environ.setdefault("JVM_PROVENANCE_MACHINE_MODE", "1")


@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    setup_logging(level="DEBUG", suppress_console=True)


@pytest.fixture(autouse=True)
def clear_env_overrides(monkeypatch):
    monkeypatch.delenv("JVM_PROVENANCE_INDEX_JDK", raising=False)
    monkeypatch.delenv("JVM_PROVENANCE_JAVA_VERSION", raising=False)
    monkeypatch.delenv("JVM_PROVENANCE_HUMAN_MODE", raising=False)
    monkeypatch.delenv("JAVA_HOME", raising=False)


# ============================================================================
# JAR FIXTURES
# ============================================================================

def write_jar(path: Path, entries: Iterable[str]) -> Path:
    """Write a zip archive with an empty body for every entry name."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as jar:
        for name in entries:
            jar.writestr(name, b"" if name.endswith("/") else b"\xca\xfe\xba\xbe")
    return path


@pytest.fixture
def make_jar(tmp_path):
    """
    Build a jar under tmp_path.

    Usage:
        jar = make_jar("widgets.jar", ["com/acme/Widget.class"])
    """
    def _make(name: str, entries: Iterable[str]) -> Path:
        return write_jar(tmp_path / name, entries)

    return _make


@pytest.fixture
def widgets_artifact(make_jar):
    jar = make_jar("widgets.jar", [
        "META-INF/MANIFEST.MF",
        "com/",
        "com/acme/",
        "com/acme/Widget.class",
        "com/acme/Widget$Inner.class",
        "com/acme/Gadget.class",
        "com/acme/Gadget$1.class",
    ])
    return DeclaredArtifact(group="com.acme", artifact="widgets", version="1.0", path=jar)


@pytest.fixture
def make_jmod():
    """
    Build $JAVA_HOME/jmods/<module>.jmod: the jmod magic header followed by a zip.

    Usage:
        make_jmod(java_home, "java.base", ["classes/java/lang/String.class"])
    """
    def _make(java_home: Path, module: str, entries: Iterable[str]) -> Path:
        path = java_home / "jmods" / f"{module}.jmod"
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as raw:
            raw.write(b"JM\x01\x00")
            with zipfile.ZipFile(raw, "w") as archive:
                for name in entries:
                    archive.writestr(name, b"\xca\xfe\xba\xbe")
        return path

    return _make


# ============================================================================
# WRITER FIXTURES
# ============================================================================

class RecordingWriter:
    """Writer that records every call and hands out sequential ids."""

    def __init__(self, start_id: int = 100):
        self.vertices: List = []
        self.edges: List[Tuple[int, int]] = []
        self._next_id = start_id
        self._lock = threading.Lock()

    def emit_package_information_vertex(self, package) -> int:
        with self._lock:
            self.vertices.append(package)
            package_id = self._next_id
            self._next_id += 1
            return package_id

    def emit_package_information_edge(self, moniker_id: int, package_id: int) -> None:
        with self._lock:
            self.edges.append((moniker_id, package_id))


@pytest.fixture
def writer():
    return RecordingWriter()
