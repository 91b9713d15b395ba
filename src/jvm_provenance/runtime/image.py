"""
Runtime image membership probes.

A modular runtime keeps the JDK classes in an image instead of jars on disk.
The resolution engine only needs one question answered about it: does the
image contain a given classfile? Implementations answer that question; the
engine memoizes positive answers.
"""

import os
import shutil
import subprocess
import threading
import zipfile
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Protocol, Set

from jvm_provenance.logging_config import logger
from jvm_provenance.scanner import is_indexable_classfile, normalize_classfile_key

JMOD_CLASSES_PREFIX = "classes/"
JIMAGE_MODULE_HEADER = "Module:"
JIMAGE_TIMEOUT_SECONDS = 120


class RuntimeImage(Protocol):
    def contains(self, classfile: str) -> bool:
        ...


class EmptyRuntimeImage:
    """Runtime image that contains nothing. Used when no JDK is available."""

    def contains(self, classfile: str) -> bool:
        return False


class StaticRuntimeImage:
    """Runtime image backed by a fixed set of classfile keys."""

    def __init__(self, classfiles: Iterable[str]):
        self._classfiles: FrozenSet[str] = frozenset(normalize_classfile_key(c) for c in classfiles)

    def contains(self, classfile: str) -> bool:
        return classfile in self._classfiles


class JmodRuntimeImage:
    """
    Runtime image read from the ``jmods`` directory of a JDK home.

    Jmod files are zip archives with a short header; their classfiles live
    under ``classes/``. The listing is read once, on the first probe.
    """

    def __init__(self, java_home: Path):
        self.jmods_dir = Path(java_home) / "jmods"
        self._classfiles: Optional[Set[str]] = None
        self._lock = threading.Lock()

    def _load(self) -> Set[str]:
        classfiles: Set[str] = set()
        if not self.jmods_dir.is_dir():
            logger.warning(f"No jmods directory at '{self.jmods_dir}'; JDK classes will not be attributed")
            return classfiles

        for jmod in sorted(self.jmods_dir.glob("*.jmod")):
            try:
                with zipfile.ZipFile(jmod) as archive:
                    for name in archive.namelist():
                        if not name.startswith(JMOD_CLASSES_PREFIX):
                            continue
                        key = name[len(JMOD_CLASSES_PREFIX):]
                        if is_indexable_classfile(key):
                            classfiles.add(key)
            except (zipfile.BadZipFile, OSError) as e:
                logger.warning(f"Could not read jmod '{jmod}': {e}")

        logger.debug(f"Loaded {len(classfiles)} runtime classfiles from '{self.jmods_dir}'")
        return classfiles

    def contains(self, classfile: str) -> bool:
        with self._lock:
            if self._classfiles is None:
                self._classfiles = self._load()
            return classfile in self._classfiles


def parse_jimage_listing(text: str) -> Set[str]:
    """
    Classfile keys from the output of ``jimage list``.

    The listing names each module on a ``Module: <name>`` line followed by
    its resources, one per indented line. Resources outside a module section
    are ignored.
    """
    classfiles: Set[str] = set()
    in_module = False
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith(JIMAGE_MODULE_HEADER):
            in_module = True
            continue
        if not in_module or not line[:1].isspace():
            continue
        key = normalize_classfile_key(stripped)
        if is_indexable_classfile(key):
            classfiles.add(key)
    return classfiles


def find_jimage_binary(java_home: Path) -> Optional[str]:
    candidate = Path(java_home) / "bin" / ("jimage.exe" if os.name == "nt" else "jimage")
    if candidate.is_file():
        return str(candidate)
    return shutil.which("jimage")


class JimageRuntimeImage:
    """
    Runtime image read from ``lib/modules``, the image the JVM itself loads
    JDK classes from. Used for JDKs that ship without ``jmods``.

    The image is listed once, on the first probe, with the JDK's ``jimage``
    tool. A failed listing is logged and leaves the image empty.
    """

    def __init__(self, java_home: Path, timeout: float = JIMAGE_TIMEOUT_SECONDS):
        self.java_home = Path(java_home)
        self.modules_file = self.java_home / "lib" / "modules"
        self.timeout = timeout
        self._classfiles: Optional[Set[str]] = None
        self._lock = threading.Lock()

    def _load(self) -> Set[str]:
        jimage = find_jimage_binary(self.java_home)
        if jimage is None:
            logger.warning(f"No jimage tool for '{self.java_home}'; JDK classes will not be attributed")
            return set()

        command = [jimage, "list", str(self.modules_file)]
        logger.debug(f"Listing runtime image: {' '.join(command)}")
        try:
            completed = subprocess.run(command, capture_output=True, text=True, timeout=self.timeout)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"Could not list runtime image '{self.modules_file}': {e}")
            return set()
        if completed.returncode != 0:
            logger.warning(
                f"Listing runtime image '{self.modules_file}' exited with status {completed.returncode}"
            )
            return set()

        classfiles = parse_jimage_listing(completed.stdout)
        logger.debug(f"Loaded {len(classfiles)} runtime classfiles from '{self.modules_file}'")
        return classfiles

    def contains(self, classfile: str) -> bool:
        with self._lock:
            if self._classfiles is None:
                self._classfiles = self._load()
            return classfile in self._classfiles


def default_runtime_image(is_legacy: bool, java_home: Optional[Path]) -> RuntimeImage:
    """
    Pick the membership probe for a runtime: ``jmods`` when the JDK ships
    them, otherwise ``lib/modules``. Legacy runtimes and unknown homes get
    an empty image.
    """
    if is_legacy or java_home is None:
        return EmptyRuntimeImage()
    java_home = Path(java_home)
    if (java_home / "jmods").is_dir():
        return JmodRuntimeImage(java_home)
    if (java_home / "lib" / "modules").is_file():
        return JimageRuntimeImage(java_home)
    logger.warning(f"No jmods or lib/modules under '{java_home}'; JDK classes will not be attributed")
    return EmptyRuntimeImage()
