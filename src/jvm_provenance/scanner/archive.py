import zipfile
from pathlib import Path, PurePath
from typing import Dict, Iterable, Optional, Union

import pathspec

from jvm_provenance.exceptions import ArchiveScanError
from jvm_provenance.logging_config import logger
from jvm_provenance.schemas import DeclaredArtifact, Package
from .config import ARCHIVE_SPEC, CLASSFILE_SUFFIX, NESTED_CLASS_MARKER

# classfile key -> owning package
ResolutionTable = Dict[str, Package]


def normalize_classfile_key(path: Union[str, PurePath]) -> str:
    """
    Return a classfile path with forward slashes and no leading separator,
    regardless of the host filesystem convention.
    """
    if isinstance(path, PurePath):
        path = "/".join(path.parts)
    return path.replace("\\", "/").lstrip("/")


def is_indexable_classfile(name: str) -> bool:
    return name.endswith(CLASSFILE_SUFFIX) and NESTED_CLASS_MARKER not in name


def is_jar_candidate(path: Path, spec: Optional[pathspec.PathSpec] = None) -> bool:
    """
    True when the file name matches the archive glob and ``path`` is a regular
    file on disk. Directories, other file types, files inside a directory named
    like a jar and dangling symlinks are not candidates.
    """
    spec = spec or ARCHIVE_SPEC
    # Match the final component only; a directory pattern would also match its contents.
    if not spec.match_file(path.name):
        return False
    return path.is_file()


def scan_archive(path: Path, package: Package, table: ResolutionTable) -> int:
    """
    Record every top-level classfile of a jar as belonging to ``package``.

    The first package recorded for a key keeps it; later archives never
    overwrite an existing association.

    Args:
        path: Jar file to enumerate.
        package: Package that owns the archive.
        table: Resolution table to populate.

    Returns:
        Number of keys this archive added to the table.

    Raises:
        ArchiveScanError: If the archive cannot be opened or read.
    """
    added = 0
    shadowed = 0
    try:
        with zipfile.ZipFile(path) as jar:
            for name in jar.namelist():
                if not is_indexable_classfile(name):
                    continue
                if name in table:
                    shadowed += 1
                    continue
                table[name] = package
                added += 1
    except (zipfile.BadZipFile, OSError) as e:
        raise ArchiveScanError(str(path), str(e)) from e

    if shadowed:
        logger.debug(f"{shadowed} classfiles in '{path}' were already claimed by earlier archives")
    logger.debug(f"Indexed {added} classfiles from '{path}' as {package.coordinates}")
    return added


def index_declared_artifacts(artifacts: Iterable[DeclaredArtifact], table: ResolutionTable) -> int:
    """
    Scan declared artifacts in declaration order.

    Artifacts that are not regular jar files are skipped silently; an
    unreadable jar aborts the whole pass.

    Returns:
        Total number of classfile keys added.
    """
    total = 0
    for declared in artifacts:
        if not is_jar_candidate(declared.path):
            logger.debug(f"Skipping '{declared.path}' for {declared.package.coordinates}: not a jar file")
            continue
        total += scan_archive(declared.path, declared.package, table)
    return total
