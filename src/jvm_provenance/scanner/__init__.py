from .archive import (
    ResolutionTable,
    index_declared_artifacts,
    is_indexable_classfile,
    is_jar_candidate,
    normalize_classfile_key,
    scan_archive,
)
from .config import DEFAULT_ARCHIVE_PATTERNS, build_archive_spec

__all__ = [
    "ResolutionTable",
    "index_declared_artifacts",
    "is_indexable_classfile",
    "is_jar_candidate",
    "normalize_classfile_key",
    "scan_archive",
    "DEFAULT_ARCHIVE_PATTERNS",
    "build_archive_spec",
]
