from typing import List

import pathspec

from jvm_provenance.exceptions import ConfigError

# Archives the scanner is willing to open. Anything else a build declares
# (class directories, project references) is skipped. Patterns are matched
# against the file name only.
DEFAULT_ARCHIVE_PATTERNS = [
    "*.jar",
]

CLASSFILE_SUFFIX = ".class"

# Nested and synthetic classes ("Outer$Inner.class", "Foo$1.class") are never indexed.
NESTED_CLASS_MARKER = "$"


def validate_archive_patterns(patterns: List[str]) -> None:
    """
    Validate archive glob patterns.

    Raises:
        ConfigError: If patterns are invalid or malformed.
    """
    if not isinstance(patterns, list) or not patterns:
        raise ConfigError("Archive patterns must be a non-empty list of strings")

    for pattern in patterns:
        if not isinstance(pattern, str):
            raise ConfigError(f"Invalid archive pattern: {pattern} (must be a string)")
        if not pattern.strip():
            raise ConfigError("Archive patterns cannot be empty or whitespace-only")


def build_archive_spec(patterns: List[str] = None) -> pathspec.PathSpec:
    patterns = DEFAULT_ARCHIVE_PATTERNS if patterns is None else patterns
    validate_archive_patterns(patterns)
    return pathspec.PathSpec.from_lines("gitignore", patterns)


ARCHIVE_SPEC = build_archive_spec()
